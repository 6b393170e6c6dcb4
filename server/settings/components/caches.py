"""Cache configuration.

Authentication tokens live in a dedicated cache alias so that
their TTL is enforced by the backend itself (Redis in deployments).
"""

from typing import Final

from server.settings.components import config

AUTH_TOKEN_CACHE: Final = 'auth_tokens'

# 24 hours
AUTH_TOKEN_TTL = config('AUTH_TOKEN_TTL', cast=int, default=86400)

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    },
    AUTH_TOKEN_CACHE: {
        'BACKEND': config(
            'AUTH_TOKEN_CACHE_BACKEND',
            default='django.core.cache.backends.redis.RedisCache',
        ),
        'LOCATION': config('REDIS_URL', default='redis://localhost:6379/0'),
        'KEY_PREFIX': 'files_manager',
        'TIMEOUT': AUTH_TOKEN_TTL,
    },
}
