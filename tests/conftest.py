"""Fixtures shared by every test."""

import pytest
from django.core.cache import caches

_LOCMEM_BACKEND = 'django.core.cache.backends.locmem.LocMemCache'


@pytest.fixture(autouse=True)
def token_cache(settings):
    """Keep authentication tokens in memory instead of Redis.

    Yields:
        Cache backing the credential store, emptied afterwards.
    """
    settings.CACHES = {
        'default': {'BACKEND': _LOCMEM_BACKEND},
        settings.AUTH_TOKEN_CACHE: {
            'BACKEND': _LOCMEM_BACKEND,
            'LOCATION': 'auth-tokens-tests',
            'TIMEOUT': settings.AUTH_TOKEN_TTL,
        },
    }
    cache = caches[settings.AUTH_TOKEN_CACHE]

    yield cache

    cache.clear()
