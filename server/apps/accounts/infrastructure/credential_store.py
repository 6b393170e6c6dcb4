"""Key-value store with expiry used for authentication tokens."""

import logging
import secrets
from typing import Final, final

from django.apps import apps
from django.core.cache import BaseCache, caches

logger = logging.getLogger(__name__)

_PROBE_KEY_PREFIX: Final = 'health_probe_'
_PROBE_TTL: Final = 5


@final
class CredentialStore:
    """Handle on one of the configured Django caches.

    Expiry is left to the cache backend: Redis evicts keys on its own,
    nothing here polls for stale entries.
    """

    def __init__(self, alias: str) -> None:
        """Initialize the handle without connecting.

        Args:
            alias: Name of the entry in the CACHES setting.
        """
        self.alias = alias

    def connect(self) -> BaseCache:
        """Get the cache client of the current thread.

        Returns:
            Cache backend instance.
        """
        return caches[self.alias]

    def close(self) -> None:
        """Close the cache client of the current thread."""
        self.connect().close()

    def get(self, key: str) -> str | None:
        """Get the value stored under a key.

        Args:
            key: Key to look up.

        Returns:
            Stored value, or None if absent or expired.
        """
        return self.connect().get(key)

    def set(self, key: str, value: str, ttl: int) -> None:  # noqa: WPS125
        """Store a value that expires after ``ttl`` seconds.

        Args:
            key: Key to set.
            value: Value to store.
            ttl: Time to live in seconds.
        """
        self.connect().set(key, value, timeout=ttl)

    def delete(self, key: str) -> bool:
        """Delete a key.

        Args:
            key: Key to delete.

        Returns:
            True if the key existed.
        """
        return bool(self.connect().delete(key))

    def is_alive(self) -> bool:
        """Check that the backend answers a write and a read.

        Returns:
            True if the round trip succeeded.
        """
        probe_key = _PROBE_KEY_PREFIX + secrets.token_hex(4)
        try:
            cache = self.connect()
            cache.set(probe_key, '1', timeout=_PROBE_TTL)
            alive = cache.get(probe_key) == '1'
            cache.delete(probe_key)
        except Exception:
            logger.warning('Credential store is not reachable', exc_info=True)
            return False
        return alive


def get_credential_store() -> CredentialStore:
    """Get the store handle created when the accounts app is ready.

    Returns:
        Shared CredentialStore instance.
    """
    return apps.get_app_config('accounts').credential_store  # type: ignore[attr-defined]
