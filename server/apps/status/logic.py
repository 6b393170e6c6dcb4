"""Health checks and counters of the service."""

import logging

from django.contrib.auth import get_user_model
from django.db import DatabaseError, connection

from server.apps.accounts.infrastructure.credential_store import (
    CredentialStore,
)
from server.apps.files.models import File

logger = logging.getLogger(__name__)


def is_database_alive() -> bool:
    """Check that the default database accepts connections.

    Returns:
        True if a connection could be established.
    """
    try:
        connection.ensure_connection()
    except DatabaseError:
        logger.warning('Database is not reachable', exc_info=True)
        return False
    return True


def get_status(store: CredentialStore) -> dict[str, bool]:
    """Report whether the backing stores are reachable.

    Args:
        store: Credential store for tokens.

    Returns:
        Flags for the credential store ('redis') and database ('db').
    """
    return {
        'redis': store.is_alive(),
        'db': is_database_alive(),
    }


def get_stats() -> dict[str, int]:
    """Count stored users and files.

    Returns:
        Number of users and of file records.
    """
    return {
        'users': get_user_model().objects.count(),
        'files': File.objects.count(),
    }
