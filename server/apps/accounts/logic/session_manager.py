"""Authentication token management.

Tokens are opaque random strings mapped to a user id in the credential
store. They expire on their own after ``AUTH_TOKEN_TTL`` seconds and are
never renewed: clients sign in again once a token is gone.
"""

import logging
import secrets
from typing import TYPE_CHECKING, Final

from django.conf import settings
from django.contrib.auth import get_user_model

from server.apps.accounts.exceptions import UnauthenticatedError

if TYPE_CHECKING:
    from server.apps.accounts.infrastructure.credential_store import (
        CredentialStore,
    )

logger = logging.getLogger(__name__)

# Token length in bytes (generates 32 hex chars)
_TOKEN_BYTES: Final = 16
_TOKEN_KEY_PREFIX: Final = 'auth_'


def get_token_ttl() -> int:
    """Get token lifetime in seconds.

    Returns:
        TTL from settings or default of 86400 (24 hours).
    """
    return getattr(settings, 'AUTH_TOKEN_TTL', 86400)


def token_key(token: str) -> str:
    """Build the credential store key of a token.

    Args:
        token: Token handed to the client.

    Returns:
        Store key (e.g., 'auth_3f2b...').
    """
    return f'{_TOKEN_KEY_PREFIX}{token}'


def issue_token(store: 'CredentialStore', email: str, password: str) -> str:
    """Sign a user in and create a token.

    Args:
        store: Credential store for tokens.
        email: Email of the user.
        password: Password in clear text.

    Returns:
        New token.

    Raises:
        UnauthenticatedError: If no user has this email or the password
            doesn't match.
    """
    user = get_user_model().objects.filter(email=email).first()
    if user is None or not user.check_password(password):
        logger.warning('Authentication failed for email: %s', email)
        raise UnauthenticatedError('Invalid credentials')

    token = secrets.token_hex(_TOKEN_BYTES)
    store.set(token_key(token), str(user.id), get_token_ttl())

    logger.info('Token issued for user %d: %s', user.id, token[:8])
    return token


def resolve_token(store: 'CredentialStore', token: str | None) -> int:
    """Get the id of the user owning a token.

    Args:
        store: Credential store for tokens.
        token: Token sent by the client.

    Returns:
        User id.

    Raises:
        UnauthenticatedError: If token is missing, unknown or expired.
    """
    if not token:
        raise UnauthenticatedError('Missing token')

    user_id = store.get(token_key(token))
    if user_id is None:
        logger.debug('Unknown or expired token: %s', token[:8])
        raise UnauthenticatedError('Unknown token')
    return int(user_id)


def revoke_token(store: 'CredentialStore', token: str) -> None:
    """Delete a token.

    Revoking an unknown or expired token does nothing.

    Args:
        store: Credential store for tokens.
        token: Token to revoke.
    """
    if store.delete(token_key(token)):
        logger.info('Token revoked: %s', token[:8])
