"""Business logic for users."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from server.apps.accounts.exceptions import (
    InvalidUserDataError,
    UnauthenticatedError,
)

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def create_user(email: str | None, password: str | None) -> _User:
    """Register a user identified by email.

    The email doubles as the username of Django's user model.

    Args:
        email: Email address.
        password: Password in clear text, stored hashed.

    Returns:
        Created user.

    Raises:
        InvalidUserDataError: If a field is missing or the email is taken.
    """
    if not email:
        raise InvalidUserDataError('Missing email')
    if not password:
        raise InvalidUserDataError('Missing password')

    user_model = get_user_model()
    if user_model.objects.filter(email=email).exists():
        raise InvalidUserDataError('Already exist')

    try:
        with transaction.atomic():
            user = user_model.objects.create_user(
                username=email,
                email=email,
                password=password,
            )
    except IntegrityError as error:
        # Concurrent registration with the same email
        raise InvalidUserDataError('Already exist') from error

    logger.info('User created: %s (ID: %d)', email, user.id)
    return user


def get_user(user_id: int) -> _User:
    """Get the user a token belongs to.

    Args:
        user_id: ID resolved from a token.

    Returns:
        User instance.

    Raises:
        UnauthenticatedError: If the user no longer exists.
    """
    try:
        return get_user_model().objects.get(id=user_id)
    except get_user_model().DoesNotExist as error:
        raise UnauthenticatedError('Unknown user') from error
