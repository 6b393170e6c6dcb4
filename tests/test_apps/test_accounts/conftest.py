"""Shared fixtures for accounts app tests."""

import base64

import pytest
from django.contrib.auth import get_user_model

from server.apps.accounts.infrastructure.credential_store import (
    get_credential_store,
)

User = get_user_model()

TEST_PASSWORD = 'testpass123'


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='test@example.com',
        password=TEST_PASSWORD,
        email='test@example.com',
    )


@pytest.fixture
def store():
    """Get the credential store backed by the in-memory test cache.

    Returns:
        Shared CredentialStore instance.
    """
    return get_credential_store()


@pytest.fixture
def basic_auth(user):
    """Build Basic authorization headers for the test user.

    Returns:
        Request headers with valid credentials.
    """
    credentials = f'{user.email}:{TEST_PASSWORD}'.encode()
    encoded = base64.b64encode(credentials).decode('ascii')
    return {'Authorization': f'Basic {encoded}'}
