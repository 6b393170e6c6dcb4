"""Tests for user business logic."""

import pytest

from server.apps.accounts.exceptions import (
    InvalidUserDataError,
    UnauthenticatedError,
)
from server.apps.accounts.logic.user_operations import create_user, get_user


@pytest.mark.django_db
class TestCreateUser:
    """Tests for registration."""

    def test_create_user(self):
        """Test the password is stored hashed."""
        user = create_user('bob@dylan.com', 'toto1234!')

        assert user.email == 'bob@dylan.com'
        assert user.username == 'bob@dylan.com'
        assert user.password != 'toto1234!'
        assert user.check_password('toto1234!')

    @pytest.mark.parametrize(('email', 'password', 'error'), [
        (None, 'toto1234!', 'Missing email'),
        ('', 'toto1234!', 'Missing email'),
        ('bob@dylan.com', None, 'Missing password'),
        (None, None, 'Missing email'),
    ])
    def test_missing_field(self, email, password, error):
        """Test incomplete registrations."""
        with pytest.raises(InvalidUserDataError, match=error):
            create_user(email, password)

    def test_email_taken(self):
        """Test emails are unique."""
        create_user('bob@dylan.com', 'toto1234!')

        with pytest.raises(InvalidUserDataError, match='Already exist'):
            create_user('bob@dylan.com', 'other')


@pytest.mark.django_db
class TestGetUser:
    """Tests for fetching the token owner."""

    def test_get_user(self, user):
        """Test existing users are returned."""
        assert get_user(user.id) == user

    def test_deleted_user(self):
        """Test tokens of deleted users don't authenticate."""
        with pytest.raises(UnauthenticatedError):
            get_user(99999)
