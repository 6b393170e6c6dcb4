"""Shared fixtures for files app tests."""

import base64
import io
from unittest import mock

import boto3
import pytest
from django.apps import apps
from django.contrib.auth import get_user_model
from moto import mock_aws
from PIL import Image

from server.apps.accounts.infrastructure.credential_store import (
    get_credential_store,
)
from server.apps.accounts.logic.session_manager import issue_token
from server.apps.files.infrastructure.queue import JobQueue

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
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='other@example.com',
        password=TEST_PASSWORD,
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with files-manager bucket.

    Yields:
        boto3 S3 resource with files-manager bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='files-manager')

        yield conn


@pytest.fixture
def job_queue(monkeypatch):
    """Replace the RabbitMQ queue of the files app with a mock.

    Returns:
        Mock standing in for the shared JobQueue.
    """
    queue = mock.MagicMock(spec=JobQueue)
    queue.queue_name = 'file_thumbnails'
    monkeypatch.setattr(apps.get_app_config('files'), 'job_queue', queue)
    return queue


@pytest.fixture
def png_bytes():
    """Encode a small landscape PNG image.

    Returns:
        PNG of 40x20 pixels.
    """
    buffer = io.BytesIO()
    Image.new('RGB', (40, 20), color=(200, 30, 30)).save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def png_data(png_bytes):
    """Base64 payload of the sample image, as clients send it.

    Returns:
        Base64 string.
    """
    return base64.b64encode(png_bytes).decode('ascii')


@pytest.fixture
def text_data():
    """Base64 payload of a small text file.

    Returns:
        Base64 string of 'Hello Webstack!'.
    """
    return base64.b64encode(b'Hello Webstack!').decode('ascii')


@pytest.fixture
def auth_headers(user):
    """Sign the test user in.

    Returns:
        Request headers carrying a valid token.
    """
    token = issue_token(get_credential_store(), user.email, TEST_PASSWORD)
    return {'X-Token': token}


@pytest.fixture
def other_auth_headers(other_user):
    """Sign the second user in.

    Returns:
        Request headers carrying a valid token of the second user.
    """
    token = issue_token(get_credential_store(), other_user.email, TEST_PASSWORD)
    return {'X-Token': token}
