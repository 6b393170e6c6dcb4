"""Tests for File model."""

import pytest
from django.db import IntegrityError, transaction

from server.apps.files.models import File, FileKind


@pytest.mark.django_db
def test_file_model_str(user):
    """Test File __str__ method."""
    folder = File.objects.create(owner=user, name='images', kind=FileKind.FOLDER)

    assert str(folder) == f'{user.id}:images (folder)'


@pytest.mark.django_db
def test_file_is_folder(user):
    """Test is_folder property."""
    folder = File.objects.create(owner=user, name='images', kind=FileKind.FOLDER)
    image = File.objects.create(
        owner=user,
        name='image.png',
        kind=FileKind.IMAGE,
        local_path='files_manager/abc',
    )

    assert folder.is_folder
    assert not image.is_folder


@pytest.mark.django_db
def test_file_defaults(user):
    """Test new records are private and stored at the root."""
    file_instance = File.objects.create(
        owner=user,
        name='a.txt',
        kind=FileKind.FILE,
        local_path='files_manager/abc',
    )

    assert file_instance.is_public is False
    assert file_instance.parent is None
    assert file_instance.created_at is not None


@pytest.mark.django_db
def test_folder_without_content(user):
    """Test folders can't point at stored content."""
    with pytest.raises(IntegrityError), transaction.atomic():
        File.objects.create(
            owner=user,
            name='images',
            kind=FileKind.FOLDER,
            local_path='files_manager/abc',
        )


@pytest.mark.django_db
def test_deleting_folder_deletes_children(user):
    """Test children go away with their folder."""
    folder = File.objects.create(owner=user, name='images', kind=FileKind.FOLDER)
    File.objects.create(
        owner=user,
        name='nested',
        kind=FileKind.FOLDER,
        parent=folder,
    )

    folder.delete()

    assert File.objects.count() == 0
