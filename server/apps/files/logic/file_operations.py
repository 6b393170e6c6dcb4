"""Business logic for file operations."""

import logging
import sys
from typing import TYPE_CHECKING, Final, NamedTuple

import pika
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.db import transaction

from server.apps.files.exceptions import (
    InternalError,
    InvalidArgumentError,
    InvalidOperationError,
    NotFoundError,
)
from server.apps.files.infrastructure.metadata import (
    decode_content,
    detect_mime_type,
    generate_storage_path,
    thumbnail_path,
)
from server.apps.files.logic.parents import ParentRef
from server.apps.files.models import File, FileKind

if TYPE_CHECKING:
    from server.apps.files.infrastructure.queue import JobQueue
    from server.apps.files.infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)

PAGE_SIZE: Final = 20

# Pages past this would overflow the database OFFSET
_MAX_PAGE: Final = sys.maxsize // PAGE_SIZE - 1

# Widths produced by the thumbnail worker, largest first
THUMBNAIL_WIDTHS: Final = (500, 250, 100)

_STORAGE_ERRORS: Final = (BotoCoreError, ClientError, OSError)


class FileContent(NamedTuple):
    """Bytes of a stored file ready to be sent to a client."""

    content: bytes
    content_type: str


def get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def parse_id(raw: object) -> int | None:
    """Parse a client supplied record id.

    Args:
        raw: Value from the URL or a job message.

    Returns:
        Positive integer id, or None if the value can't be an id.
    """
    try:
        file_id = int(str(raw))
    except ValueError:
        return None
    if file_id <= 0:
        return None
    return file_id


def parse_page(raw: object) -> int:
    """Parse a page number, falling back to the first page.

    Args:
        raw: Value from the query string.

    Returns:
        Page number, never negative.
    """
    try:
        page = int(str(raw))
    except ValueError:
        return 0
    return max(page, 0)


def upload_file(  # noqa: WPS211
    owner_id: int,
    *,
    name: str | None,
    kind: str | None,
    parent: object = None,
    is_public: bool = False,
    data: str | None = None,
    job_queue: 'JobQueue | None' = None,
) -> File:
    """Create a folder, or store a file or image and create its record.

    Validation happens before anything is written. Content is uploaded
    to storage first, then the database record is created; if the
    record can't be created the uploaded blob is deleted again.

    For images a thumbnail job is enqueued afterwards. Enqueueing is
    best effort: when the broker is unavailable the failure is logged
    and the upload still succeeds, the image just gets no thumbnails.

    Args:
        owner_id: ID of the authenticated user.
        name: Display name of the new record.
        kind: One of 'folder', 'file', 'image'.
        parent: Raw parent id, root when empty or 0.
        is_public: Initial visibility.
        data: Base64 encoded content, required unless kind is folder.
        job_queue: Queue for thumbnail jobs, required to schedule
            thumbnails of images.

    Returns:
        Created File instance.

    Raises:
        InvalidArgumentError: If the request is incomplete, the name is
            too long or the parent is not an existing folder of the owner.
        InternalError: If storing the content fails.
    """
    if not name or not isinstance(name, str):
        raise InvalidArgumentError('Missing name')
    if len(name) > File._meta.get_field('name').max_length:
        raise InvalidArgumentError('Name too long')
    if kind not in FileKind.values:
        raise InvalidArgumentError('Missing type')
    if kind != FileKind.FOLDER and not data:
        raise InvalidArgumentError('Missing data')

    parent_ref = _validate_parent(owner_id, parent)

    if kind == FileKind.FOLDER:
        folder = File.objects.create(
            owner_id=owner_id,
            name=name,
            kind=kind,
            parent_id=parent_ref.file_id,
            is_public=bool(is_public),
        )
        logger.info('Folder created: %s (ID: %d)', name, folder.id)
        return folder

    try:
        content = decode_content(data or '')
    except ValueError as error:
        raise InvalidArgumentError('Missing data') from error

    file_instance = _store_file(
        owner_id,
        name=name,
        kind=kind,
        parent_ref=parent_ref,
        is_public=bool(is_public),
        content=content,
    )

    if kind == FileKind.IMAGE:
        schedule_thumbnails(file_instance, job_queue)

    return file_instance


def _validate_parent(owner_id: int, parent: object) -> ParentRef:
    """Check that the parent is root or a folder of the owner.

    Args:
        owner_id: ID of the uploading user.
        parent: Raw parent id.

    Returns:
        Normalized parent reference.

    Raises:
        InvalidArgumentError: If parent is missing or not a folder.
    """
    try:
        parent_ref = ParentRef.parse(parent)
    except ValueError as error:
        raise InvalidArgumentError('Parent not found') from error

    if parent_ref.is_root:
        return parent_ref

    parent_kind = File.objects.filter(
        id=parent_ref.file_id,
        owner_id=owner_id,
    ).values_list('kind', flat=True).first()

    if parent_kind is None:
        raise InvalidArgumentError('Parent not found')
    if parent_kind != FileKind.FOLDER:
        raise InvalidArgumentError('Parent is not a folder')
    return parent_ref


def _store_file(  # noqa: WPS211
    owner_id: int,
    *,
    name: str,
    kind: str,
    parent_ref: ParentRef,
    is_public: bool,
    content: bytes,
) -> File:
    storage = get_storage()
    storage_path = generate_storage_path(settings.FILES_ROOT)

    # Step 1: Upload to storage first
    try:
        saved_name = storage.save(storage_path, ContentFile(content))
    except _STORAGE_ERRORS as error:
        raise InternalError() from error

    # Step 2: Create database record (in transaction)
    try:
        with transaction.atomic():
            file_instance = File.objects.create(
                owner_id=owner_id,
                name=name,
                kind=kind,
                parent_id=parent_ref.file_id,
                is_public=is_public,
                local_path=saved_name,
            )
    except Exception:
        # Rollback: Delete blob from storage since DB transaction failed
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise

    logger.info(
        'File record created in database: %s (ID: %d)',
        saved_name,
        file_instance.id,
    )
    return file_instance


def schedule_thumbnails(
    file_instance: File,
    job_queue: 'JobQueue | None',
) -> bool:
    """Enqueue a thumbnail job for an image, best effort.

    Args:
        file_instance: Freshly created image record.
        job_queue: Queue for thumbnail jobs.

    Returns:
        True if the job was enqueued, False otherwise.
    """
    if job_queue is None:
        logger.warning(
            'No job queue configured, thumbnails skipped for file ID: %d',
            file_instance.id,
        )
        return False

    try:
        job_queue.enqueue({
            'fileId': file_instance.id,
            'userId': file_instance.owner_id,
        })
    except (pika.exceptions.AMQPError, OSError):
        logger.warning(
            'Failed to enqueue thumbnail job, file ID: %d',
            file_instance.id,
            exc_info=True,
        )
        return False
    return True


def get_file(owner_id: int, file_id: object) -> File:
    """Get a record owned by the user.

    Args:
        owner_id: ID of the authenticated user.
        file_id: Raw file id.

    Returns:
        File instance.

    Raises:
        NotFoundError: If the id is malformed, absent or owned by
            somebody else.
    """
    parsed_id = parse_id(file_id)
    if parsed_id is None:
        raise NotFoundError()
    try:
        return File.objects.get(id=parsed_id, owner_id=owner_id)
    except File.DoesNotExist as error:
        raise NotFoundError() from error


def list_files(owner_id: int, parent: object = None, page: object = 0) -> list[File]:
    """List one page of the user's records inside a folder.

    Bad pagination never fails: invalid pages fall back to the first
    page and a parent that can't be an id gives an empty page.

    Args:
        owner_id: ID of the authenticated user.
        parent: Raw parent id, root when empty or 0.
        page: Raw page number.

    Returns:
        Up to PAGE_SIZE records ordered by id.
    """
    try:
        parent_ref = ParentRef.parse(parent)
    except ValueError:
        logger.debug('Listing with invalid parent: %r', parent)
        return []

    page_number = parse_page(page)
    if page_number > _MAX_PAGE:
        return []

    offset = page_number * PAGE_SIZE
    queryset = File.objects.filter(owner_id=owner_id)
    if parent_ref.is_root:
        queryset = queryset.filter(parent__isnull=True)
    else:
        queryset = queryset.filter(parent_id=parent_ref.file_id)
    return list(queryset.order_by('id')[offset:offset + PAGE_SIZE])


def set_visibility(owner_id: int, file_id: object, *, is_public: bool) -> File:
    """Publish or unpublish a record owned by the user.

    Args:
        owner_id: ID of the authenticated user.
        file_id: Raw file id.
        is_public: New visibility.

    Returns:
        Updated File instance.

    Raises:
        NotFoundError: If the record can't be seen by the user.
    """
    parsed_id = parse_id(file_id)
    if parsed_id is None:
        raise NotFoundError()

    updated = File.objects.filter(
        id=parsed_id,
        owner_id=owner_id,
    ).update(is_public=is_public)
    if not updated:
        raise NotFoundError()

    logger.info(
        'File visibility changed: ID=%d, public=%s',
        parsed_id,
        is_public,
    )
    return File.objects.get(id=parsed_id)


def read_file_content(
    file_id: object,
    user_id: int | None = None,
    size: object = None,
) -> FileContent:
    """Read the content of a file or one of its thumbnails.

    Public files are readable by anyone, private ones only by their
    owner. Private files of other users look exactly like absent ones.

    Args:
        file_id: Raw file id.
        user_id: ID of the authenticated user, None for anonymous.
        size: Requested thumbnail width, original content otherwise.

    Returns:
        Content bytes with a content type guessed from the name.

    Raises:
        NotFoundError: If the record is hidden or its content is not
            stored (yet).
        InvalidOperationError: If the record is a folder.
    """
    parsed_id = parse_id(file_id)
    if parsed_id is None:
        raise NotFoundError()

    file_instance = File.objects.filter(id=parsed_id).first()
    if file_instance is None:
        raise NotFoundError()
    if not file_instance.is_public and file_instance.owner_id != user_id:
        raise NotFoundError()
    if file_instance.is_folder:
        raise InvalidOperationError("A folder doesn't have content")

    storage_path = file_instance.local_path
    width = _parse_thumbnail_width(size)
    if width is not None:
        storage_path = thumbnail_path(storage_path, width)

    try:
        content = get_storage().read_blob(storage_path)
    except _STORAGE_ERRORS as error:
        logger.exception('Failed to read blob: %s', storage_path)
        raise InternalError() from error

    if content is None:
        # Thumbnails show up once the worker processed the image
        logger.debug('Blob not available: %s', storage_path)
        raise NotFoundError()

    return FileContent(
        content=content,
        content_type=detect_mime_type(file_instance.name),
    )


def _parse_thumbnail_width(size: object) -> int | None:
    if size is None or size == '':
        return None
    try:
        width = int(str(size))
    except ValueError:
        return None
    if width in THUMBNAIL_WIDTHS:
        return width
    return None
