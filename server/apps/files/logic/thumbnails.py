"""Business logic for image thumbnails.

Thumbnails are produced by a background worker out of band. They are
never recorded in the database: each one is stored next to the original
under ``{local_path}_{width}``, which is where reads look for them.
"""

import io
import logging
from typing import Any, Final

from django.core.files.base import ContentFile
from PIL import Image

from server.apps.files.exceptions import ThumbnailJobError
from server.apps.files.infrastructure.metadata import thumbnail_path
from server.apps.files.logic.file_operations import (
    THUMBNAIL_WIDTHS,
    get_storage,
    parse_id,
)
from server.apps.files.models import File

logger = logging.getLogger(__name__)

_FALLBACK_FORMAT: Final = 'PNG'


def process_thumbnail_job(message: dict[str, Any]) -> list[int]:
    """Handle one message from the thumbnail queue.

    Args:
        message: Decoded job with 'fileId' and 'userId'.

    Returns:
        Widths that were generated.

    Raises:
        ThumbnailJobError: If the message is incomplete or the file
            doesn't exist. The job must not be retried.
    """
    if not isinstance(message, dict):
        raise ThumbnailJobError('Malformed job')
    if not message.get('fileId'):
        raise ThumbnailJobError('Missing fileId')
    if not message.get('userId'):
        raise ThumbnailJobError('Missing userId')

    return generate_thumbnails(message['fileId'], message['userId'])


def generate_thumbnails(file_id: object, owner_id: object) -> list[int]:
    """Generate every thumbnail width for an image.

    Each width is produced on its own: a failing width is logged and
    does not stop the others. Existing thumbnails are overwritten, so
    processing the same file twice gives the same result.

    Args:
        file_id: ID of the image record.
        owner_id: ID of the image owner.

    Returns:
        Widths that were generated.

    Raises:
        ThumbnailJobError: If the record doesn't exist.
    """
    file_instance = _get_image(file_id, owner_id)
    storage = get_storage()

    try:
        source = storage.read_blob(file_instance.local_path)
    except Exception as error:
        logger.exception('Failed to read image: %s', file_instance.local_path)
        raise ThumbnailJobError('Source not readable') from error
    if source is None:
        raise ThumbnailJobError('Source not found')

    generated = []
    for width in THUMBNAIL_WIDTHS:
        target = thumbnail_path(file_instance.local_path, width)
        try:
            storage.save(target, ContentFile(resize_image(source, width)))
        except Exception:
            logger.exception(
                'Failed to generate thumbnail for file %d with width %d',
                file_instance.id,
                width,
            )
            continue
        generated.append(width)

    logger.info(
        'Thumbnails generated for file %d: %s',
        file_instance.id,
        generated,
    )
    return generated


def resize_image(source: bytes, width: int) -> bytes:
    """Resize an image to a width, keeping its aspect ratio.

    Args:
        source: Encoded image.
        width: Target width in pixels.

    Returns:
        Image encoded in the source format.
    """
    with Image.open(io.BytesIO(source)) as image:
        image_format = image.format or _FALLBACK_FORMAT
        height = max(1, round(image.height * width / image.width))
        resized = image.resize((width, height))

    buffer = io.BytesIO()
    resized.save(buffer, format=image_format)
    return buffer.getvalue()


def _get_image(file_id: object, owner_id: object) -> File:
    parsed_id = parse_id(file_id)
    parsed_owner = parse_id(owner_id)
    if parsed_id is None or parsed_owner is None:
        raise ThumbnailJobError('File not found')
    try:
        return File.objects.get(id=parsed_id, owner_id=parsed_owner)
    except File.DoesNotExist as error:
        raise ThumbnailJobError('File not found') from error
