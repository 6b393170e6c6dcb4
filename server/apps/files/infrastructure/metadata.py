"""Content helpers for stored files."""

import base64
import binascii
import mimetypes
import uuid
from typing import Final

_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from filename.

    Uses Python's built-in mimetypes module to guess MIME type
    from filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_MIME_TYPE
    return mime_type


def decode_content(data: str | bytes) -> bytes:
    """Decode base64 payload sent by clients.

    Args:
        data: Base64 encoded content.

    Returns:
        Raw bytes.

    Raises:
        ValueError: If payload is not valid base64.
    """
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, TypeError, ValueError) as error:
        raise ValueError('Content is not valid base64') from error


def generate_storage_path(root: str) -> str:
    """Generate a collision-free storage key under a root prefix.

    Args:
        root: Storage prefix (e.g., 'files_manager').

    Returns:
        Storage key (e.g., 'files_manager/3f2b...').
    """
    prefix = root.strip('/')
    name = uuid.uuid4().hex
    if not prefix:
        return name
    return f'{prefix}/{name}'


def thumbnail_path(local_path: str, width: int) -> str:
    """Build the storage key of an image thumbnail.

    Thumbnails sit next to the original and are found only by this
    convention, nothing links them in the database.

    Args:
        local_path: Storage key of the original image.
        width: Thumbnail width in pixels.

    Returns:
        Storage key (e.g., 'files_manager/3f2b..._250').
    """
    return f'{local_path}_{width}'
