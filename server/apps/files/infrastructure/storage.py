"""Blob store for uploaded content and image thumbnails."""

import logging
from typing import Any, final, override

from botocore.exceptions import ClientError
from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """S3 bucket holding originals under ``FILES_ROOT/<uuid>`` keys.

    Thumbnails are written next to their original as
    ``<key>_<width>`` and replace any previous version in place, which
    is why the storage is configured with ``file_overwrite``. Blobs are
    only ever read whole: ``read_blob`` answers None for a missing key
    so callers can tell "not generated yet" from a storage failure.
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Write a blob, logging the key.

        Args:
            name: Original or thumbnail key.
            content: Bytes wrapped in a Django File.
            max_length: Optional maximum length for the key.

        Returns:
            Key the blob was written under.
        """
        try:
            saved_name = super().save(name, content, max_length)
        except Exception:
            logger.exception('Failed to write blob: %s', name)
            raise
        logger.info('Blob written: %s', saved_name)
        return saved_name

    def read_blob(self, name: str) -> bytes | None:
        """Read the whole blob stored under a key.

        Args:
            name: Storage key to read.

        Returns:
            Blob bytes, or None if nothing is stored under the key.
        """
        try:
            with self.open(name, 'rb') as blob:
                return blob.read()
        except FileNotFoundError:
            return None
        except ClientError as error:
            if _is_missing_key(error):
                return None
            raise

    def rollback_upload(self, name: str) -> None:
        """Remove the original of an upload whose record wasn't created.

        Never raises: the upload already failed and that error is the one
        reported to the client.

        Args:
            name: Key returned by ``save``.
        """
        try:
            self.delete(name)
        except Exception:
            logger.exception('Orphaned blob left in storage: %s', name)
            return
        logger.warning('Upload rolled back, blob deleted: %s', name)


def _is_missing_key(error: ClientError) -> bool:
    code = error.response.get('Error', {}).get('Code')
    status = error.response.get('ResponseMetadata', {}).get('HTTPStatusCode')
    return code in {'404', 'NoSuchKey'} or status == 404
