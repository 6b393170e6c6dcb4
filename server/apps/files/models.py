"""Database models for files app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_KIND_MAX_LENGTH: Final = 6
_LOCAL_PATH_MAX_LENGTH: Final = 1024


class FileKind(models.TextChoices):
    """Kinds of records a user can store."""

    FOLDER = 'folder', 'Folder'
    FILE = 'file', 'File'
    IMAGE = 'image', 'Image'


@final
class File(models.Model):
    """File or folder owned by a user.

    Records form a tree through ``parent``: a ``NULL`` parent means the
    record lives at the user's root, any other parent is a folder.

    Content of files and images is stored in the blob storage under
    ``local_path``. Thumbnails of images are not tracked here, they are
    found by convention at ``{local_path}_{width}``.
    """

    # Owner relationship, never reassigned after creation
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    kind = models.CharField(
        max_length=_KIND_MAX_LENGTH,
        choices=FileKind.choices,
    )

    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        related_name='children',
        null=True,
        blank=True,
        help_text='Containing folder, empty for root',
    )

    is_public = models.BooleanField(default=False)

    local_path = models.CharField(
        max_length=_LOCAL_PATH_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Storage key of the content, empty for folders',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        # Stable order for pagination
        ordering: ClassVar[list[str]] = ['id']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize directory listing queries
            models.Index(
                fields=['owner', 'parent'],
                name='files_owner_parent_idx',
            ),
        ]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.CheckConstraint(
                condition=(
                    ~models.Q(kind=FileKind.FOLDER) |
                    models.Q(local_path='')
                ),
                name='files_folder_without_content',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.owner_id}:{self.name} ({self.kind})'

    @property
    def is_folder(self) -> bool:
        """Whether the record is a folder."""
        return self.kind == FileKind.FOLDER
