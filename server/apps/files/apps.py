"""Django app configuration for files app."""

from typing import TYPE_CHECKING, override

from django.apps import AppConfig
from django.conf import settings

if TYPE_CHECKING:
    from server.apps.files.infrastructure.queue import JobQueue


class FilesConfig(AppConfig):
    """Configuration for files app.

    Owns the thumbnail job queue handle shared by request threads.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.files'
    verbose_name = 'Files'

    job_queue: 'JobQueue'

    @override
    def ready(self) -> None:
        """Create the job queue handle, connection is opened lazily."""
        from server.apps.files.infrastructure.queue import JobQueue  # noqa: PLC0415

        self.job_queue = JobQueue(
            url=settings.RABBITMQ_URL,
            queue_name=settings.THUMBNAIL_QUEUE_NAME,
        )
