"""Django management command to run the thumbnail worker."""

import logging
import time
from typing import Any, Final, final, override

import pika
from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import close_old_connections

from server.apps.files.infrastructure.queue import JobQueue, get_job_queue
from server.apps.files.logic.thumbnails import process_thumbnail_job

logger = logging.getLogger(__name__)

_BROKER_ERRORS: Final = (
    pika.exceptions.AMQPConnectionError,
    pika.exceptions.AMQPChannelError,
)


def handle_thumbnail_job(message: dict[str, Any]) -> list[int]:
    """Process one job on a usable database connection.

    Connections that died or outlived CONN_MAX_AGE are dropped before
    and after every job.

    Args:
        message: Decoded job.

    Returns:
        Widths that were generated.
    """
    close_old_connections()
    try:
        return process_thumbnail_job(message)
    finally:
        close_old_connections()


@final
class Command(BaseCommand):
    """Consume thumbnail jobs and write resized images to storage."""

    help = 'Run the worker generating thumbnails of uploaded images'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--retry-delay',
            type=int,
            default=None,
            help='Seconds between reconnect attempts (default: from settings)',
        )
        parser.add_argument(
            '--once',
            action='store_true',
            default=False,
            help='Stop after the first connection ends instead of reconnecting',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments.
            options: Keyword arguments from command line.
        """
        retry_delay = options['retry_delay']
        if retry_delay is None:
            retry_delay = settings.THUMBNAIL_WORKER_RETRY_DELAY
        job_queue = get_job_queue()

        self.stdout.write(
            self.style.SUCCESS(
                f'Thumbnail worker waiting for jobs on {job_queue.queue_name}',
            ),
        )

        try:
            self._run(job_queue, retry_delay, once=options['once'])
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING('\nShutting down...'))

        self.stdout.write(self.style.SUCCESS('Thumbnail worker stopped'))

    def _run(self, job_queue: JobQueue, retry_delay: int, *, once: bool) -> None:
        """Consume jobs, reconnecting when the broker goes away.

        Args:
            job_queue: Queue to consume from.
            retry_delay: Seconds to wait before reconnecting.
            once: Stop after the first connection ends.
        """
        while True:
            try:
                job_queue.consume(handle_thumbnail_job)
            except _BROKER_ERRORS:
                logger.warning('Connection to RabbitMQ failed', exc_info=True)
                self.stderr.write(
                    self.style.ERROR(
                        'Connection to RabbitMQ failed. '
                        f'Retrying in {retry_delay} seconds...',
                    ),
                )

            if once:
                return
            time.sleep(retry_delay)
