"""RabbitMQ job queue shared by the upload path and the thumbnail worker."""

import json
import logging
import threading
from collections.abc import Callable
from typing import Any, Final, final

import pika
from django.apps import apps
from pika.adapters.blocking_connection import BlockingChannel
from pika.spec import Basic, BasicProperties

from server.apps.files.exceptions import ThumbnailJobError

logger = logging.getLogger(__name__)

_CONTENT_TYPE: Final = 'application/json'

JobHandler = Callable[[dict[str, Any]], object]


@final
class JobQueue:
    """Durable work queue on top of RabbitMQ.

    Publishing uses one connection per thread and a short-lived channel
    per message, so the client is safe to share between request threads.
    Messages are persistent and acknowledged only after the handler
    finished, which gives at-least-once delivery.
    """

    def __init__(self, url: str, queue_name: str) -> None:
        """Initialize the queue handle without connecting.

        Args:
            url: AMQP URL of the broker.
            queue_name: Name of the durable queue.
        """
        self.url = url
        self.queue_name = queue_name
        self._thread_local = threading.local()

    def connect(self) -> pika.BlockingConnection:
        """Get or create the connection of the current thread.

        Returns:
            Open blocking connection.

        Raises:
            pika.exceptions.AMQPConnectionError: If broker is unreachable.
        """
        connection = getattr(self._thread_local, 'connection', None)
        if connection is None or connection.is_closed:
            logger.debug('Opening RabbitMQ connection for %s', self.queue_name)
            connection = pika.BlockingConnection(
                pika.URLParameters(self.url),
            )
            self._thread_local.connection = connection
        return connection

    def close(self) -> None:
        """Close the connection of the current thread, if any."""
        connection = getattr(self._thread_local, 'connection', None)
        self._thread_local.connection = None
        if connection is None or not connection.is_open:
            return
        try:
            connection.close()
        except (pika.exceptions.AMQPError, OSError):
            # The broker already dropped it
            logger.debug('Closing a dead RabbitMQ connection', exc_info=True)

    def enqueue(self, payload: dict[str, Any]) -> None:
        """Publish a persistent message.

        The broker drops connections that stayed idle past its heartbeat
        without the client noticing. If the cached connection of the
        thread turns out to be dead, the message is published once more
        on a fresh connection.

        Args:
            payload: JSON serializable message body.

        Raises:
            pika.exceptions.AMQPError: If publishing fails.
            OSError: If the socket fails.
        """
        body = json.dumps(payload, default=str)
        reused = self._has_connection()
        try:
            self._publish(body)
        except pika.exceptions.AMQPConnectionError:
            self.close()
            if not reused:
                raise
            logger.info('Stale RabbitMQ connection, reconnecting')
            self._publish_or_close(body)
        except (pika.exceptions.AMQPError, OSError):
            # Drop the broken connection, next publish reconnects
            self.close()
            raise
        logger.info('Enqueued job on %s: %s', self.queue_name, body)

    def _has_connection(self) -> bool:
        connection = getattr(self._thread_local, 'connection', None)
        return connection is not None and not connection.is_closed

    def _publish_or_close(self, body: str) -> None:
        try:
            self._publish(body)
        except (pika.exceptions.AMQPError, OSError):
            self.close()
            raise

    def _publish(self, body: str) -> None:
        with self.connect().channel() as channel:
            channel.queue_declare(queue=self.queue_name, durable=True)
            channel.basic_publish(
                exchange='',
                routing_key=self.queue_name,
                body=body,
                properties=pika.BasicProperties(
                    content_type=_CONTENT_TYPE,
                    delivery_mode=pika.DeliveryMode.Persistent,
                ),
            )

    def consume(self, handler: JobHandler) -> None:
        """Consume messages one at a time until the connection stops.

        Args:
            handler: Called with each decoded message. Raising
                ThumbnailJobError drops the message, any other
                exception is logged and the message dropped as well.

        Raises:
            pika.exceptions.AMQPConnectionError: If broker is unreachable.
        """
        connection = pika.BlockingConnection(pika.URLParameters(self.url))
        try:
            channel = connection.channel()
            channel.queue_declare(queue=self.queue_name, durable=True)
            channel.basic_qos(prefetch_count=1)
            channel.basic_consume(
                queue=self.queue_name,
                on_message_callback=_make_callback(handler),
            )
            logger.info('Waiting for jobs on %s', self.queue_name)
            channel.start_consuming()
        finally:
            if connection.is_open:
                connection.close()


def _make_callback(handler: JobHandler) -> Callable[..., None]:
    def on_message(  # noqa: WPS430
        channel: BlockingChannel,
        method: Basic.Deliver,
        properties: BasicProperties,
        body: bytes,
    ) -> None:
        try:
            message = json.loads(body)
        except ValueError:
            logger.error('Dropping malformed job: %r', body)
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
            return

        try:
            handler(message)
        except ThumbnailJobError as error:
            logger.error('Dropping job %r: %s', message, error)
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
        except Exception:
            logger.exception('Job failed, dropping: %r', message)
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
        else:
            channel.basic_ack(delivery_tag=method.delivery_tag)

    return on_message


def get_job_queue() -> JobQueue:
    """Get the queue handle created when the files app is ready.

    Returns:
        Shared JobQueue instance.
    """
    return apps.get_app_config('files').job_queue  # type: ignore[attr-defined]
