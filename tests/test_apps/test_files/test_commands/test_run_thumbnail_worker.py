"""Tests for run_thumbnail_worker management command."""

from io import StringIO
from unittest import mock

import pika
import pytest
from django.core.management import call_command
from django.db import DatabaseError

from server.apps.files.management.commands.run_thumbnail_worker import (
    handle_thumbnail_job,
)

_COMMAND_MODULE = 'server.apps.files.management.commands.run_thumbnail_worker'
_SLEEP = f'{_COMMAND_MODULE}.time.sleep'


class TestRunThumbnailWorkerCommand:
    """Tests for run_thumbnail_worker management command."""

    def test_consumes_thumbnail_jobs(self, job_queue):
        """Test the worker hands every job to the thumbnail logic."""
        out = StringIO()

        call_command('run_thumbnail_worker', once=True, stdout=out)

        job_queue.consume.assert_called_once_with(handle_thumbnail_job)
        output = out.getvalue()
        assert 'waiting for jobs on file_thumbnails' in output
        assert 'Thumbnail worker stopped' in output

    def test_broker_unavailable(self, job_queue):
        """Test connection failures are reported."""
        job_queue.consume.side_effect = pika.exceptions.AMQPConnectionError()
        out = StringIO()
        err = StringIO()

        call_command(
            'run_thumbnail_worker',
            once=True,
            retry_delay=3,
            stdout=out,
            stderr=err,
        )

        assert 'Retrying in 3 seconds' in err.getvalue()

    def test_reconnects_after_failure(self, job_queue, settings):
        """Test the worker waits and consumes again after a failure."""
        settings.THUMBNAIL_WORKER_RETRY_DELAY = 7
        job_queue.consume.side_effect = [
            pika.exceptions.AMQPConnectionError(),
            KeyboardInterrupt(),
        ]
        out = StringIO()

        with mock.patch(_SLEEP) as sleep:
            call_command(
                'run_thumbnail_worker',
                stdout=out,
                stderr=StringIO(),
            )

        sleep.assert_called_once_with(7)
        assert job_queue.consume.call_count == 2
        assert 'Shutting down...' in out.getvalue()

    def test_keyboard_interrupt(self, job_queue):
        """Test Ctrl+C stops the worker cleanly."""
        job_queue.consume.side_effect = KeyboardInterrupt()
        out = StringIO()

        call_command('run_thumbnail_worker', stdout=out)

        output = out.getvalue()
        assert 'Shutting down...' in output
        assert 'Thumbnail worker stopped' in output

    def test_reconnects_after_channel_closed(self, job_queue):
        """Test a channel closed by the broker triggers a reconnect."""
        job_queue.consume.side_effect = [
            pika.exceptions.ChannelClosedByBroker(404, 'NOT_FOUND'),
            KeyboardInterrupt(),
        ]
        err = StringIO()

        with mock.patch(_SLEEP):
            call_command(
                'run_thumbnail_worker',
                retry_delay=0,
                stdout=StringIO(),
                stderr=err,
            )

        assert job_queue.consume.call_count == 2
        assert 'Retrying in 0 seconds' in err.getvalue()


class TestHandleThumbnailJob:
    """Tests for the per-job wrapper used by the worker."""

    def test_refreshes_database_connections(self):
        """Test stale connections are dropped before and after a job."""
        calls = []
        with (
            mock.patch(
                f'{_COMMAND_MODULE}.close_old_connections',
                side_effect=lambda: calls.append('close'),
            ),
            mock.patch(
                f'{_COMMAND_MODULE}.process_thumbnail_job',
                side_effect=lambda message: calls.append('job') or [500],
            ),
        ):
            generated = handle_thumbnail_job({'fileId': 1, 'userId': 2})

        assert generated == [500]
        assert calls == ['close', 'job', 'close']

    def test_refreshes_connections_when_job_fails(self):
        """Test connections are dropped even if the job raises."""
        with (
            mock.patch(f'{_COMMAND_MODULE}.close_old_connections') as close,
            mock.patch(
                f'{_COMMAND_MODULE}.process_thumbnail_job',
                side_effect=DatabaseError('server closed the connection'),
            ),
        ):
            with pytest.raises(DatabaseError):
                handle_thumbnail_job({'fileId': 1, 'userId': 2})

        assert close.call_count == 2
