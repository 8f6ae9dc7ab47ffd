"""Tests for WorkerConfig defaults and from_settings() wiring."""

from unittest.mock import patch

from transferquota.platform.temporal.worker.config import WorkerConfig


def test_defaults():
    config = WorkerConfig(task_queue="q", graceful_shutdown_timeout_seconds=30)

    assert config.max_concurrent_activities == 4
    assert config.disable_sandbox is False
    assert config.ensure_schedules is True


def test_from_settings_wires_all_fields():
    """from_settings() maps every settings field correctly."""
    with patch("transferquota.platform.temporal.worker.config.settings") as mock:
        mock.TEMPORAL_TASK_QUEUE = "my-queue"
        mock.TEMPORAL_GRACEFUL_SHUTDOWN_TIMEOUT = 60
        mock.TEMPORAL_DISABLE_SANDBOX = True

        config = WorkerConfig.from_settings()

    assert config.task_queue == "my-queue"
    assert config.graceful_shutdown_timeout_seconds == 60
    assert config.disable_sandbox is True
