"""Temporal worker for the transfer quota jobs.

Package structure:
    config.py    - WorkerConfig dataclass
    wiring.py    - Activity and workflow registration (DI wiring)
    __init__.py  - TemporalWorker class and main() entry point
"""

import asyncio
import signal
from datetime import timedelta
from typing import Any

from temporalio.worker import Worker

from transferquota.core.config import settings
from transferquota.core.logging import logger

from .config import WorkerConfig
from .wiring import create_activities, get_workflows

__all__ = [
    "TemporalWorker",
    "WorkerConfig",
    "main",
]


# =============================================================================
# Temporal Worker
# =============================================================================


class TemporalWorker:
    """Temporal worker lifecycle management.

    Responsibilities:
        - Ensure the job schedules exist
        - Start/stop the Temporal worker
        - Handle graceful shutdown
    """

    def __init__(self, config: WorkerConfig) -> None:
        """Initialize the Temporal worker."""
        self._config = config
        self._worker: Worker | None = None
        self._running = False

    async def start(self) -> None:
        """Connect, ensure schedules and run the worker until shutdown."""
        from transferquota.platform.temporal.client import temporal_client
        from transferquota.platform.temporal.schedules import ensure_schedules

        client = await temporal_client.get_client()

        if self._config.ensure_schedules:
            await ensure_schedules(client, settings)

        logger.info(f"Starting Temporal worker on task queue: {self._config.task_queue}")
        self._worker = Worker(
            client,
            task_queue=self._config.task_queue,
            workflows=get_workflows(),
            activities=create_activities(),
            workflow_runner=self._get_sandbox_runner(),
            max_concurrent_activities=self._config.max_concurrent_activities,
            graceful_shutdown_timeout=timedelta(
                seconds=self._config.graceful_shutdown_timeout_seconds
            ),
        )

        self._running = True
        logger.info(
            f"Worker started with graceful shutdown timeout: "
            f"{self._config.graceful_shutdown_timeout_seconds}s"
        )
        await self._worker.run()

    async def stop(self) -> None:
        """Stop the worker and drop the Temporal client."""
        if self._worker and self._running:
            logger.info("Stopping worker gracefully")
            self._running = False
            await self._worker.shutdown()

        from transferquota.platform.temporal.client import temporal_client

        await temporal_client.close()

    def _get_sandbox_runner(self):
        """Get the appropriate sandbox configuration."""
        if self._config.disable_sandbox:
            from temporalio.worker import UnsandboxedWorkflowRunner

            logger.warning("TEMPORAL SANDBOX DISABLED - Use only for debugging!")
            return UnsandboxedWorkflowRunner()

        from temporalio.worker.workflow_sandbox import SandboxedWorkflowRunner

        return SandboxedWorkflowRunner()


# =============================================================================
# Entry Point
# =============================================================================


async def main() -> None:
    """Main entry point for the worker process."""
    if not settings.TEMPORAL_ENABLED:
        logger.error("TEMPORAL_ENABLED is false; the scheduled jobs will not run")
        raise SystemExit(1)

    # 1. Initialize DI container (fail fast if wiring is broken)
    from transferquota.core.container import initialize_container

    logger.info("Initializing dependency injection container...")
    initialize_container(settings)

    # 2. Create worker with config
    worker = TemporalWorker(WorkerConfig.from_settings())

    # 3. Set up signal handlers
    def signal_handler(signum: int, frame: Any) -> None:
        logger.info(f"Received signal {signum}, shutting down...")
        asyncio.create_task(worker.stop())

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # 4. Run worker
    try:
        await worker.start()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        await worker.stop()
