"""Worker configuration."""

from dataclasses import dataclass

from transferquota.core.config import settings


@dataclass(frozen=True)
class WorkerConfig:
    """Worker configuration - all tunables in one place.

    Attributes:
        task_queue: Temporal task queue name
        graceful_shutdown_timeout_seconds: How long to wait for activities to complete
        max_concurrent_activities: Max activities executed at once
        disable_sandbox: Disable Temporal sandbox (debugging only)
        ensure_schedules: Create missing schedules at startup
    """

    task_queue: str
    graceful_shutdown_timeout_seconds: int
    max_concurrent_activities: int = 4
    disable_sandbox: bool = False
    ensure_schedules: bool = True

    @classmethod
    def from_settings(cls) -> "WorkerConfig":
        """Build config from environment settings."""
        return cls(
            task_queue=settings.TEMPORAL_TASK_QUEUE,
            graceful_shutdown_timeout_seconds=settings.TEMPORAL_GRACEFUL_SHUTDOWN_TIMEOUT,
            disable_sandbox=settings.TEMPORAL_DISABLE_SANDBOX,
        )
