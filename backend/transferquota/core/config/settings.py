"""Application settings.

All values are loaded from environment variables (or a local ``.env`` file)
through Pydantic Settings. Global warning/critical percentages are NOT
configured here at runtime: they live in the database and fall back to the
``DEFAULT_*_THRESHOLD`` values below when unset.
"""

from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transferquota.core.config.enums import Environment, IdempotencyBackend

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Transfer quota settings.

    Attributes:
    ----------
        ENVIRONMENT: Deployment environment (local, test, dev, prd)
        LOG_LEVEL: Root log level
        POSTGRES_*: Database connection parameters
        SQLALCHEMY_ASYNC_DATABASE_URI: Full async URI; derived from POSTGRES_* when unset
        REDIS_*: Redis connection parameters (idempotency store, in-app notifications)
        TEMPORAL_*: Temporal connection and worker parameters
        RESEND_*: Outbound e-mail transport
        ACCOUNT_DIRECTORY_FILE: JSON export of host accounts used to address notices
        DEDUP_*: Ingestion deduplication window and table bound
        NOTIFICATION_SUPPRESSION_SECONDS: Secondary notification guard TTL
        AGGREGATION_INTERVAL_MINUTES: Period of the count aggregation job
        AVERAGE_DOWNLOAD_SIZE_BYTES: Size estimate per counted download
        EXTERNAL_COUNTER_*: Where the host keeps its running download counters
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"
    INSTANCE_NAME: str = "Transfer Quota"
    APP_FULL_URL: Optional[str] = None

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "transferquota"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "transferquota"
    POSTGRES_SSLMODE: str = "prefer"
    SQLALCHEMY_ASYNC_DATABASE_URI: Optional[str] = None
    db_pool_size: int = 10
    db_pool_max_overflow: int = 20

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0
    IDEMPOTENCY_BACKEND: IdempotencyBackend = IdempotencyBackend.REDIS

    # Temporal
    TEMPORAL_ENABLED: bool = True
    TEMPORAL_HOST: str = "localhost"
    TEMPORAL_PORT: int = 7233
    TEMPORAL_NAMESPACE: str = "default"
    TEMPORAL_TASK_QUEUE: str = "transfer-quota"
    TEMPORAL_GRACEFUL_SHUTDOWN_TIMEOUT: int = 30
    TEMPORAL_DISABLE_SANDBOX: bool = False

    # E-mail
    RESEND_API_KEY: Optional[str] = None
    RESEND_FROM_EMAIL: str = "noreply@localhost"

    # Account directory
    ACCOUNT_DIRECTORY_FILE: Optional[str] = None

    # Quota behaviour
    DEFAULT_WARNING_THRESHOLD: int = Field(80, ge=1, le=100)
    DEFAULT_CRITICAL_THRESHOLD: int = Field(95, ge=1, le=100)
    DEDUP_WINDOW_SECONDS: int = 300
    DEDUP_MAX_ENTRIES: int = 100
    NOTIFICATION_SUPPRESSION_SECONDS: int = 300

    # Scheduled jobs
    AGGREGATION_INTERVAL_MINUTES: int = 5
    AVERAGE_DOWNLOAD_SIZE_BYTES: int = 2 * MIB
    EXTERNAL_COUNTER_TABLE: str = "preferences"
    EXTERNAL_COUNTER_APP_ID: str = "user_usage_report"
    EXTERNAL_COUNTER_KEY: str = "read"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def _build_database_uri(self) -> "Settings":
        """Derive the async database URI from the POSTGRES_* parts when unset."""
        if not self.SQLALCHEMY_ASYNC_DATABASE_URI:
            self.SQLALCHEMY_ASYNC_DATABASE_URI = (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
        return self

    @model_validator(mode="after")
    def _check_default_thresholds(self) -> "Settings":
        if self.DEFAULT_WARNING_THRESHOLD >= self.DEFAULT_CRITICAL_THRESHOLD:
            raise ValueError("DEFAULT_WARNING_THRESHOLD must be below DEFAULT_CRITICAL_THRESHOLD")
        return self

    @property
    def temporal_address(self) -> str:
        """Host:port of the Temporal frontend."""
        return f"{self.TEMPORAL_HOST}:{self.TEMPORAL_PORT}"

    @property
    def redis_url(self) -> str:
        """Redis URL including the password when one is configured."""
        if self.REDIS_PASSWORD:
            from urllib.parse import quote

            encoded_pwd = quote(self.REDIS_PASSWORD, safe="")
            return f"redis://:{encoded_pwd}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite (tests, local tinkering)."""
        return str(self.SQLALCHEMY_ASYNC_DATABASE_URI).startswith("sqlite")
