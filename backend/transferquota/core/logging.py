"""Logging for the transfer quota backend.

Usage:
    from transferquota.core.logging import logger

    logger.info("plain message")

    account_logger = logger.with_context(account_id="alice")
    account_logger.warning("quota record missing")

Outside the local environment every record is emitted as a single JSON line
with the logger's dimensions merged in, so log shipping can index on them.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional

from transferquota.core.config import settings
from transferquota.core.config.enums import Environment

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Render a log record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying key/value dimensions."""

    def __init__(
        self,
        logger: logging.Logger,
        dimensions: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, Any]:
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with extra dimensions merged in."""
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, merged)


class LoggerConfigurator:
    """Configures handlers once and hands out contextual loggers."""

    _configured = False

    @classmethod
    def configure_root(cls) -> None:
        if cls._configured:
            return

        handler = logging.StreamHandler(sys.stdout)
        if settings.ENVIRONMENT in (Environment.LOCAL, Environment.TEST):
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)-8s %(name)s - %(message)s")
            )
        else:
            handler.setFormatter(JSONFormatter())

        root = logging.getLogger("transferquota")
        root.handlers = [handler]
        root.setLevel(settings.LOG_LEVEL)
        cls._configured = True

    @classmethod
    def configure_logger(
        cls,
        name: str,
        dimensions: Optional[dict[str, Any]] = None,
    ) -> ContextualLogger:
        """Build a contextual logger for ``name``.

        Args:
            name: Dotted logger name, normally under ``transferquota``
            dimensions: Key/value pairs attached to every record

        Returns:
            ContextualLogger
        """
        cls.configure_root()
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger("transferquota")
