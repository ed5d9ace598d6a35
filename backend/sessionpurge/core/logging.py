"""Logging for the session purge backend.

Every log line can carry a set of dimensions (task_id, batch_id, project_id, ...).
Deployed environments emit one JSON object per line; local runs get a readable format.

Usage:
    from sessionpurge.core.logging import logger

    batch_logger = logger.with_context(task_id=task_id, batch_id=batch_id)
    batch_logger.info("Deleting batch")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, Tuple

from sessionpurge.core.config import settings

_ROOT_LOGGER_NAME = "sessionpurge"


class _JSONFormatter(logging.Formatter):
    """Formats a record as a single-line JSON document."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "dimensions", {}) or {})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _ReadableFormatter(logging.Formatter):
    """Human-readable formatter that appends dimensions as key=value pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        dimensions = getattr(record, "dimensions", None)
        if dimensions:
            rendered = " ".join(f"{key}={value}" for key, value in dimensions.items())
            line = f"{line} [{rendered}]"
        return line


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that attaches dimensions to every record."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[Dict[str, Any]] = None):
        """Initialize the adapter.

        Args:
            logger: Underlying stdlib logger
            dimensions: Key/value pairs attached to every record
        """
        super().__init__(logger, {})
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["dimensions"] = {**self.dimensions, **extra.get("dimensions", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions.

        Args:
            **dimensions: Dimensions to add (override existing keys)

        Returns:
            A new ContextualLogger sharing the underlying logger
        """
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


class LoggerConfigurator:
    """Configures the package logger and hands out contextual loggers."""

    _configured = False

    @classmethod
    def _configure_root(cls) -> None:
        if cls._configured:
            return

        root = logging.getLogger(_ROOT_LOGGER_NAME)
        root.setLevel(settings.LOG_LEVEL.upper())

        handler = logging.StreamHandler(sys.stdout)
        if settings.ENVIRONMENT in ("local", "test"):
            handler.setFormatter(_ReadableFormatter())
        else:
            handler.setFormatter(_JSONFormatter())
        root.addHandler(handler)
        root.propagate = False

        cls._configured = True

    @classmethod
    def configure_logger(
        cls, name: str, dimensions: Optional[Dict[str, Any]] = None
    ) -> ContextualLogger:
        """Get a contextual logger.

        Args:
            name: Logger name; names outside the package are nested under it
            dimensions: Dimensions attached to every record

        Returns:
            Configured ContextualLogger
        """
        cls._configure_root()
        if name != _ROOT_LOGGER_NAME and not name.startswith(f"{_ROOT_LOGGER_NAME}."):
            name = f"{_ROOT_LOGGER_NAME}.{name}"
        return ContextualLogger(logging.getLogger(name), dimensions)


logger = LoggerConfigurator.configure_logger(_ROOT_LOGGER_NAME)
