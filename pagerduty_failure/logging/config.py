"""Logging configuration for the PagerDuty failure notifier.

Records carry structured fields (``event``, ``component``, ``queue``,
``job_class`` ...) passed as ``extra`` or pushed with log_context(). Both
formatters render those fields after the fixed ones.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pagerduty_failure.config.models import LogFormat, LoggingConfig

from .context import get_log_context

SERVICE_NAME = "pagerduty-failure"

# LogRecord attributes that are never rendered as structured fields
RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def structured_fields(record: logging.LogRecord, skip=frozenset()) -> Dict[str, Any]:
    """Return the extra fields of ``record``, sorted by name."""
    return {
        key: value
        for key, value in sorted(record.__dict__.items())
        if key not in RECORD_ATTRS and key not in skip and not key.startswith("_")
    }


class ContextualFilter(logging.Filter):
    """Adds ``service``, ``environment`` and the active log_context() fields.

    Fields given explicitly on the log call win over context fields.
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment

        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class JSONFormatter(logging.Formatter):
    """Single-line JSON with ``timestamp``, ``level``, ``message`` first."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for key, value in structured_fields(record).items():
            log_obj[key] = self._json_value(value)

        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)

    @staticmethod
    def _json_value(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, (str, int, float, bool, type(None), list, dict)):
            return value
        return str(value)

    def _format_timestamp(self, created: float) -> str:
        """ISO-8601 UTC with millisecond precision, e.g. 2026-10-18T10:30:00.123Z"""
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class KeyValueFormatter(logging.Formatter):
    """``timestamp [level] name: message key1=value1 key2=value2``

    ``service`` and ``environment`` are left out; they are constant per process.
    """

    DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        super().__init__(fmt or self.DEFAULT_FORMAT, datefmt or self.DEFAULT_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = structured_fields(record, skip={"service", "environment"})
        if not fields:
            return base
        pairs = " ".join(f"{key}={self._render(value)}" for key, value in fields.items())
        return f"{base} {pairs}"

    @staticmethod
    def _render(value: Any) -> str:
        if isinstance(value, str):
            # Quote values that would break key=value parsing
            if " " in value or "=" in value or "," in value:
                return f'"{value}"'
            return value
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, bool):
            return str(value).lower()
        if value is None:
            return "null"
        return str(value)


def configure_logging(
    level: str = "INFO",
    format_type: Union[str, LogFormat] = LogFormat.KEY_VALUE,
    environment: str = "local",
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'json' or 'key-value'
        environment: Environment label (production, staging, local)

    Raises:
        ValueError: If level or format_type is invalid
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    try:
        log_format = LogFormat(format_type)
    except ValueError:
        raise ValueError(
            f"Invalid log format: {format_type}. Must be 'json' or 'key-value'"
        ) from None

    handler = logging.StreamHandler(sys.stdout)
    if log_format is LogFormat.JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(KeyValueFormatter())
    handler.addFilter(ContextualFilter(service=SERVICE_NAME, environment=environment))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    # Avoid duplicate output when configured more than once
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": str(level).upper(),
            "log_format": log_format.value,
        },
    )


def configure_logging_from_config(
    logging_config: LoggingConfig,
    environment: Optional[str] = None,
) -> None:
    """Configure logging from the ``logging:`` section of the YAML file.

    Args:
        logging_config: Parsed logging section
        environment: Environment label (ENVIRONMENT variable, else "local", if None)
    """
    configure_logging(
        level=logging_config.level,
        format_type=logging_config.format,
        environment=environment or os.environ.get("ENVIRONMENT", "local"),
    )
