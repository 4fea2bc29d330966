"""Logging setup for the employee gateway.

Standard library logging configured through ``dictConfig``. ``LOG_FORMAT``
picks plain text, text with request context, or one JSON object per line
for log shippers.
"""

import json
import logging
import logging.config
import sys
import traceback
from datetime import datetime
from typing import Any, Dict, Optional

from employee_gateway.app.core.config import Settings, settings

# Request context carried on records via ``extra=``
CONTEXT_FIELDS = (
    "request_id",
    "client_id",
    "path",
    "method",
    "status_code",
    "duration_ms",
)

# Attributes every LogRecord has; anything else was passed through ``extra=``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON line.

    Context fields are promoted to the top level; other ``extra=`` values
    are nested under ``"extra"``.
    """

    CONTEXT_FIELDS = CONTEXT_FIELDS

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()

        payload: Dict[str, Any] = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
            "source": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        extra: Dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in self.CONTEXT_FIELDS:
                if value is not None:
                    payload[key] = value
            elif key not in _RECORD_ATTRS:
                extra[key] = value
        if extra:
            payload["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = traceback.format_exception(*record.exc_info)

        return json.dumps(payload, default=str, ensure_ascii=False)


class ContextFilter(logging.Filter):
    """Fill missing context fields with None.

    The ``structured`` format references them by name and would otherwise
    fail on records logged without ``extra=``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)
        return True


def get_logging_config(config: Optional[Settings] = None) -> Dict[str, Any]:
    """Build the ``dictConfig`` dictionary.

    Args:
        config: Settings to read ``log_level`` and ``log_format`` from;
            defaults to the environment-loaded settings
    """
    config = config or settings
    log_format = config.log_format.lower()
    log_level = config.log_level.upper()

    formatters: Dict[str, Any] = {
        "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
        "structured": {
            "format": (
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
                " - request_id=%(request_id)s client_id=%(client_id)s path=%(path)s"
            )
        },
        "json": {"()": "employee_gateway.app.core.logging.JSONFormatter"},
    }
    formatter = log_format if log_format in ("structured", "json") else "standard"

    app_logger = {"level": log_level, "handlers": ["console"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": {"context": {"()": "employee_gateway.app.core.logging.ContextFilter"}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": formatter,
                "stream": sys.stdout,
                "filters": ["context"],
            },
        },
        "loggers": {
            "employee_gateway": app_logger,
            "uvicorn": dict(app_logger),
        },
        "root": {"level": log_level, "handlers": ["console"]},
    }


def setup_logging(config: Optional[Settings] = None) -> None:
    logging.config.dictConfig(get_logging_config(config))

    # Per-request access lines come from RequestIdMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str = "employee_gateway") -> logging.Logger:
    return logging.getLogger(name)


def get_log_context(
    request_id: Optional[str] = None,
    client_id: Optional[str] = None,
    path: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Collect non-None context values for a logger's ``extra=`` argument.

    Example:
        >>> logger.warning(
        ...     "Rate limit exceeded",
        ...     extra=get_log_context(client_id="10.0.0.1", path="/api/v1/employee"),
        ... )
    """
    context = {"request_id": request_id, "client_id": client_id, "path": path, **extra}
    return {key: value for key, value in context.items() if value is not None}
