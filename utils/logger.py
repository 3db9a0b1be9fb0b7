"""Structured JSON logging with request-scoped context."""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from config import settings

SERVICE_NAME = "storefront"

# Request-scoped context, filled by middleware and auth dependencies
correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
current_user_id: ContextVar[Optional[int]] = ContextVar("current_user_id", default=None)


class StructuredFormatter(logging.Formatter):
    """Renders every record as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": correlation_id.get(),
        }

        user_id = current_user_id.get()
        if user_id is not None:
            log_data["user_id"] = user_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Keyword context passed through StructuredLogger
        if hasattr(record, "context"):
            log_data.update(record.context)

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data, ensure_ascii=False, default=str)


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    return handler


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger that accepts keyword context.

    Example:
        cache_logger.info("Cache set", key="product:7", ttl=600)
    """

    def __init__(self, name: str, level: str = settings.LOG_LEVEL):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level, logging.INFO))
        self.logger.propagate = False
        self.logger.handlers.clear()
        self.logger.addHandler(_json_handler())

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs):
        self.logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={"context": kwargs} if kwargs else None,
            stacklevel=3,
        )

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR level with the active traceback."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


def configure_logging(level: str = settings.LOG_LEVEL):
    """
    Route third-party loggers (uvicorn, sqlalchemy) through the JSON formatter.

    Called once from the application lifespan.
    """
    for name in ("uvicorn", "uvicorn.error", "sqlalchemy.engine"):
        third_party = logging.getLogger(name)
        third_party.handlers.clear()
        third_party.addHandler(_json_handler())
        third_party.propagate = False
    logging.getLogger("uvicorn").setLevel(getattr(logging, level, logging.INFO))
    # uvicorn.access duplicates LoggingMiddleware output
    logging.getLogger("uvicorn.access").disabled = True


# Global logger instances
logger = StructuredLogger(SERVICE_NAME)
api_logger = StructuredLogger(f"{SERVICE_NAME}.api")
db_logger = StructuredLogger(f"{SERVICE_NAME}.database")
cache_logger = StructuredLogger(f"{SERVICE_NAME}.cache")
auth_logger = StructuredLogger(f"{SERVICE_NAME}.auth")


def set_correlation_id(cid: str):
    correlation_id.set(cid)


def get_correlation_id() -> Optional[str]:
    return correlation_id.get()


def clear_correlation_id():
    correlation_id.set(None)


def set_current_user_id(user_id: Optional[int]):
    current_user_id.set(user_id)


def clear_request_context():
    """Reset every request-scoped logging field."""
    correlation_id.set(None)
    current_user_id.set(None)
