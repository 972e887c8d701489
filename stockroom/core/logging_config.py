"""
Logging configuration for the application
"""
import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional

from stockroom.core.config import settings
from stockroom.core.database import utcnow

# Request ID of the request currently being served ("system" outside requests)
request_id_context: ContextVar[str] = ContextVar("request_id", default="system")

# Attributes every LogRecord carries; anything else came in through `extra`
_STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}


def _current_request_id(record: logging.LogRecord) -> str:
    request_id = getattr(record, "request_id", None)
    if request_id is None:
        request_id = request_id_context.get()
    return request_id


class JSONFormatter(logging.Formatter):
    """One JSON object per line, extras (sale_id, product_id, ...) included."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": _current_request_id(record),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.request_id = _current_request_id(record)
        return super().format(record)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Stamps the request id from context onto every record."""

    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("request_id", request_id_context.get())
        return msg, kwargs


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ("text" or "json")
    """
    level = log_level or settings.LOG_LEVEL
    fmt = log_format or settings.LOG_FORMAT
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if fmt.lower() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = TextFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    # passlib probes optional backends noisily at import
    logging.getLogger("passlib").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.LoggerAdapter:
    """
    Get a logger for a module (typically ``__name__``) that carries the
    request id of the current request.
    """
    return ContextLoggerAdapter(logging.getLogger(name), {})
