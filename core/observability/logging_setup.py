"""
Coworking logging setup

Plain stdlib logging, one line per record:
- Module loggers via logging.getLogger(__name__)
- Request id carried in a ContextVar and stamped on every record
"""
from __future__ import annotations
from contextvars import ContextVar
from typing import Optional
import logging

LOG_FORMAT = "%(asctime)s  %(levelname)s  %(name)s  [%(request_id)s]  %(message)s"

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(request_id: str):
    """Bind ``request_id`` to the current context. Returns a reset token."""
    return _request_id.set(request_id)


def reset_request_id(token) -> None:
    _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Attach the current request id to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


def setup_logging(level: str = "INFO", logger_name: Optional[str] = None) -> logging.Logger:
    """Install a stream handler with the request-id format. Idempotent."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(level.upper())

    for handler in logger.handlers:
        if getattr(handler, "_coworking", False):
            return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    handler._coworking = True
    logger.addHandler(handler)
    return logger
