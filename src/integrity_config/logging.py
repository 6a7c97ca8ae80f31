"""
Structured logging for the integrity configuration service.

Every entry carries the service name and, inside an API request, the
request ID and the package being configured. Output is JSON by default;
set LOG_FORMAT=console for human-readable local output.
"""

import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

SERVICE_NAME = "integrity-config"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get the current request ID from context."""
    return request_id_var.get()


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return f"{int(time.time())}-{uuid.uuid4().hex[:8]}"


def add_request_context(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor adding the service name and current request ID."""
    event_dict.setdefault("service", SERVICE_NAME)
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def _renderer(format: str) -> structlog.typing.Processor:
    if format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def configure_logging(level: str = "INFO", format: str = "json") -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        level: Log level, overridden by $LOG_LEVEL
        format: 'json' or 'console', overridden by $LOG_FORMAT
    """
    level = os.getenv("LOG_LEVEL", level).upper()
    format = os.getenv("LOG_FORMAT", format).lower()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.contextvars.merge_contextvars,
            add_request_context,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# Component loggers
def codec_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for whitelist codec events."""
    return get_logger("integrity.codec")


def editor_logger(rule_name: str = "") -> structlog.stdlib.BoundLogger:
    """Get logger for rule editor events, bound to the rule being edited."""
    logger = get_logger("integrity.editor")
    return logger.bind(rule_name=rule_name) if rule_name else logger


def store_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for rule store operations."""
    return get_logger("integrity.store")


def api_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for HTTP API events."""
    return get_logger("integrity.api")


class LogContext:
    """
    Request-scoped logging context.

    Sets the request ID and binds extra fields (e.g. path, package_name)
    for every log entry emitted until the context exits.
    """

    def __init__(self, request_id: str | None = None, **fields: Any):
        self.request_id = request_id or generate_request_id()
        self.fields = fields
        self._token = None

    def bind(self, **fields: Any) -> None:
        """Add fields to the active context."""
        self.fields.update(fields)
        structlog.contextvars.bind_contextvars(**fields)

    def __enter__(self) -> "LogContext":
        self._token = request_id_var.set(self.request_id)
        if self.fields:
            structlog.contextvars.bind_contextvars(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            request_id_var.reset(self._token)
            self._token = None
        structlog.contextvars.clear_contextvars()


configure_logging()
