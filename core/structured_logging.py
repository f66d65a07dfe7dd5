"""
Structured Logging with Request Correlation
===========================================

Provides JSON-structured logging with request correlation for tracing.

Features:
1. JSON log format for production (parseable by log aggregators)
2. Request correlation via X-Request-ID header
3. Automatic request_id generation if not provided
4. Thread-safe context management

Usage:
    from core.structured_logging import (
        configure_structured_logging,
        log_with_context,
        RequestCorrelationMiddleware,
    )

    # In main.py startup:
    configure_structured_logging()
    app.add_middleware(RequestCorrelationMiddleware)

    # In any module:
    logger = logging.getLogger(__name__)
    logger.info("Validated period", extra={"duration": "short", "period_id": 1})
    # Output: {"timestamp": "...", "level": "INFO", "message": "Validated period",
    #          "request_id": "req-xxx", "duration": "short", "period_id": 1}
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from env_config import Config, get_env

# Thread-safe context variable for request correlation
_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return _request_id_ctx.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID in context."""
    _request_id_ctx.set(request_id)


def clear_request_id() -> None:
    """Clear the request ID from context."""
    _request_id_ctx.set(None)


def generate_request_id() -> str:
    """Generate a new request ID."""
    return f"req-{uuid.uuid4().hex[:12]}"


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with request correlation.

    Output format:
    {
        "timestamp": "2024-01-15T11:30:45.123456+00:00",
        "level": "INFO",
        "logger": "routers.periods",
        "message": "Validated period",
        "request_id": "req-abc123def456",
        "module": "periods",
        "function": "validate_period",
        "line": 123,
        ... extra fields ...
    }
    """

    # Fields to exclude from extra (already handled or internal)
    EXCLUDE_FIELDS = {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    }

    def __init__(self, include_build_sha: bool = True):
        super().__init__()
        self.include_build_sha = include_build_sha
        self._build_sha = (get_env("GIT_COMMIT_SHA", "SOURCE_COMMIT", default="") or "")[:8] or "local"

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        log_entry["module"] = record.module
        log_entry["function"] = record.funcName
        log_entry["line"] = record.lineno

        if self.include_build_sha:
            log_entry["build_sha"] = self._build_sha

        # Extra fields passed via logger.info(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in self.EXCLUDE_FIELDS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    Human-readable text formatter with request correlation.

    Output format:
    2024-01-15 11:30:45.123 [INFO] [req-abc123] routers.periods:validate_period:123 - Validated period
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        request_id = get_request_id() or "-"

        base = f"{timestamp} [{record.levelname}] [{request_id}] {record.name}:{record.funcName}:{record.lineno} - {record.getMessage()}"

        if record.exc_info:
            base += f"\n{self.formatException(record.exc_info)}"

        return base


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """
    Middleware to extract or generate request IDs for correlation.

    - Extracts X-Request-ID from incoming request headers
    - Generates a new request ID if not present
    - Sets the request ID in response headers
    - Stores request ID in context for logging
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(self.HEADER_NAME)
        if not request_id:
            request_id = generate_request_id()

        set_request_id(request_id)

        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            clear_request_id()


def configure_structured_logging(
    level: str = None,
    format_type: str = None,
    include_build_sha: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to Config.LOG_LEVEL.
        format_type: "json" or "text". Defaults to Config.LOG_FORMAT.
        include_build_sha: Include build SHA in JSON logs.

    This should be called once at application startup, before any logging occurs.
    """
    level = (level or Config.LOG_LEVEL).upper()
    format_type = format_type or Config.LOG_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)

    if format_type.lower() == "json":
        handler.setFormatter(JSONFormatter(include_build_sha=include_build_sha))
    else:
        handler.setFormatter(TextFormatter())

    root_logger.addHandler(handler)

    # Suppress noisy third-party loggers
    for noisy_logger in ["httpx", "httpcore", "asyncio", "uvicorn.access"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """
    Log a message with additional context fields.

    Example:
        log_with_context(logger, logging.INFO, "Period validated",
                         duration="short", period_id=1, is_valid=True)
    """
    logger.log(level, message, extra=extra)


def log_info(logger: logging.Logger, message: str, **extra: Any) -> None:
    """Log an INFO message with context."""
    log_with_context(logger, logging.INFO, message, **extra)


def log_warning(logger: logging.Logger, message: str, **extra: Any) -> None:
    """Log a WARNING message with context."""
    log_with_context(logger, logging.WARNING, message, **extra)
