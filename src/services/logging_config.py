"""
Logging Configuration for the Workforce Platform.

Every record passes through a ContextFilter that stamps the current request
and organization ids onto it, so both output formats can show which request
and tenant a line belongs to without the call sites passing them along.

Usage:
    from services.logging_config import configure_logging

    configure_logging(level="INFO", json_output=settings.json_logs)
"""

import inspect
import json
import logging
import sys
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, MutableMapping, Optional, Tuple

# Set per request by RequestIdMiddleware and require_auth
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
org_id_var: ContextVar[Optional[str]] = ContextVar("org_id", default=None)

# Libraries whose INFO output drowns the application's
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "uvicorn.access")


class ContextFilter(logging.Filter):
    """Copies request_id / org_id from the context into each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.org_id = org_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation in production."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("request_id", "org_id"):
            value = getattr(record, key, None)
            if value:
                entry[key] = value

        entry.update(getattr(record, "fields", None) or {})

        duration_ms = getattr(record, "duration_ms", None)
        if duration_ms is not None:
            entry["duration_ms"] = duration_ms

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ReadableFormatter(logging.Formatter):
    """Single-line console format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s%(context)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        request_id = getattr(record, "request_id", None)
        record.context = f" [{request_id[:8]}]" if request_id else ""
        return super().format(record)


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Install one stdout handler on the root logger.

    Replaces any handlers already on the root logger, so call it once from
    an entry point rather than from library code.

    Args:
        level: Root log level name.
        json_output: Emit JSON lines instead of the readable format.
        log_file: Also append JSON lines to this file.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else ReadableFormatter())
    handler.addFilter(ContextFilter())

    handlers = [handler]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JsonFormatter())
        file_handler.addFilter(ContextFilter())
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class ContextLogger(logging.LoggerAdapter):
    """Adapter that attaches fixed fields (and any per-call `extra`) to records.

    The fields land on `record.fields`; JsonFormatter merges them into the
    emitted object.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        call_extra: Dict[str, Any] = kwargs.get("extra") or {}
        kwargs["extra"] = {"fields": {**self.extra, **call_extra}}
        return msg, kwargs


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Logger for `name` that tags every record with `extra`."""
    return ContextLogger(logging.getLogger(name), extra)


def log_performance(name: Optional[str] = None) -> Callable:
    """
    Log how long a coroutine takes, at DEBUG on success and WARNING on error.

    The exception is re-raised unchanged.
    """
    def decorator(func: Callable) -> Callable:
        label = name or func.__qualname__
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"log_performance requires a coroutine function: {label}")

        perf_logger = logging.getLogger(f"performance.{func.__module__}")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed = int((time.perf_counter() - start) * 1000)
                perf_logger.warning(
                    f"{label} failed after {elapsed}ms: {e}",
                    extra={"duration_ms": elapsed},
                )
                raise
            elapsed = int((time.perf_counter() - start) * 1000)
            perf_logger.debug(f"{label} took {elapsed}ms", extra={"duration_ms": elapsed})
            return result

        return wrapper

    return decorator
