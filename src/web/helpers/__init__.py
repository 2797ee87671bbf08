"""Shared helpers for the web layer."""

from .error_responses import (
    ErrorCode,
    create_error_response,
    error_from_exception,
    handle_validation_error,
    server_error,
)

__all__ = [
    "ErrorCode",
    "create_error_response",
    "error_from_exception",
    "handle_validation_error",
    "server_error",
]
