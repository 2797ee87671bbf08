"""
Error envelope shared by every failing REST response.

    {
        "success": false,
        "error": {"code": "NOT_FOUND", "message": "...", "details": {...}},
        "request_id": "...",
        "timestamp": "2026-01-01T00:00:00Z"
    }

`details` and `request_id` are omitted when empty.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from core.exceptions import WorkforceError
from domain.value_objects import utcnow

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable codes clients can branch on."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Status for each code, with a fallback message when none is given
_CODE_DEFAULTS = {
    ErrorCode.VALIDATION_ERROR: (status.HTTP_400_BAD_REQUEST, "Request body or parameters are invalid."),
    ErrorCode.INVALID_INPUT: (status.HTTP_400_BAD_REQUEST, "Invalid input provided."),
    ErrorCode.UNAUTHORIZED: (status.HTTP_401_UNAUTHORIZED, "Authentication required."),
    ErrorCode.FORBIDDEN: (status.HTTP_403_FORBIDDEN, "You don't have permission to do that."),
    ErrorCode.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Resource not found."),
    ErrorCode.CONFLICT: (status.HTTP_409_CONFLICT, "The request conflicts with existing data."),
    ErrorCode.SERVICE_UNAVAILABLE: (status.HTTP_503_SERVICE_UNAVAILABLE, "Service temporarily unavailable."),
    ErrorCode.INTERNAL_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred."),
}

# HTTPException status -> code, for errors raised by FastAPI dependencies
HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.INVALID_INPUT,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.INVALID_INPUT,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
    status.HTTP_503_SERVICE_UNAVAILABLE: ErrorCode.SERVICE_UNAVAILABLE,
}


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorBody
    request_id: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: utcnow().isoformat() + "Z")


def create_error_response(
    error_code: ErrorCode,
    message: Optional[str] = None,
    details: Optional[Any] = None,
    request_id: Optional[str] = None,
    status_code: Optional[int] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Build an error envelope response.

    Args:
        error_code: Code reported to the client.
        message: Overrides the code's default message.
        details: Structured context (field errors, ids).
        request_id: Correlation id of the failing request.
        status_code: Overrides the code's default status.
        headers: Extra response headers, e.g. WWW-Authenticate.
    """
    default_status, default_message = _CODE_DEFAULTS[error_code]
    envelope = ErrorEnvelope(
        error=ErrorBody(
            code=error_code.value,
            message=message or default_message,
            details=details,
        ),
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code or default_status,
        content=envelope.model_dump(exclude_none=True),
        headers=headers,
    )


def error_from_exception(exc: WorkforceError, request_id: Optional[str] = None) -> JSONResponse:
    """Map an application exception onto its code; unknown codes become 500."""
    try:
        error_code = ErrorCode(exc.code)
    except ValueError:
        error_code = ErrorCode.INTERNAL_ERROR

    return create_error_response(
        error_code,
        message=exc.message,
        details=exc.details or None,
        request_id=request_id,
    )


def handle_validation_error(
    errors: List[Dict[str, Any]],
    request_id: Optional[str] = None,
) -> JSONResponse:
    """400 with one `{field, message, code}` entry per pydantic error."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
            "code": error.get("type", "validation_error"),
        }
        for error in errors
    ]
    return create_error_response(
        ErrorCode.VALIDATION_ERROR,
        message="Please check your input and try again.",
        details=details,
        request_id=request_id,
    )


def server_error(
    message: str = "An unexpected error occurred.",
    request_id: Optional[str] = None,
) -> JSONResponse:
    """500 response; logs the exception currently being handled."""
    logger.exception(f"Unhandled error (request_id={request_id})")
    return create_error_response(
        ErrorCode.INTERNAL_ERROR,
        message=message,
        request_id=request_id,
    )
