"""
Application exceptions.

Raised by services at the domain boundary and translated into HTTP
responses by the handlers registered in web.app.
"""

from typing import Any, Dict, Optional


class WorkforceError(Exception):
    """Base error carrying a machine-readable code."""

    code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(WorkforceError):
    """Input rejected at an engine or service boundary."""

    code = "INVALID_INPUT"


class NotFoundError(WorkforceError):
    """Entity absent, or not owned by the caller's organization."""

    code = "NOT_FOUND"


class ConflictError(WorkforceError):
    """Write would violate a uniqueness rule."""

    code = "CONFLICT"


class ForbiddenError(WorkforceError):
    code = "FORBIDDEN"
