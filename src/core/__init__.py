"""
Core Module - Shared infrastructure for cross-cutting concerns.
"""

from .exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    WorkforceError,
)

__all__ = [
    "ConflictError",
    "ForbiddenError",
    "InvalidInputError",
    "NotFoundError",
    "WorkforceError",
]
