"""HTTP middleware."""

from .correlation import RequestIdMiddleware, REQUEST_ID_HEADER

__all__ = ["RequestIdMiddleware", "REQUEST_ID_HEADER"]
