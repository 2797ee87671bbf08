"""
Authentication Context

TokenClaims is the object passed through routes and the WebSocket
handshake describing who is calling and which organization they act in.
"""

from dataclasses import dataclass
from typing import Any, Dict

ADMIN_ROLE = "ADMIN"


@dataclass(frozen=True)
class TokenClaims:
    """
    Verified identity carried by a bearer token.

    Usage:
        @router.get("/data")
        async def get_data(claims: TokenClaims = Depends(require_auth)):
            return await service.list(claims.org_id)
    """

    subject_id: str
    """Employee (or admin) the token was issued to."""

    org_id: str
    """Organization every query of this caller is scoped to."""

    role: str
    """Free-form role name; ADMIN unlocks management endpoints."""

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        """
        Build claims from a decoded token payload.

        Raises:
            KeyError: If sub or orgId is missing.
        """
        return cls(
            subject_id=str(payload["sub"]),
            org_id=str(payload["orgId"]),
            role=str(payload.get("role", "")),
        )
