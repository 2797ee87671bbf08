"""
Token-based access control.

Exports:
    - TokenClaims: verified caller identity (subject, organization, role)
    - verify_token / decode_token / create_access_token: JWT helpers
    - require_auth / require_admin: FastAPI dependencies
"""

from .context import TokenClaims, ADMIN_ROLE
from .jwt import create_access_token, decode_token, verify_token
from .dependencies import require_auth, require_admin, security

__all__ = [
    "TokenClaims",
    "ADMIN_ROLE",
    "create_access_token",
    "decode_token",
    "verify_token",
    "require_auth",
    "require_admin",
    "security",
]
