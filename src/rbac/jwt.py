"""
JWT Token Handling

Bearer token verification for REST requests and the WebSocket handshake.
Tokens are HS256-signed and carry `sub`, `orgId` and `role` claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from config.settings import Settings, get_settings
from .context import TokenClaims


# =============================================================================
# CONFIGURATION
# =============================================================================

JWT_ACCESS_TOKEN_EXPIRE_HOURS = 8


# =============================================================================
# TOKEN CREATION
# =============================================================================

def create_access_token(
    subject_id: str,
    org_id: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a JWT access token.

    Login and registration live outside this service; this helper exists
    for local tooling and tests.

    Args:
        subject_id: Employee identifier (sub)
        org_id: Organization identifier (orgId)
        role: Role name
        expires_delta: Custom expiration time; negative values produce an
            already-expired token
        settings: Signing configuration (defaults to application settings)

    Returns:
        JWT token string
    """
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(hours=JWT_ACCESS_TOKEN_EXPIRE_HOURS)

    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": subject_id,
        "orgId": org_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


# =============================================================================
# TOKEN DECODING
# =============================================================================

def decode_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string
        settings: Verification configuration (defaults to application settings)

    Returns:
        Token payload as dictionary

    Raises:
        jwt.InvalidTokenError: If token is invalid or expired
    """
    settings = settings or get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def verify_token(token: str, settings: Optional[Settings] = None) -> TokenClaims:
    """
    Verify a bearer token and extract its claims.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is invalid or lacks required claims
    """
    payload = decode_token(token, settings)
    try:
        return TokenClaims.from_payload(payload)
    except KeyError as e:
        raise jwt.InvalidTokenError(f"Token missing claim: {e.args[0]}") from e
