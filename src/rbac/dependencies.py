"""
FastAPI Dependencies

Dependency injection helpers for route protection.

Usage:
    from rbac import require_auth, require_admin, TokenClaims

    @router.get("/tasks")
    async def list_tasks(claims: TokenClaims = Depends(require_auth)):
        ...

    @router.post("/employees")
    async def add_employee(claims: TokenClaims = Depends(require_admin)):
        ...
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from core.exceptions import ForbiddenError
from services.logging_config import org_id_var

from .context import TokenClaims
from .jwt import verify_token

logger = logging.getLogger(__name__)


# =============================================================================
# HTTP BEARER SECURITY
# =============================================================================

security = HTTPBearer(auto_error=False)


# =============================================================================
# CORE DEPENDENCIES
# =============================================================================

async def require_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenClaims:
    """
    Require a valid bearer token.

    Raises 401 when no token is sent and 403 when it is invalid or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = verify_token(credentials.credentials, request.app.state.settings)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token has expired.",
        )
    except jwt.InvalidTokenError as e:
        logger.debug(f"Invalid JWT token: {e}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token.",
        )

    request.state.claims = claims
    org_id_var.set(claims.org_id)
    return claims


async def require_admin(
    claims: TokenClaims = Depends(require_auth),
) -> TokenClaims:
    """
    Require the ADMIN role.

    Raises:
        ForbiddenError: For any other role (403 FORBIDDEN).
    """
    if not claims.is_admin:
        logger.warning(f"Admin access denied for {claims.subject_id} (role={claims.role})")
        raise ForbiddenError(
            "Access denied. Admin privileges required.",
            details={"required_role": "ADMIN"},
        )
    return claims
