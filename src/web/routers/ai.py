"""
AI Routes

Smart-assign recommendations and the organization's productivity scores.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from database.async_engine import session_scope
from database.repositories import ScoreRepository
from rbac import TokenClaims, require_auth
from services.smart_assign_engine import SmartAssignEngine
from web.dependencies import get_session_factory, get_smart_assign_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI"])


class SmartAssignRequest(BaseModel):
    """Skills a task needs; at least one is required."""
    required_skills: List[str] = Field(..., min_length=1)


@router.post("/smart-assign")
async def smart_assign(
    request: SmartAssignRequest,
    claims: TokenClaims = Depends(require_auth),
    engine: SmartAssignEngine = Depends(get_smart_assign_engine),
):
    """Recommend up to three assignees for the given skills."""
    candidates = await engine.recommend_assignees(claims.org_id, request.required_skills)
    return {
        "success": True,
        "data": [c.model_dump() for c in candidates],
    }


@router.get("/scores")
async def list_scores(
    claims: TokenClaims = Depends(require_auth),
    session_factory=Depends(get_session_factory),
):
    """Productivity scores of the organization, best first."""
    async with session_scope(session_factory) as session:
        scores = await ScoreRepository(session).list_for_org(claims.org_id)
    return {
        "success": True,
        "data": [s.model_dump(mode="json") for s in scores],
    }
