"""
Smart-Assign Engine.

Ranks an organization's active employees against a task's required skills:

    skill_match     = |required ∩ employee skills| / |required|
    candidate_score = 0.70 * skill_match + 0.30 * productivity_score / 100

Read-only; nothing is written.
"""

import logging
from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import InvalidInputError
from database.async_engine import session_scope
from database.repositories import EmployeeRepository
from domain.value_objects import Candidate, EmployeeProfile
from services.scoring_engine import round_half_up

logger = logging.getLogger(__name__)

# Productivity assumed for employees that have never been scored
DEFAULT_PRODUCTIVITY_SCORE = 50
DEFAULT_CANDIDATE_LIMIT = 3

SKILL_WEIGHT = 0.70
PRODUCTIVITY_WEIGHT = 0.30
HIGH_PRODUCTIVITY_THRESHOLD = 80


def score_candidate(profile: EmployeeProfile, required_skills: Sequence[str]) -> Candidate:
    """Score one employee against a non-empty required-skill list."""
    employee_skills = set(profile.skills)
    matched = [skill for skill in required_skills if skill in employee_skills]
    skill_match = len(matched) / len(required_skills)

    candidate_score = (
        SKILL_WEIGHT * skill_match
        + PRODUCTIVITY_WEIGHT * (profile.productivity_score / 100)
    )

    explanation = f"{round_half_up(skill_match * 100)}% skill match."
    if profile.productivity_score > HIGH_PRODUCTIVITY_THRESHOLD:
        explanation += " High historical productivity."

    return Candidate(
        employee_id=profile.employee_id,
        name=profile.name,
        role=profile.role,
        matched_skills=matched,
        match_score=round_half_up(candidate_score * 100),
        explanation=explanation,
    )


def rank_candidates(
    profiles: Sequence[EmployeeProfile],
    required_skills: Sequence[str],
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> List[Candidate]:
    """
    Rank employees for a task.

    Candidates with a zero match_score are dropped. Ordering is match_score
    descending, then employee_id ascending.

    Raises:
        InvalidInputError: If required_skills is empty.
    """
    if not required_skills:
        raise InvalidInputError(
            "Task must have required skills to generate recommendations.",
            details={"field": "required_skills"},
        )

    candidates = [score_candidate(p, required_skills) for p in profiles]
    candidates = [c for c in candidates if c.match_score > 0]
    candidates.sort(key=lambda c: (-c.match_score, c.employee_id))
    return candidates[:limit]


class SmartAssignEngine:
    """Recommends assignees from an organization's active employees."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        default_score: float = DEFAULT_PRODUCTIVITY_SCORE,
        limit: int = DEFAULT_CANDIDATE_LIMIT,
    ):
        self._session_factory = session_factory
        self._default_score = default_score
        self._limit = limit

    async def recommend_assignees(
        self,
        org_id: str,
        required_skills: Sequence[str],
    ) -> List[Candidate]:
        """
        Return up to `limit` best-matching active employees.

        Raises:
            InvalidInputError: If required_skills is empty.
        """
        if not required_skills:
            raise InvalidInputError(
                "Task must have required skills to generate recommendations.",
                details={"field": "required_skills"},
            )

        async with session_scope(self._session_factory) as session:
            profiles = await EmployeeRepository(session).find_active_by_org(
                org_id, default_score=self._default_score
            )

        candidates = rank_candidates(profiles, required_skills, limit=self._limit)
        logger.info(
            f"[SmartAssign] {len(candidates)} candidate(s) of {len(profiles)} "
            f"active employee(s) in org {org_id}"
        )
        return candidates
