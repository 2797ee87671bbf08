"""
Productivity Scoring Engine.

Converts one employee's full task history into a 0-100 productivity score:

    completion_rate = completed / total
    priority_cap    = min(mean priority weight of completed tasks, 1.0)
    score           = round_half_up((0.40 * completion_rate + 0.60 * priority_cap) * 100)

The score is always recomputed from scratch and written with an upsert, so
repeated or interleaved recomputations for the same task set converge to
the same row.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.async_engine import session_scope
from database.repositories import ScoreRepository, TaskRepository
from domain.value_objects import (
    ScoreBreakdown,
    ScoreResult,
    ScoreTrend,
    TaskPriority,
    TaskStatus,
)
from services.logging_config import log_performance

logger = logging.getLogger(__name__)


# =============================================================================
# FORMULA
# =============================================================================

PRIORITY_WEIGHTS = {
    TaskPriority.HIGH: 1.5,
    TaskPriority.MEDIUM: 1.0,
    TaskPriority.LOW: 0.7,
}
# Priorities outside the known set weigh as low
FALLBACK_PRIORITY_WEIGHT = PRIORITY_WEIGHTS[TaskPriority.LOW]

COMPLETION_WEIGHT = 0.40
PRIORITY_WEIGHT = 0.60
TREND_UP_THRESHOLD = 80


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def priority_weight(priority) -> float:
    try:
        return PRIORITY_WEIGHTS[TaskPriority(priority)]
    except ValueError:
        return FALLBACK_PRIORITY_WEIGHT


def compute_productivity_score(tasks: Iterable) -> Optional[ScoreResult]:
    """
    Compute a productivity score from an employee's tasks.

    Args:
        tasks: Every task assigned to the employee. Items need `status` and
            `priority` attributes.

    Returns:
        ScoreResult, or None when there are no tasks.
    """
    tasks = list(tasks)
    if not tasks:
        return None

    total = len(tasks)
    completed = [t for t in tasks if t.status == TaskStatus.COMPLETED]
    completion_rate = len(completed) / total

    if completed:
        weight_sum = sum(priority_weight(t.priority) for t in completed)
        priority_cap = min(weight_sum / len(completed), 1.0)
    else:
        priority_cap = 0.0

    base_score = COMPLETION_WEIGHT * completion_rate + PRIORITY_WEIGHT * priority_cap
    final_score = round_half_up(base_score * 100)

    return ScoreResult(
        productivity_score=final_score,
        task_completion_rate=completion_rate,
        trend=ScoreTrend.UP if final_score >= TREND_UP_THRESHOLD else ScoreTrend.STABLE,
        breakdown=ScoreBreakdown(
            total_assigned=total,
            total_completed=len(completed),
            completion_rate_pct=round_half_up(completion_rate * 100),
        ),
    )


# =============================================================================
# ENGINE
# =============================================================================

class ScoringEngine:
    """
    Recomputes and stores employee productivity scores.

    Opens its own session per recomputation so it always reads committed
    task state, independent of the request that triggered it.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @log_performance("ScoringEngine.recompute_score")
    async def recompute_score(self, employee_id: str, org_id: str) -> Optional[ScoreResult]:
        """
        Recompute an employee's score from all of their tasks.

        No score row is written when the employee has no tasks. Data-access
        errors propagate to the caller.

        Args:
            employee_id: Employee to score.
            org_id: Organization owning the score row.

        Returns:
            The stored ScoreResult, or None if nothing was written.
        """
        logger.info(f"[ScoringEngine] Analyzing workforce data for employee: {employee_id}")

        async with session_scope(self._session_factory) as session:
            tasks = await TaskRepository(session).find_all_by_employee(employee_id)
            result = compute_productivity_score(tasks)
            if result is None:
                logger.debug(f"[ScoringEngine] No tasks for {employee_id}; score unchanged")
                return None

            await ScoreRepository(session).upsert(org_id, employee_id, result)
            await session.commit()

        logger.info(
            f"[ScoringEngine] Score updated for {employee_id}: "
            f"{result.productivity_score}/100 ({result.trend.value})"
        )
        return result
