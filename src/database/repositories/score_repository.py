"""Async Productivity Score Repository.

One score row per employee. Writes go through a single
INSERT ... ON CONFLICT (employee_id) DO UPDATE statement so that concurrent
recomputations for the same employee never race on a read-then-write.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import EmployeeRecord, ProductivityScoreRecord, generate_id
from domain.value_objects import EmployeeScoreSummary, ScoreResult, utcnow

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ScoreRepository:
    """Async repository for productivity scores."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    def _insert(self):
        dialect = self._session.bind.dialect.name
        try:
            return _UPSERT_DIALECTS[dialect]
        except KeyError:
            raise NotImplementedError(f"Score upsert not supported on dialect '{dialect}'") from None

    async def upsert(self, org_id: str, employee_id: str, result: ScoreResult) -> None:
        """
        Write an employee's score, replacing every column of an existing row.

        Args:
            org_id: Owning organization.
            employee_id: Employee the score belongs to.
            result: Freshly computed score.
        """
        insert = self._insert()
        stmt = insert(ProductivityScoreRecord).values(
            id=generate_id(),
            org_id=org_id,
            employee_id=employee_id,
            productivity_score=result.productivity_score,
            task_completion_rate=result.task_completion_rate,
            trend=result.trend,
            score_breakdown=result.breakdown.model_dump(),
            computed_at=utcnow(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ProductivityScoreRecord.employee_id],
            set_={
                "org_id": stmt.excluded.org_id,
                "productivity_score": stmt.excluded.productivity_score,
                "task_completion_rate": stmt.excluded.task_completion_rate,
                "trend": stmt.excluded.trend,
                "score_breakdown": stmt.excluded.score_breakdown,
                "computed_at": stmt.excluded.computed_at,
            },
        )
        await self._session.execute(stmt)

    async def list_for_org(self, org_id: str) -> List[EmployeeScoreSummary]:
        """
        Scores of an organization joined with their employees.

        Returns:
            Summaries ordered by score descending, then employee name.
        """
        result = await self._session.execute(
            select(ProductivityScoreRecord, EmployeeRecord.name, EmployeeRecord.role)
            .join(EmployeeRecord, EmployeeRecord.id == ProductivityScoreRecord.employee_id)
            .where(ProductivityScoreRecord.org_id == org_id)
            .order_by(
                ProductivityScoreRecord.productivity_score.desc(),
                EmployeeRecord.name,
            )
        )

        return [
            EmployeeScoreSummary(
                employee_id=score.employee_id,
                name=name,
                role=role,
                productivity_score=score.productivity_score,
                task_completion_rate=score.task_completion_rate,
                trend=score.trend,
                computed_at=score.computed_at,
            )
            for score, name, role in result.all()
        ]
