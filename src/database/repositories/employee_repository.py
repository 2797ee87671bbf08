"""Async Employee Repository Implementation.

Employee lookups per organization, including the score-enriched view used
by smart-assign.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import EmployeeRecord, ProductivityScoreRecord
from domain.value_objects import EmployeeProfile, EmployeeStatus

logger = logging.getLogger(__name__)


class EmployeeRepository:
    """Async repository for employee records."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        org_id: str,
        name: str,
        email: str,
        role: str,
        department: str = "Management",
        skills: Optional[List[str]] = None,
        wallet_address: Optional[str] = None,
    ) -> EmployeeRecord:
        """Insert a new active employee."""
        employee = EmployeeRecord(
            org_id=org_id,
            name=name,
            email=email,
            role=role,
            department=department,
            skills=list(skills or []),
            wallet_address=wallet_address,
            status=EmployeeStatus.ACTIVE,
        )
        self._session.add(employee)
        await self._session.flush()
        return employee

    async def get(self, employee_id: str, org_id: str) -> Optional[EmployeeRecord]:
        """Get an employee by ID within an organization."""
        result = await self._session.execute(
            select(EmployeeRecord).where(
                EmployeeRecord.id == employee_id,
                EmployeeRecord.org_id == org_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[EmployeeRecord]:
        """Emails are unique across all organizations."""
        result = await self._session.execute(
            select(EmployeeRecord).where(EmployeeRecord.email == email)
        )
        return result.scalar_one_or_none()

    async def list_by_org(self, org_id: str) -> List[EmployeeRecord]:
        """List an organization's employees, newest first."""
        result = await self._session.execute(
            select(EmployeeRecord)
            .where(EmployeeRecord.org_id == org_id)
            .order_by(EmployeeRecord.created_at.desc(), EmployeeRecord.id)
        )
        return list(result.scalars().all())

    async def find_active_by_org(
        self,
        org_id: str,
        default_score: float,
    ) -> List[EmployeeProfile]:
        """
        Active employees of an organization with their productivity score.

        Left-joins the score table; employees that were never scored get
        default_score.

        Args:
            org_id: Organization to search.
            default_score: Score used when no score row exists.

        Returns:
            Profiles ordered by employee ID.
        """
        result = await self._session.execute(
            select(EmployeeRecord, ProductivityScoreRecord.productivity_score)
            .outerjoin(
                ProductivityScoreRecord,
                ProductivityScoreRecord.employee_id == EmployeeRecord.id,
            )
            .where(
                EmployeeRecord.org_id == org_id,
                EmployeeRecord.status == EmployeeStatus.ACTIVE,
            )
            .order_by(EmployeeRecord.id)
        )

        profiles = []
        for employee, score in result.all():
            profiles.append(EmployeeProfile(
                employee_id=employee.id,
                name=employee.name,
                role=employee.role,
                skills=list(employee.skills or []),
                productivity_score=default_score if score is None else score,
            ))
        return profiles
