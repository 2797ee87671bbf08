"""Employee Service."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import ConflictError, NotFoundError
from database.async_engine import session_scope
from database.models import EmployeeRecord, OrganizationRecord
from database.repositories import EmployeeRepository
from domain.event_bus import EventBus
from domain.events import EmployeeAdded

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "An employee with this email already exists in the system."


class EmployeeService:
    """Adds and lists an organization's employees."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        event_bus: EventBus,
    ):
        self._session_factory = session_factory
        self._event_bus = event_bus

    async def add_employee(
        self,
        org_id: str,
        name: str,
        email: str,
        role: str,
        department: Optional[str] = None,
        skills: Optional[List[str]] = None,
        wallet_address: Optional[str] = None,
    ) -> EmployeeRecord:
        """
        Add an employee and publish employee.added.

        Raises:
            NotFoundError: If org_id names no organization.
            ConflictError: If the email is already used by any employee.
        """
        async with session_scope(self._session_factory) as session:
            if await session.get(OrganizationRecord, org_id) is None:
                raise NotFoundError("Organization not found.", details={"org_id": org_id})

            repo = EmployeeRepository(session)
            if await repo.find_by_email(email) is not None:
                raise ConflictError(DUPLICATE_EMAIL, details={"email": email})

            try:
                employee = await repo.create(
                    org_id=org_id,
                    name=name,
                    email=email,
                    role=role,
                    department=department or "Management",
                    skills=skills,
                    wallet_address=wallet_address,
                )
                await session.commit()
            except IntegrityError as e:
                # Either a concurrent insert took the email, or another constraint failed
                await session.rollback()
                if await repo.find_by_email(email) is not None:
                    raise ConflictError(DUPLICATE_EMAIL, details={"email": email}) from e
                raise

        logger.info(f"[EmployeeService] Employee {employee.id} added to org {org_id}")
        await self._event_bus.publish(EmployeeAdded(employee_id=employee.id, org_id=org_id))
        return employee

    async def list_employees(self, org_id: str) -> List[EmployeeRecord]:
        async with session_scope(self._session_factory) as session:
            return await EmployeeRepository(session).list_by_org(org_id)
