"""Async Task Repository Implementation.

CRUD operations on the tasks table. Every query except the per-employee
history is scoped by org_id.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import TaskRecord
from domain.value_objects import TaskPriority, TaskStatus, utcnow

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "priority", "assigned_to", "required_skills", "due_date")


class TaskRepository:
    """
    Async repository for task records.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create(
        self,
        org_id: str,
        title: str,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        assigned_to: Optional[str] = None,
        created_by: Optional[str] = None,
        required_skills: Optional[List[str]] = None,
        due_date=None,
    ) -> TaskRecord:
        """Insert a new task in the 'assigned' state."""
        task = TaskRecord(
            org_id=org_id,
            title=title,
            description=description or "",
            priority=priority,
            status=TaskStatus.ASSIGNED,
            assigned_to=assigned_to,
            created_by=created_by,
            required_skills=list(required_skills or []),
            due_date=due_date,
        )
        self._session.add(task)
        await self._session.flush()
        return task

    async def get(self, task_id: str, org_id: str) -> Optional[TaskRecord]:
        """Get a task by ID within an organization."""
        result = await self._session.execute(
            select(TaskRecord).where(
                TaskRecord.id == task_id,
                TaskRecord.org_id == org_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_org(
        self,
        org_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        assigned_to: Optional[str] = None,
    ) -> List[TaskRecord]:
        """List an organization's tasks, newest first, with equality filters."""
        query = select(TaskRecord).where(TaskRecord.org_id == org_id)
        if status is not None:
            query = query.where(TaskRecord.status == status)
        if priority is not None:
            query = query.where(TaskRecord.priority == priority)
        if assigned_to is not None:
            query = query.where(TaskRecord.assigned_to == assigned_to)
        query = query.order_by(TaskRecord.created_at.desc(), TaskRecord.id)

        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def find_all_by_employee(self, employee_id: str) -> List[TaskRecord]:
        """
        Get every task ever assigned to an employee.

        No pagination and no time window: the scoring engine needs the full
        history.
        """
        result = await self._session.execute(
            select(TaskRecord)
            .where(TaskRecord.assigned_to == employee_id)
            .order_by(TaskRecord.created_at.desc(), TaskRecord.id)
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        task_id: str,
        org_id: str,
        status: TaskStatus,
    ) -> Optional[TaskRecord]:
        """
        Change a task's status.

        completed_at is stamped when the status becomes 'completed' and
        cleared for any other status.

        Returns:
            The updated task, or None if not found in the organization.
        """
        task = await self.get(task_id, org_id)
        if task is None:
            return None

        task.status = status
        task.completed_at = utcnow() if status == TaskStatus.COMPLETED else None
        task.updated_at = utcnow()
        await self._session.flush()
        return task

    async def update(
        self,
        task_id: str,
        org_id: str,
        updates: Dict[str, Any],
    ) -> Optional[TaskRecord]:
        """
        Apply a partial update limited to the editable fields.

        Returns:
            The updated task, or None if not found in the organization.
        """
        task = await self.get(task_id, org_id)
        if task is None:
            return None

        for field, value in updates.items():
            if field in UPDATABLE_FIELDS:
                setattr(task, field, value)
        task.updated_at = utcnow()
        await self._session.flush()
        return task

    async def delete(self, task_id: str, org_id: str) -> bool:
        """
        Delete a task.

        Returns:
            True if deleted, False if not found
        """
        result = await self._session.execute(
            delete(TaskRecord).where(
                TaskRecord.id == task_id,
                TaskRecord.org_id == org_id,
            )
        )
        return (result.rowcount or 0) > 0
