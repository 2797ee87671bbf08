"""
Task Service.

Owns task mutations for an organization. Every write is committed before
its domain event is published, so subscribers (scoring, broadcast) always
observe durable state.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import InvalidInputError, NotFoundError
from database.async_engine import session_scope
from database.models import TaskRecord
from database.repositories import EmployeeRepository, TaskRepository
from domain.event_bus import EventBus
from domain.events import TaskCompleted, TaskCreated
from domain.value_objects import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found or you do not have permission to update it."


class TaskService:
    """Task lifecycle operations scoped to one organization per call."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        event_bus: EventBus,
    ):
        self._session_factory = session_factory
        self._event_bus = event_bus

    async def _ensure_assignee(
        self,
        session: AsyncSession,
        org_id: str,
        employee_id: Optional[str],
    ) -> None:
        if employee_id is None:
            return
        employee = await EmployeeRepository(session).get(employee_id, org_id)
        if employee is None:
            raise InvalidInputError(
                "Assignee does not belong to this organization.",
                details={"field": "assigned_to", "value": employee_id},
            )

    async def create_task(
        self,
        org_id: str,
        title: str,
        created_by: Optional[str] = None,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        assigned_to: Optional[str] = None,
        required_skills: Optional[List[str]] = None,
        due_date=None,
    ) -> TaskRecord:
        """
        Create a task and publish task.created.

        Raises:
            InvalidInputError: If the assignee is not an employee of org_id.
        """
        async with session_scope(self._session_factory) as session:
            await self._ensure_assignee(session, org_id, assigned_to)
            task = await TaskRepository(session).create(
                org_id=org_id,
                title=title,
                description=description,
                priority=priority,
                assigned_to=assigned_to,
                created_by=created_by,
                required_skills=required_skills,
                due_date=due_date,
            )
            await session.commit()

        logger.info(f"[TaskService] Task {task.id} created in org {org_id}")
        await self._event_bus.publish(TaskCreated(
            task_id=task.id,
            org_id=task.org_id,
            employee_id=task.assigned_to,
        ))
        return task

    async def list_tasks(
        self,
        org_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        assigned_to: Optional[str] = None,
    ) -> List[TaskRecord]:
        async with session_scope(self._session_factory) as session:
            return await TaskRepository(session).list_by_org(
                org_id, status=status, priority=priority, assigned_to=assigned_to
            )

    async def update_status(
        self,
        task_id: str,
        org_id: str,
        status: TaskStatus,
    ) -> TaskRecord:
        """
        Move a task to a new status.

        task.completed is published only when the new status is 'completed'
        and the task has an assignee; unassigned completions never reach
        the scoring path.

        Raises:
            NotFoundError: If the task does not exist in org_id.
        """
        status = TaskStatus(status)

        async with session_scope(self._session_factory) as session:
            task = await TaskRepository(session).update_status(task_id, org_id, status)
            if task is None:
                raise NotFoundError(TASK_NOT_FOUND, details={"task_id": task_id})
            await session.commit()

        logger.info(f"[TaskService] Task {task_id} -> {status.value}")

        if status == TaskStatus.COMPLETED and task.assigned_to:
            await self._event_bus.publish(TaskCompleted(
                task_id=task.id,
                org_id=task.org_id,
                employee_id=task.assigned_to,
            ))

        return task

    async def update_task(
        self,
        task_id: str,
        org_id: str,
        updates: Dict[str, Any],
    ) -> TaskRecord:
        """
        Edit a task's descriptive fields.

        Raises:
            InvalidInputError: If updates is empty or names a foreign assignee.
            NotFoundError: If the task does not exist in org_id.
        """
        if not updates:
            raise InvalidInputError("At least one field must be provided for update.")

        async with session_scope(self._session_factory) as session:
            if "assigned_to" in updates:
                await self._ensure_assignee(session, org_id, updates["assigned_to"])

            task = await TaskRepository(session).update(task_id, org_id, updates)
            if task is None:
                raise NotFoundError(TASK_NOT_FOUND, details={"task_id": task_id})
            await session.commit()

        logger.info(f"[TaskService] Task {task_id} updated: {sorted(updates)}")
        return task

    async def delete_task(self, task_id: str, org_id: str) -> None:
        """
        Raises:
            NotFoundError: If the task does not exist in org_id.
        """
        async with session_scope(self._session_factory) as session:
            deleted = await TaskRepository(session).delete(task_id, org_id)
            if not deleted:
                raise NotFoundError(
                    "Task not found or you do not have permission to delete it.",
                    details={"task_id": task_id},
                )
            await session.commit()

        logger.info(f"[TaskService] Task {task_id} deleted from org {org_id}")
