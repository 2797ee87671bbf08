"""
Task Management Routes

API endpoints for creating, listing and progressing an organization's tasks.
Completing an assigned task triggers rescoring and a live dashboard update.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator

from domain.value_objects import TaskPriority, TaskStatus
from rbac import TokenClaims, require_auth
from services.task_service import TaskService
from web.dependencies import get_task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


# =============================================================================
# REQUEST MODELS
# =============================================================================

class CreateTaskRequest(BaseModel):
    """Request to create a new task."""
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = None
    assigned_to: Optional[str] = Field(None, description="Employee ID")
    priority: TaskPriority = TaskPriority.MEDIUM
    required_skills: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = None


class UpdateStatusRequest(BaseModel):
    """Request to update task status."""
    status: TaskStatus


class UpdateTaskRequest(BaseModel):
    """Request to edit a task. Only the fields sent are changed."""
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    priority: Optional[TaskPriority] = None
    required_skills: Optional[List[str]] = None
    due_date: Optional[datetime] = None

    @field_validator("title", "description", "priority", "required_skills")
    @classmethod
    def reject_null(cls, v, info):
        # Omit a field to leave it unchanged; only assigned_to and due_date may be cleared
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


# =============================================================================
# TASK CRUD
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    request: CreateTaskRequest,
    claims: TokenClaims = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    """Create a new task in the caller's organization."""
    task = await service.create_task(
        org_id=claims.org_id,
        created_by=claims.subject_id,
        title=request.title,
        description=request.description or "",
        priority=request.priority,
        assigned_to=request.assigned_to,
        required_skills=request.required_skills,
        due_date=request.due_date,
    )
    return {"success": True, "data": task.to_dict()}


@router.get("")
async def list_tasks(
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    assigned_to: Optional[str] = Query(None),
    claims: TokenClaims = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    """List the organization's tasks, newest first."""
    tasks = await service.list_tasks(
        claims.org_id,
        status=task_status,
        priority=priority,
        assigned_to=assigned_to,
    )
    return {
        "success": True,
        "data": [t.to_dict() for t in tasks],
        "total": len(tasks),
    }


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    request: UpdateStatusRequest,
    claims: TokenClaims = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    """Move a task to a new status."""
    task = await service.update_status(task_id, claims.org_id, request.status)
    return {"success": True, "data": task.to_dict()}


@router.patch("/{task_id}")
async def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    claims: TokenClaims = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    """Edit a task's descriptive fields."""
    task = await service.update_task(
        task_id,
        claims.org_id,
        request.model_dump(exclude_unset=True),
    )
    return {"success": True, "data": task.to_dict()}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    claims: TokenClaims = Depends(require_auth),
    service: TaskService = Depends(get_task_service),
):
    await service.delete_task(task_id, claims.org_id)
    return {"success": True, "message": "Task deleted"}
