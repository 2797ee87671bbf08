"""
Domain Events for the Workforce Platform.

Domain events represent something that happened in the domain. They are
immutable, never persisted, and exist only to trigger subscribers once.

Each event name has exactly one payload shape:
- task.created   -> TaskCreated
- task.completed -> TaskCompleted
- employee.added -> EmployeeAdded
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects import utcnow


class EventName(str, Enum):
    """Names of domain events."""
    TASK_CREATED = "task.created"
    TASK_COMPLETED = "task.completed"
    EMPLOYEE_ADDED = "employee.added"


class DomainEvent(BaseModel):
    """
    Base class for all domain events.

    Subclasses pin event_name to a single EventName and declare the fields
    of their payload.
    """

    model_config = ConfigDict(frozen=True)

    event_name: EventName
    occurred_at: datetime = Field(default_factory=utcnow)

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation sent to dashboard clients."""
        raise NotImplementedError


# =============================================================================
# TASK EVENTS
# =============================================================================

class TaskCreated(DomainEvent):
    """Event raised when a task is created."""
    event_name: EventName = EventName.TASK_CREATED

    task_id: str
    org_id: str
    employee_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "orgId": self.org_id,
            "employeeId": self.employee_id,
        }


class TaskCompleted(DomainEvent):
    """
    Event raised when an assigned task transitions to 'completed'.

    Only published for tasks that have an assignee, so employee_id is
    always present.
    """
    event_name: EventName = EventName.TASK_COMPLETED

    task_id: str
    org_id: str
    employee_id: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "orgId": self.org_id,
            "employeeId": self.employee_id,
        }


# =============================================================================
# EMPLOYEE EVENTS
# =============================================================================

class EmployeeAdded(DomainEvent):
    """Event raised when an employee joins an organization."""
    event_name: EventName = EventName.EMPLOYEE_ADDED

    employee_id: str
    org_id: str

    def to_payload(self) -> Dict[str, Any]:
        return {"employeeId": self.employee_id, "orgId": self.org_id}
