"""
Domain Value Objects for the Workforce Platform.

Value objects are immutable objects that describe characteristics of a thing,
but have no conceptual identity. They are defined by their attributes.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Naive UTC timestamp, the storage convention for all DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskStatus(str, Enum):
    """Task lifecycle status."""
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority; drives the productivity weighting."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ScoreTrend(str, Enum):
    """Derived direction of an employee's productivity score."""
    UP = "up"
    STABLE = "stable"


class ScoreBreakdown(BaseModel):
    """Snapshot of the task counts a score was computed from."""

    model_config = ConfigDict(frozen=True)

    total_assigned: int = Field(ge=0)
    total_completed: int = Field(ge=0)
    completion_rate_pct: int = Field(ge=0, le=100)


class ScoreResult(BaseModel):
    """
    Outcome of one productivity score computation.

    A pure function of the employee's task set at computation time.
    """

    model_config = ConfigDict(frozen=True)

    productivity_score: int = Field(ge=0, le=100)
    task_completion_rate: float = Field(ge=0.0, le=1.0)
    trend: ScoreTrend
    breakdown: ScoreBreakdown


class EmployeeProfile(BaseModel):
    """An active employee as seen by the smart-assign ranking."""

    model_config = ConfigDict(frozen=True)

    employee_id: str
    name: str
    role: str
    skills: List[str] = Field(default_factory=list)
    productivity_score: float


class Candidate(BaseModel):
    """A ranked assignment recommendation."""

    model_config = ConfigDict(frozen=True)

    employee_id: str
    name: str
    role: str
    matched_skills: List[str]
    match_score: int = Field(ge=0, le=100)
    explanation: str


class EmployeeScoreSummary(BaseModel):
    """Score row joined with its employee, for org dashboards."""

    model_config = ConfigDict(frozen=True)

    employee_id: str
    name: str
    role: str
    productivity_score: int
    task_completion_rate: float
    trend: ScoreTrend
    computed_at: datetime
