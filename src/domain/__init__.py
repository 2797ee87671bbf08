"""
Domain layer for the Workforce Platform.

Contains:
- Value Objects: task/score enums and immutable result models
- Domain Events: typed signals for task and employee changes
- Event Bus: in-process publish/subscribe
"""

from .value_objects import (
    TaskStatus,
    TaskPriority,
    EmployeeStatus,
    ScoreTrend,
    ScoreBreakdown,
    ScoreResult,
    EmployeeProfile,
    Candidate,
    EmployeeScoreSummary,
    utcnow,
)

from .events import (
    EventName,
    DomainEvent,
    TaskCreated,
    TaskCompleted,
    EmployeeAdded,
)

from .event_bus import EventBus, DEFAULT_MAX_SUBSCRIBERS

__all__ = [
    # Value Objects
    "TaskStatus",
    "TaskPriority",
    "EmployeeStatus",
    "ScoreTrend",
    "ScoreBreakdown",
    "ScoreResult",
    "EmployeeProfile",
    "Candidate",
    "EmployeeScoreSummary",
    "utcnow",
    # Events
    "EventName",
    "DomainEvent",
    "TaskCreated",
    "TaskCompleted",
    "EmployeeAdded",
    # Event Bus
    "EventBus",
    "DEFAULT_MAX_SUBSCRIBERS",
]
