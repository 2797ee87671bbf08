"""
Services layer for the Workforce Platform.

Application services (tasks, employees), the scoring and smart-assign
engines, and the subscribers reacting to domain events.
"""

from .scoring_engine import ScoringEngine, compute_productivity_score
from .smart_assign_engine import (
    SmartAssignEngine,
    rank_candidates,
    DEFAULT_PRODUCTIVITY_SCORE,
)
from .chain_logger import ChainLogger
from .task_completed_handler import TaskCompletedHandler
from .task_service import TaskService
from .employee_service import EmployeeService

__all__ = [
    "ScoringEngine",
    "compute_productivity_score",
    "SmartAssignEngine",
    "rank_candidates",
    "DEFAULT_PRODUCTIVITY_SCORE",
    "ChainLogger",
    "TaskCompletedHandler",
    "TaskService",
    "EmployeeService",
]
