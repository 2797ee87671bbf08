"""Repository implementations over SQLAlchemy async sessions."""

from .task_repository import TaskRepository
from .employee_repository import EmployeeRepository
from .score_repository import ScoreRepository

__all__ = [
    "TaskRepository",
    "EmployeeRepository",
    "ScoreRepository",
]
