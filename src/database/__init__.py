"""
Persistence layer for the Workforce Platform.

Provides the async engine/session plumbing, ORM models and repositories.
"""

from .models import (
    Base,
    OrganizationRecord,
    EmployeeRecord,
    TaskRecord,
    ProductivityScoreRecord,
)
from .async_engine import (
    create_engine,
    get_session_factory,
    session_scope,
    check_database_connection,
    init_database,
    close_database,
)

__all__ = [
    "Base",
    "OrganizationRecord",
    "EmployeeRecord",
    "TaskRecord",
    "ProductivityScoreRecord",
    "create_engine",
    "get_session_factory",
    "session_scope",
    "check_database_connection",
    "init_database",
    "close_database",
]
