"""
SQLAlchemy ORM Models for the Workforce Database.

Architecture:
- Primary Keys: UUID strings for all tables (globally unique)
- Tenancy: every row carries org_id, used as the partition key on queries
- Scores: one row per employee, replaced wholesale on recomputation
"""

from uuid import uuid4

from sqlalchemy import (
    Column, String, Integer, Float, DateTime, Text, Enum, ForeignKey,
    Index, CheckConstraint, JSON,
)
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

from domain.value_objects import (
    EmployeeStatus,
    ScoreTrend,
    TaskPriority,
    TaskStatus,
    utcnow,
)


# Cross-database compatible JSON type
# Uses JSONB on PostgreSQL, JSON on SQLite/others
class JSONB(TypeDecorator):
    """A portable JSONB type that works with both PostgreSQL and SQLite."""
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PG_JSONB())
        else:
            return dialect.type_descriptor(JSON())


Base = declarative_base()


def generate_id() -> str:
    return str(uuid4())


def _enum_value(value):
    return getattr(value, "value", value)


def _isoformat(value):
    return value.isoformat() if value is not None else None


def _value_enum(enum_cls, name: str) -> Enum:
    """Store enum values (not member names) as portable VARCHARs."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )


class OrganizationRecord(Base):
    """Tenant boundary; owns employees, tasks and scores."""
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    plan = Column(String(50), nullable=False, default="free")
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Organization(id={self.id}, slug={self.slug})>"


class EmployeeRecord(Base):
    """Employee belonging to one organization."""
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=generate_id)
    org_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(String(100), nullable=False)
    department = Column(String(100), nullable=False, default="Management")
    skills = Column(JSONB, nullable=False, default=list)
    wallet_address = Column(String(100), nullable=True)
    status = Column(
        _value_enum(EmployeeStatus, "employee_status"),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_employees_org_status", "org_id", "status"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "org_id": self.org_id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "department": self.department,
            "skills": list(self.skills or []),
            "wallet_address": self.wallet_address,
            "status": _enum_value(self.status),
            "created_at": _isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Employee(id={self.id}, org_id={self.org_id}, name={self.name})>"


class TaskRecord(Base):
    """
    Unit of work assigned to an employee.

    completed_at is non-null exactly when status is 'completed'.
    """
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    org_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_to = Column(
        String(36),
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_by = Column(String(36), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    priority = Column(
        _value_enum(TaskPriority, "task_priority"),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    status = Column(
        _value_enum(TaskStatus, "task_status"),
        nullable=False,
        default=TaskStatus.ASSIGNED,
    )
    required_skills = Column(JSONB, nullable=False, default=list)
    due_date = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "(status = 'completed' AND completed_at IS NOT NULL) OR "
            "(status != 'completed' AND completed_at IS NULL)",
            name="ck_tasks_completed_at_matches_status",
        ),
        Index("ix_tasks_org_status", "org_id", "status"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "org_id": self.org_id,
            "assigned_to": self.assigned_to,
            "created_by": self.created_by,
            "title": self.title,
            "description": self.description,
            "priority": _enum_value(self.priority),
            "status": _enum_value(self.status),
            "required_skills": list(self.required_skills or []),
            "due_date": _isoformat(self.due_date),
            "completed_at": _isoformat(self.completed_at),
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Task(id={self.id}, status={self.status}, assigned_to={self.assigned_to})>"


class ProductivityScoreRecord(Base):
    """Latest productivity score of one employee (upserted by employee_id)."""
    __tablename__ = "ai_scores"

    id = Column(String(36), primary_key=True, default=generate_id)
    org_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    employee_id = Column(
        String(36),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    productivity_score = Column(Integer, nullable=False)
    task_completion_rate = Column(Float, nullable=False)
    trend = Column(_value_enum(ScoreTrend, "score_trend"), nullable=False)
    score_breakdown = Column(JSONB, nullable=False, default=dict)
    computed_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "productivity_score >= 0 AND productivity_score <= 100",
            name="ck_ai_scores_range",
        ),
    )

    def __repr__(self):
        return f"<ProductivityScore(employee_id={self.employee_id}, score={self.productivity_score})>"
