"""Pytest configuration and fixtures for test suite."""

import asyncio
import os
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio

# Set test environment BEFORE any other imports
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_DRIVER", "sqlite+aiosqlite")
os.environ.setdefault("CHAIN_ENABLED", "false")

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.database import DatabaseSettings
from config.settings import Settings
from database.async_engine import (
    close_database,
    create_engine,
    get_session_factory,
    init_database,
    session_scope,
)
from database.models import EmployeeRecord, OrganizationRecord, TaskRecord
from domain.value_objects import EmployeeStatus, TaskPriority, TaskStatus, utcnow
from rbac.jwt import create_access_token
from services.chain_logger import ChainLogger

TEST_JWT_SECRET = "test-jwt-secret-that-is-long-enough-for-hs256"


# =============================================================================
# SETTINGS
# =============================================================================

@pytest.fixture
def app_settings():
    """Application settings with a fixed signing secret."""
    return Settings(jwt_secret=TEST_JWT_SECRET, environment="test")


@pytest.fixture
def database_settings(tmp_path):
    """A fresh SQLite database file per test."""
    return DatabaseSettings(
        driver="sqlite+aiosqlite",
        sqlite_path=tmp_path / "workforce.db",
    )


# =============================================================================
# DATABASE
# =============================================================================

@pytest_asyncio.fixture
async def engine(database_settings):
    engine = create_engine(database_settings)
    await init_database(engine)
    yield engine
    await close_database(engine)


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine)


async def _insert(session_factory, record):
    async with session_scope(session_factory) as session:
        session.add(record)
        await session.commit()
    return record


def _new_org(name: str = "Acme") -> OrganizationRecord:
    slug = f"{name.lower()}-{uuid4().hex[:6]}"
    return OrganizationRecord(name=name, slug=slug, email=f"admin@{slug}.test")


def _new_employee(org_id, name="Ada", skills=None, status=EmployeeStatus.ACTIVE,
                  email=None, role="Engineer") -> EmployeeRecord:
    return EmployeeRecord(
        org_id=org_id,
        name=name,
        email=email or f"{name.lower()}-{uuid4().hex[:8]}@example.com",
        role=role,
        skills=list(skills or []),
        status=status,
    )


def _new_task(org_id, assigned_to=None, priority=TaskPriority.MEDIUM,
              status=TaskStatus.ASSIGNED, title="Write report") -> TaskRecord:
    return TaskRecord(
        org_id=org_id,
        assigned_to=assigned_to,
        title=title,
        priority=priority,
        status=status,
        completed_at=utcnow() if status == TaskStatus.COMPLETED else None,
    )


@pytest_asyncio.fixture
async def org(session_factory):
    """An organization row to own test data."""
    return await _insert(session_factory, _new_org())


@pytest.fixture
def make_org(session_factory):
    async def _make(name="Other"):
        return await _insert(session_factory, _new_org(name))
    return _make


@pytest.fixture
def make_employee(session_factory):
    """Factory inserting an employee; returns the record."""
    async def _make(org_id, **kwargs):
        return await _insert(session_factory, _new_employee(org_id, **kwargs))
    return _make


@pytest.fixture
def make_task(session_factory):
    """Factory inserting a task with a consistent completed_at."""
    async def _make(org_id, **kwargs):
        return await _insert(session_factory, _new_task(org_id, **kwargs))
    return _make


# =============================================================================
# MOCKS
# =============================================================================

@pytest.fixture
def mock_chain_logger():
    """Chain logger that records calls instead of talking to a node."""
    chain_logger = MagicMock(spec=ChainLogger)
    chain_logger.log_task_completion = AsyncMock(return_value="0xfeed")
    chain_logger.aclose = AsyncMock()
    return chain_logger


# =============================================================================
# APPLICATION
# =============================================================================

@pytest.fixture
def seeded(database_settings):
    """
    Seed an organization with an admin and a member before the app starts.

    Runs on its own event loop with its own engine; the application opens
    fresh connections to the same file afterwards.
    """
    async def _seed():
        engine = create_engine(database_settings)
        try:
            await init_database(engine)
            factory = get_session_factory(engine)
            org = await _insert(factory, _new_org("Acme"))
            admin = await _insert(factory, _new_employee(
                org.id, name="Grace", role="ADMIN", skills=["Management"]))
            member = await _insert(factory, _new_employee(
                org.id, name="Linus", skills=["React", "SQL"]))
            other_org = await _insert(factory, _new_org("Globex"))
            return SimpleNamespace(
                org_id=org.id,
                admin_id=admin.id,
                member_id=member.id,
                other_org_id=other_org.id,
            )
        finally:
            await close_database(engine)

    return asyncio.run(_seed())


@pytest.fixture
def app(app_settings, database_settings, mock_chain_logger, seeded):
    from web.app import create_app
    return create_app(
        settings=app_settings,
        database_settings=database_settings,
        chain_logger=mock_chain_logger,
    )


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token_for(app_settings):
    """Build a bearer token for (subject, org, role)."""
    def _token(subject_id, org_id, role="Engineer", **kwargs):
        return create_access_token(subject_id, org_id, role, settings=app_settings, **kwargs)
    return _token


@pytest.fixture
def admin_headers(seeded, token_for):
    token = token_for(seeded.admin_id, seeded.org_id, role="ADMIN")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def member_headers(seeded, token_for):
    token = token_for(seeded.member_id, seeded.org_id)
    return {"Authorization": f"Bearer {token}"}
