"""
Workforce Platform web application.

Composition root: builds the event bus, engines, services and realtime
gateway once per application and wires the event subscriptions.

Run with:
    uvicorn web.app:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.database import DatabaseSettings, get_database_settings
from config.settings import Settings, get_settings
from core.exceptions import WorkforceError
from database.async_engine import (
    close_database,
    create_engine,
    get_session_factory,
    init_database,
)
from domain.event_bus import EventBus
from domain.events import EventName
from middleware.correlation import RequestIdMiddleware
from realtime import ConnectionManager, DashboardBroadcaster, websocket_router
from services.chain_logger import ChainLogger
from services.employee_service import EmployeeService
from services.scoring_engine import ScoringEngine
from services.smart_assign_engine import SmartAssignEngine
from services.task_completed_handler import TaskCompletedHandler
from services.task_service import TaskService
from web.helpers.error_responses import (
    HTTP_STATUS_CODES,
    ErrorCode,
    create_error_response,
    error_from_exception,
    handle_validation_error,
    server_error,
)
from web.routers import ai, employees, health, tasks

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    """Translate errors into the standard error envelope."""

    @app.exception_handler(WorkforceError)
    async def workforce_error_handler(request: Request, exc: WorkforceError):
        logger.warning(f"WorkforceError: {exc.code} - {exc.message}")
        return error_from_exception(exc, request_id=_request_id(request))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return handle_validation_error(exc.errors(), request_id=_request_id(request))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return create_error_response(
            HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR),
            message=str(exc.detail),
            request_id=_request_id(request),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        return server_error(
            "Something went wrong. Please try again.",
            request_id=_request_id(request),
        )


def create_app(
    settings: Optional[Settings] = None,
    database_settings: Optional[DatabaseSettings] = None,
    chain_logger: Optional[ChainLogger] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings (defaults to environment).
        database_settings: Database settings (defaults to environment).
        chain_logger: On-chain logger; built from settings.chain if omitted.

    Returns:
        Configured FastAPI instance. Shared components are exposed on
        app.state.
    """
    settings = settings or get_settings()
    database_settings = database_settings or get_database_settings()

    engine = create_engine(database_settings)
    session_factory = get_session_factory(engine)

    event_bus = EventBus(max_subscribers=settings.event_bus_max_subscribers)
    connection_manager = ConnectionManager()
    scoring_engine = ScoringEngine(session_factory)
    smart_assign_engine = SmartAssignEngine(session_factory)
    chain_logger = chain_logger or ChainLogger(settings.chain)
    task_completed_handler = TaskCompletedHandler(scoring_engine, chain_logger)

    # Scoring runs before the dashboard hears about the completion
    event_bus.subscribe(EventName.TASK_COMPLETED, task_completed_handler.handle)
    DashboardBroadcaster(connection_manager).register(event_bus)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database_settings.is_sqlite:
            await init_database(engine)
        logger.info(f"{settings.name} {settings.version} started ({settings.environment})")
        try:
            yield
        finally:
            await task_completed_handler.drain()
            await chain_logger.aclose()
            await close_database(engine)
            logger.info(f"{settings.name} stopped")

    app = FastAPI(
        title=settings.name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.event_bus = event_bus
    app.state.connection_manager = connection_manager
    app.state.scoring_engine = scoring_engine
    app.state.smart_assign_engine = smart_assign_engine
    app.state.chain_logger = chain_logger
    app.state.task_completed_handler = task_completed_handler
    app.state.task_service = TaskService(session_factory, event_bus)
    app.state.employee_service = EmployeeService(session_factory, event_bus)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(tasks.router)
    app.include_router(employees.router)
    app.include_router(ai.router)
    app.include_router(websocket_router)

    return app
