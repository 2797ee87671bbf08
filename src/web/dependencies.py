"""
FastAPI Dependency Injection for application services.

All services are built once by the composition root (web.app.create_app)
and stored on app.state; these helpers hand them to endpoints.

Usage in endpoints:
    @router.get("/api/tasks")
    async def list_tasks(service: TaskService = Depends(get_task_service)):
        ...
"""

from fastapi import Request

from services.employee_service import EmployeeService
from services.smart_assign_engine import SmartAssignEngine
from services.task_service import TaskService


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


def get_smart_assign_engine(request: Request) -> SmartAssignEngine:
    return request.app.state.smart_assign_engine


def get_session_factory(request: Request):
    """Session factory for endpoints that read through repositories directly."""
    return request.app.state.session_factory
