"""API routers, included by web.app.create_app."""

from . import ai, employees, health, tasks

__all__ = ["ai", "employees", "health", "tasks"]
