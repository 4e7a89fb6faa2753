"""Dependency injection helpers for FastAPI."""

from functools import lru_cache

from fastapi import Request

from .config import Settings
from .services.task_service import TaskService


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()


def get_task_service(request: Request) -> TaskService:
    """Get the task service attached to the running application."""
    return request.app.state.task_service
