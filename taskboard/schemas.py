"""API request/response schemas for the task board."""

from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from .errors import ValidationError
from .models.task import Task, TaskStatus

CommandT = TypeVar("CommandT", bound=BaseModel)


# Task commands
class TaskCreate(BaseModel):
    """Validated command for creating a task."""
    title: str = Field(default=None, validate_default=True, description="Task title")
    description: str = Field(default="", description="Task description")

    @field_validator("title", mode="before")
    @classmethod
    def _require_title(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("title_required", "title is required")
        return value.strip()

    @field_validator("description", mode="before")
    @classmethod
    def _clean_description(cls, value: Any) -> str:
        # Optional on create: anything but a string is dropped.
        return value.strip() if isinstance(value, str) else ""


class TaskUpdate(BaseModel):
    """Validated partial update. Only fields present in the payload are applied."""
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    status: Optional[TaskStatus] = Field(None, description="Task status")

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("title_invalid", "title must be a non-empty string")
        return value.strip()

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise PydanticCustomError("description_invalid", "description must be a string")
        return value.strip()

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value: Any) -> TaskStatus:
        if not isinstance(value, str):
            raise PydanticCustomError("status_invalid", "status must be a string")
        return TaskStatus.normalize(value)

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller."""
        return {name: getattr(self, name) for name in self.model_fields_set}


def parse_command(model: Type[CommandT], payload: Any) -> CommandT:
    """Validate a raw request payload into a command model.

    Args:
        model: Command class to build
        payload: Decoded JSON body (``None`` is treated as an empty object)

    Returns:
        Validated command instance

    Raises:
        ValidationError: With the message of the first failing field
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(e.errors()[0]["msg"]) from e


# Responses
class TaskResponse(BaseModel):
    """Schema for single-task API responses."""
    task: Task = Field(..., description="The created or updated task")


class TaskListResponse(BaseModel):
    """Schema for task list API responses."""
    tasks: List[Task] = Field(..., description="Tasks, most recently updated first")


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str = Field(..., description="Human readable error message")


class HealthResponse(BaseModel):
    """Schema for health check responses."""
    ok: bool = Field(default=True, description="Service is up")
