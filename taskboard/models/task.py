"""Domain models for the task board."""

import secrets
import string
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

TASK_ID_ALPHABET = string.ascii_letters + string.digits + "_-"
TASK_ID_LENGTH = 10

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class TaskStatus(str, Enum):
    """Task status enumeration (one board column per value)."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def normalize(cls, value: str) -> "TaskStatus":
        """Map a status string onto a known status, falling back to todo."""
        try:
            return cls(value)
        except ValueError:
            return cls.TODO


def generate_task_id() -> str:
    """Return a short URL-safe random identifier."""
    return "".join(secrets.choice(TASK_ID_ALPHABET) for _ in range(TASK_ID_LENGTH))


def format_timestamp(moment: datetime) -> str:
    """Format an aware datetime as a fixed-width UTC ISO-8601 string."""
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def utc_timestamp(after: Optional[str] = None) -> str:
    """Current UTC timestamp, strictly later than ``after`` when given."""
    now = datetime.now(timezone.utc)
    if after:
        try:
            previous = datetime.strptime(after, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            previous = None
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
    return format_timestamp(now)


class Task(BaseModel):
    """Task domain model."""

    id: str = Field(default_factory=generate_task_id, description="Unique task identifier")
    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(default="", description="Task description")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Task status")
    created_at: str = Field(default_factory=utc_timestamp, alias="createdAt", description="Creation timestamp")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt", description="Last update timestamp")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
        use_enum_values = True

    @property
    def sort_key(self) -> str:
        """Timestamp used for board ordering."""
        return self.updated_at or self.created_at

    def update_timestamp(self) -> None:
        """Refresh the updated_at timestamp."""
        self.updated_at = utc_timestamp(after=self.updated_at or self.created_at)


class TaskCollection(BaseModel):
    """The persisted document: every task on the board."""

    tasks: List[Task] = Field(default_factory=list, description="All tasks, in storage order")

    def find(self, task_id: str) -> Optional[Task]:
        """Return the task with ``task_id`` or None."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
