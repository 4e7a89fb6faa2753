"""Task service for CRUD operations on the persisted board."""

import logging
from typing import Any, List, Mapping, Union

from ..errors import NotFoundError
from ..models.task import Task, TaskStatus, generate_task_id, utc_timestamp
from ..schemas import TaskCreate, TaskUpdate, parse_command
from ..config import Settings
from .store import JsonFileTaskStore, TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    """Business rules for the task lifecycle.

    Every operation loads the collection from the store, applies the change
    and saves the whole collection back. Nothing is cached between calls and
    nothing serializes overlapping writers: the last save wins.
    """

    def __init__(self, store: TaskStore):
        """Initialize the task service.

        Args:
            store: Persistence backend owning the collection
        """
        self._store = store
        logger.info(f"Task service initialized with {type(store).__name__}")

    def list_tasks(self) -> List[Task]:
        """List all tasks, most recently touched first.

        Returns:
            Tasks ordered by updatedAt (createdAt when missing), descending
        """
        tasks = self._store.load().tasks
        tasks.sort(key=lambda t: t.sort_key, reverse=True)

        logger.debug(f"Listed {len(tasks)} tasks")
        return tasks

    def get_task(self, task_id: str) -> Task:
        """Get a task by ID.

        Raises:
            NotFoundError: If no task has this ID
        """
        task = self._store.load().find(task_id)
        if task is None:
            raise NotFoundError("task not found")
        return task

    def create_task(self, title: Any = None, description: Any = None) -> Task:
        """Create a new task.

        Args:
            title: Task title, required and non-blank
            description: Optional description; non-strings are dropped

        Returns:
            Created task

        Raises:
            ValidationError: If title is missing or blank
        """
        command = parse_command(TaskCreate, {"title": title, "description": description})
        return self.create_task_from_schema(command)

    def create_task_from_schema(self, task_data: TaskCreate) -> Task:
        """Create a new task from a validated command.

        Args:
            task_data: Task creation data

        Returns:
            Created task
        """
        collection = self._store.load()

        existing = {task.id for task in collection.tasks}
        task_id = generate_task_id()
        while task_id in existing:
            task_id = generate_task_id()

        now = utc_timestamp()
        task = Task(
            id=task_id,
            title=task_data.title,
            description=task_data.description,
            status=TaskStatus.TODO,
            created_at=now,
            updated_at=now,
        )
        collection.tasks.append(task)
        self._store.save(collection)

        logger.info(f"Created task {task.id}: {task.title}")
        return task

    def update_task(self, task_id: str, patch: Union[TaskUpdate, Mapping[str, Any], None]) -> Task:
        """Apply a partial update to a task.

        The task is looked up before the patch is validated, so an unknown ID
        is reported as not found whatever the payload.

        Args:
            task_id: Task ID
            patch: Validated ``TaskUpdate`` or raw request body

        Returns:
            Updated task

        Raises:
            NotFoundError: If no task has this ID
            ValidationError: If a supplied field has the wrong type or is blank
        """
        collection = self._store.load()
        task = collection.find(task_id)
        if task is None:
            logger.warning(f"Task {task_id} not found for update")
            raise NotFoundError("task not found")

        task_data = patch if isinstance(patch, TaskUpdate) else parse_command(TaskUpdate, patch)

        for field, value in task_data.changes().items():
            setattr(task, field, value)
        task.update_timestamp()

        self._store.save(collection)

        logger.info(f"Updated task {task_id}: {sorted(task_data.model_fields_set)}")
        return task

    def delete_task(self, task_id: str) -> None:
        """Delete a task.

        Raises:
            NotFoundError: If no task has this ID
        """
        collection = self._store.load()
        remaining = [task for task in collection.tasks if task.id != task_id]
        if len(remaining) == len(collection.tasks):
            logger.warning(f"Task {task_id} not found for deletion")
            raise NotFoundError("task not found")

        collection.tasks = remaining
        self._store.save(collection)
        logger.info(f"Deleted task {task_id}")


def create_task_service(settings: Settings) -> TaskService:
    """Build a task service backed by the configured JSON file.

    Args:
        settings: Application settings providing data_file

    Returns:
        Task service instance
    """
    return TaskService(JsonFileTaskStore(settings.data_file))
