"""In-memory test doubles."""

from typing import List

from taskboard.models.task import Task, TaskCollection
from taskboard.services.store import TaskStore


class InMemoryTaskStore(TaskStore):
    """Keeps the collection in memory, copying on every load and save.

    Copies make each service call see a fresh collection, the same way the
    JSON store re-reads the file.
    """

    def __init__(self, tasks: List[Task] = None):
        self._collection = TaskCollection(tasks=list(tasks or []))
        self.saves = 0

    def load(self) -> TaskCollection:
        return self._collection.model_copy(deep=True)

    def save(self, collection: TaskCollection) -> None:
        self._collection = collection.model_copy(deep=True)
        self.saves += 1

    @property
    def tasks(self) -> List[Task]:
        return list(self._collection.tasks)
