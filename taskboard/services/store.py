"""JSON file persistence for the task collection."""

import contextlib
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from ..errors import StoreError
from ..models.task import TaskCollection
from ..utils.logging import TimedOperation

logger = logging.getLogger(__name__)


class TaskStore(ABC):
    """Persistence boundary for the task collection."""

    @abstractmethod
    def load(self) -> TaskCollection:
        """Return the full persisted collection."""

    @abstractmethod
    def save(self, collection: TaskCollection) -> None:
        """Replace the persisted collection."""


class JsonFileTaskStore(TaskStore):
    """Stores the whole collection as one pretty-printed JSON document.

    There is no cache: every ``load`` reads the file again, and every
    ``save`` rewrites it in full through a temporary file and ``os.replace``.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the store.

        Args:
            path: Location of the JSON document
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TaskCollection:
        """Read the document, creating an empty one on first use.

        Returns:
            Persisted task collection

        Raises:
            StoreError: If the file exists but cannot be read or parsed
        """
        if not self._path.exists():
            logger.info(f"Task file {self._path} missing, initializing empty board")
            collection = TaskCollection()
            self.save(collection)
            return collection

        try:
            raw = self._path.read_text("utf-8")
            data = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read task file {self._path}: {str(e)}")
            raise StoreError(f"cannot read task file {self._path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise StoreError(f"task file {self._path} must contain a JSON object")

        try:
            collection = TaskCollection.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Task file {self._path} has invalid records: {str(e)}")
            raise StoreError(f"invalid task records in {self._path}") from e

        logger.debug(f"Loaded {len(collection.tasks)} tasks from {self._path}")
        return collection

    def save(self, collection: TaskCollection) -> None:
        """Atomically overwrite the document with ``collection``.

        Raises:
            StoreError: If the document cannot be written
        """
        payload = json.dumps(
            collection.model_dump(mode="json", by_alias=True),
            ensure_ascii=False,
            indent=2,
        )
        tmp_path = None

        with TimedOperation(f"save {len(collection.tasks)} tasks", __name__):
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                # One temp file per save so overlapping writers never share it
                with tempfile.NamedTemporaryFile(
                    mode="w",
                    encoding="utf-8",
                    dir=self._path.parent,
                    prefix=self._path.name + ".",
                    suffix=".tmp",
                    delete=False,
                ) as tmp:
                    tmp_path = Path(tmp.name)
                    tmp.write(payload + "\n")
                os.replace(tmp_path, self._path)
            except OSError as e:
                logger.error(f"Failed to write task file {self._path}: {str(e)}")
                if tmp_path is not None:
                    with contextlib.suppress(OSError):
                        tmp_path.unlink()
                raise StoreError(f"cannot write task file {self._path}: {e}") from e
