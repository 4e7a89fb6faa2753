"""Domain exceptions for the task board."""


class TaskBoardError(Exception):
    """Base class for task board errors."""


class ValidationError(TaskBoardError, ValueError):
    """Request input is missing or malformed."""


class NotFoundError(TaskBoardError, LookupError):
    """Referenced task does not exist."""


class StoreError(TaskBoardError):
    """Persisted task document could not be read or written."""
