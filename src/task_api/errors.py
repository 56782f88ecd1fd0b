from __future__ import annotations


class TaskError(Exception):
    """Base class for errors raised by the task service and its stores."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# PUBLIC_INTERFACE
class ValidationError(TaskError):
    """Input violates a task field rule (empty/too-long title, unknown status)."""


# PUBLIC_INTERFACE
class NotFoundError(TaskError):
    """The operation targets a task id that does not exist."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with id {task_id} not found")
        self.task_id = task_id


# PUBLIC_INTERFACE
class StorageError(TaskError):
    """The underlying storage backend failed."""
