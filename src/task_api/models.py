from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Optional, TypedDict

from .errors import ValidationError

TITLE_MAX_LENGTH = 120


# PUBLIC_INTERFACE
class TaskStatus(IntEnum):
    """
    Workflow status of a task.

    The integer value is the persisted code; the name is the token used on the wire.
    Any status may move to any other, there is no transition graph.
    """

    NOT_STARTED = 0
    IN_PROGRESS = 1
    COMPLETED = 2

    @classmethod
    def parse(cls, value: str) -> "TaskStatus":
        """
        Parse a status token case-insensitively.

        Raises:
            ValidationError: if the token is not one of the enumerated names.
        """
        token = value.strip().upper() if isinstance(value, str) else ""
        try:
            return cls[token]
        except KeyError:
            raise ValidationError(invalid_status_message()) from None

    @classmethod
    def from_code(cls, code: int) -> "TaskStatus":
        return cls(int(code))

    def format(self) -> str:
        return self.name


def invalid_status_message() -> str:
    valid = ", ".join(s.name for s in TaskStatus)
    return f"Invalid status. Valid values: {valid}"


# PUBLIC_INTERFACE
class NewTask(TypedDict):
    """
    A task record that has not been stored yet (no id assigned).
    """

    title: str
    description: Optional[str]
    status: TaskStatus
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class TaskEntity(NewTask):
    """
    A stored task record.

    Fields:
    - id: Unique integer identifier assigned by the store, never changes
    - title: Trimmed title (1..120 chars)
    - description: Optional description, None when blank
    - status: TaskStatus member
    - created_at: UTC creation timestamp, set once
    - updated_at: UTC timestamp of the last effective change
    """

    id: int
