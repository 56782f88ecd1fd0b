from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List, Optional

import structlog

from .errors import NotFoundError, ValidationError
from .models import TITLE_MAX_LENGTH, NewTask, TaskEntity, TaskStatus
from .repositories import Repository

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_title(title: Optional[str]) -> str:
    s = (title or "").strip()
    if not s:
        raise ValidationError("Title is required and cannot be empty")
    if len(s) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
    return s


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    s = description.strip()
    return s or None


# PUBLIC_INTERFACE
class TaskService:
    """
    Domain rules for task records, applied around a Repository.

    The service holds no per-request state; every call reads and writes
    through the repository. Concurrent updates to the same id are not
    coordinated: the last commit wins.
    """

    def __init__(self, repository: Repository, clock: Clock = utcnow) -> None:
        self._repo = repository
        self._clock = clock

    # PUBLIC_INTERFACE
    def create(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> TaskEntity:
        """
        Validate and store a new task.

        Args:
            title: Required; trimmed, 1..120 characters.
            description: Optional; blank input is stored as None.
            status: Optional status token (case-insensitive). Defaults to NOT_STARTED.

        Raises:
            ValidationError: on an empty/too-long title or an unknown status.
        """
        clean_title = _clean_title(title)
        parsed_status = TaskStatus.parse(status) if status else TaskStatus.NOT_STARTED

        now = self._clock()
        data: NewTask = {
            "title": clean_title,
            "description": _clean_description(description),
            "status": parsed_status,
            "created_at": now,
            "updated_at": now,
        }
        created = self._repo.insert(data)
        logger.info("Task created", task_id=created["id"], status=created["status"].format())
        return created

    # PUBLIC_INTERFACE
    def list(self, status: Optional[str] = None) -> List[TaskEntity]:
        """
        Return tasks ordered by ascending id, optionally filtered by status token.

        Raises:
            ValidationError: if status is given but unknown.
        """
        parsed = TaskStatus.parse(status) if status else None
        return self._repo.list_all(parsed)

    # PUBLIC_INTERFACE
    def get(self, task_id: int) -> TaskEntity:
        """Return a single task or raise NotFoundError."""
        entity = self._repo.find_by_id(task_id)
        if entity is None:
            raise NotFoundError(task_id)
        return entity

    # PUBLIC_INTERFACE
    def update(
        self,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> TaskEntity:
        """
        Partially update a task.

        - title: ignored when None or blank; otherwise trimmed and length-checked.
        - description: None means "not supplied"; any string (blank included)
          replaces the current value, blank clearing it.
        - status: ignored when None or empty; otherwise parsed case-insensitively.

        All supplied fields are validated before any is applied. updated_at is
        refreshed and the record committed only when at least one field was applied.

        Raises:
            NotFoundError: if no task has task_id.
            ValidationError: on a too-long title or an unknown status.
        """
        entity = self.get(task_id)

        new_title = _clean_title(title) if title is not None and title.strip() else None
        new_status = TaskStatus.parse(status) if status else None

        dirty = False
        if new_title is not None:
            entity["title"] = new_title
            dirty = True
        # Supplied descriptions always count as a change, even if equal.
        if description is not None:
            entity["description"] = _clean_description(description)
            dirty = True
        if new_status is not None:
            entity["status"] = new_status
            dirty = True

        if not dirty:
            return entity

        entity["updated_at"] = max(self._clock(), entity["created_at"])
        committed = self._repo.commit(entity)
        logger.info("Task updated", task_id=task_id, status=committed["status"].format())
        return committed

    # PUBLIC_INTERFACE
    def delete(self, task_id: int) -> None:
        """
        Hard-delete a task.

        Raises:
            NotFoundError: if no task has task_id.
        """
        if not self._repo.delete(task_id):
            raise NotFoundError(task_id)
        logger.info("Task deleted", task_id=task_id)
