from __future__ import annotations

from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, List, Optional

from .errors import NotFoundError
from .models import NewTask, TaskEntity, TaskStatus
from .settings import Settings, get_settings


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract store contract for task records."""

    @abstractmethod
    def insert(self, data: NewTask) -> TaskEntity:
        """Store a new record and return it with its assigned id."""

    @abstractmethod
    def find_by_id(self, task_id: int) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def list_all(self, status: Optional[TaskStatus] = None) -> List[TaskEntity]:
        """
        Return all records ordered by ascending id.
        When status is given, only records with that status are returned.
        """

    @abstractmethod
    def commit(self, entity: TaskEntity) -> TaskEntity:
        """
        Persist the mutable fields of an existing record, keyed by its id.
        Raises NotFoundError if no record with that id exists.
        """

    @abstractmethod
    def delete(self, task_id: int) -> bool:
        """Delete a record by id. Return True if deleted, False if not found."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored records."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[int, TaskEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def insert(self, data: NewTask) -> TaskEntity:
        entity: TaskEntity = {
            "id": self._allocate_id(),
            "title": data["title"],
            "description": data["description"],
            "status": data["status"],
            "created_at": data["created_at"],
            "updated_at": data["updated_at"],
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def find_by_id(self, task_id: int) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def list_all(self, status: Optional[TaskStatus] = None) -> List[TaskEntity]:
        with self._lock:
            items = [t for t in self._items.values() if status is None or t["status"] == status]
            # Return copies to avoid external mutation
            return [t.copy() for t in sorted(items, key=lambda t: t["id"])]

    def commit(self, entity: TaskEntity) -> TaskEntity:
        with self._lock:
            existing = self._items.get(entity["id"])
            if existing is None:
                raise NotFoundError(entity["id"])
            # created_at is immutable once stored
            updated = existing.copy()
            updated["title"] = entity["title"]
            updated["description"] = entity["description"]
            updated["status"] = entity["status"]
            updated["updated_at"] = entity["updated_at"]
            self._items[entity["id"]] = updated
            return updated.copy()

    def delete(self, task_id: int) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._items)


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository backed by settings.sqlite_db_path
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()
