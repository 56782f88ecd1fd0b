from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

import structlog

from .errors import NotFoundError, StorageError
from .models import NewTask, TaskEntity, TaskStatus
from .repositories import Repository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    status: str = "status"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()

# SQLite INTEGER is a signed 64-bit value
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def _storable_id(task_id: int) -> bool:
    return _MIN_ID <= task_id <= _MAX_ID


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    Each operation opens its own connection, so single-row writes are atomic
    and no connection is shared between requests.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()
        logger.info("SQLite task store ready", db_path=db_path)

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"Could not open task database: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Task database operation failed: {exc}") from exc
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} VARCHAR(120) NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.status} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_status ON {_COLS.table}({_COLS.status})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "description": row[_COLS.description],
            "status": TaskStatus.from_code(row[_COLS.status]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def insert(self, data: NewTask) -> TaskEntity:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.description}, {_COLS.status},
                    {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    data["title"],
                    data["description"],
                    int(data["status"]),
                    data["created_at"].isoformat(),
                    data["updated_at"].isoformat(),
                ),
            )
            new_id = cur.lastrowid
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (new_id,)
            ).fetchone()
            assert row is not None
            return self._row_to_entity(row)

    def find_by_id(self, task_id: int) -> Optional[TaskEntity]:
        if not _storable_id(task_id):
            return None
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,)).fetchone()
            return self._row_to_entity(row) if row else None

    def list_all(self, status: Optional[TaskStatus] = None) -> List[TaskEntity]:
        where_sql = ""
        params: list = []
        if status is not None:
            where_sql = f"WHERE {_COLS.status} = ?"
            params.append(int(status))

        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} {where_sql} ORDER BY {_COLS.id} ASC",
                params,
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def commit(self, entity: TaskEntity) -> TaskEntity:
        if not _storable_id(entity["id"]):
            raise NotFoundError(entity["id"])
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.status} = ?,
                    {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    entity["title"],
                    entity["description"],
                    int(entity["status"]),
                    entity["updated_at"].isoformat(),
                    entity["id"],
                ),
            )
            if cur.rowcount == 0:
                raise NotFoundError(entity["id"])
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (entity["id"],)
            ).fetchone()
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, task_id: int) -> bool:
        if not _storable_id(task_id):
            return False
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,))
            return cur.rowcount > 0

    def count(self) -> int:
        with self._conn() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS cnt FROM {_COLS.table}").fetchone()
            return int(row["cnt"]) if row else 0
