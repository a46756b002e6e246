"""
Service for creating, listing, updating and deleting tasks.

Tasks are stored in the ``tasks`` table.  Every method opens its own
connection, performs one unit of work and closes the connection again,
so no state is shared between requests.  Lookups of a missing task
return ``None`` (or ``False`` for deletion) instead of raising.

Deleting a task relies on the ``ON DELETE CASCADE`` foreign keys of
``execution_results`` and ``chat_messages``: the single ``DELETE``
statement removes the task and all of its dependents atomically.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta
from typing import List, Optional

from agent_task_api.app.core.db import get_connection, to_db_timestamp, utc_now
from agent_task_api.app.core.exceptions import TaskReferenceError
from agent_task_api.app.schemas.enums import TaskStatus
from agent_task_api.app.schemas.task import TaskCreate, TaskQuery, TaskRead, TaskUpdate


logger = logging.getLogger(__name__)

_TASK_COLUMNS = "id, title, description, status, agent_type, created_at, updated_at"


def _row_to_task(row: sqlite3.Row) -> TaskRead:
    return TaskRead(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        status=row["status"],
        agent_type=row["agent_type"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def require_task(cursor: sqlite3.Cursor, task_id: int) -> None:
    """Raise ``TaskReferenceError`` unless the task exists.

    Callers run this inside the transaction that performs their insert
    so the task cannot disappear between the check and the write.
    """
    row = cursor.execute("SELECT id FROM tasks WHERE id = ?", (task_id,)).fetchone()
    if not row:
        raise TaskReferenceError(task_id)


class TaskService:
    """Query service for the ``tasks`` table."""

    @classmethod
    async def create_task(cls, data: TaskCreate) -> TaskRead:
        """Insert a new task and return it.

        The status is always ``pending`` and both timestamps are set to
        the same instant.
        """
        now = to_db_timestamp(utc_now())
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO tasks (title, description, status, agent_type, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    data.title,
                    data.description,
                    TaskStatus.PENDING.value,
                    data.agent_type,
                    now,
                    now,
                ),
            )
            task_id = cursor.lastrowid
            conn.commit()
            logger.info("Created task %s for agent type '%s'", task_id, data.agent_type)
            return TaskRead(
                id=task_id,
                title=data.title,
                description=data.description,
                status=TaskStatus.PENDING,
                agent_type=data.agent_type,
                created_at=now,
                updated_at=now,
            )
        except sqlite3.Error:
            logger.exception("Task creation failed")
            raise
        finally:
            conn.close()

    @classmethod
    async def list_tasks(cls, query: TaskQuery) -> List[TaskRead]:
        """Return tasks matching every supplied filter, newest first.

        - ``status`` and ``agent_type`` are optional and combined with AND.
        - ``limit`` and ``offset`` are applied after ordering.
        - Rows created in the same microsecond are ordered by id so that
          consecutive pages never overlap.
        """
        sql = f"SELECT {_TASK_COLUMNS} FROM tasks"
        params: list = []
        where_clauses: list[str] = []
        if query.status is not None:
            where_clauses.append("status = ?")
            params.append(query.status.value)
        if query.agent_type is not None:
            where_clauses.append("agent_type = ?")
            params.append(query.agent_type)
        if where_clauses:
            sql += " WHERE " + " AND ".join(where_clauses)
        sql += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([query.limit, query.offset])

        conn = get_connection()
        try:
            rows = conn.execute(sql, tuple(params)).fetchall()
            return [_row_to_task(row) for row in rows]
        except sqlite3.Error:
            logger.exception("Task listing failed")
            raise
        finally:
            conn.close()

    @classmethod
    async def get_task(cls, task_id: int) -> Optional[TaskRead]:
        """Retrieve a single task by ID, or ``None`` when it does not exist."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?",
                (task_id,),
            ).fetchone()
            return _row_to_task(row) if row else None
        except sqlite3.Error:
            logger.exception("Task lookup failed for id %s", task_id)
            raise
        finally:
            conn.close()

    @classmethod
    async def update_task(cls, task_id: int, data: TaskUpdate) -> Optional[TaskRead]:
        """Apply a partial update to a task.

        Only the fields explicitly present in ``data`` are written.
        ``updated_at`` is always refreshed, even when no other field is
        supplied, and is kept strictly greater than its previous value.
        ``created_at`` is never touched.  Returns ``None`` if the task
        does not exist.
        """
        changes = data.changes()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            row = cursor.execute(
                "SELECT updated_at FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
            if not row:
                conn.rollback()
                return None

            previous = datetime.fromisoformat(row["updated_at"])
            now = utc_now()
            if now <= previous:
                now = previous + timedelta(microseconds=1)

            # Keys come from TaskUpdate's declared fields only.
            assignments = [f"{column} = ?" for column in changes]
            values = list(changes.values())
            assignments.append("updated_at = ?")
            values.append(to_db_timestamp(now))
            values.append(task_id)
            cursor.execute(
                f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?",
                tuple(values),
            )
            updated = cursor.execute(
                f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
            conn.commit()
            logger.info("Updated task %s: %s", task_id, sorted(changes))
            return _row_to_task(updated)
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Task update failed for id %s", task_id)
            raise
        finally:
            conn.close()

    @classmethod
    async def delete_task(cls, task_id: int) -> bool:
        """Delete a task together with its execution results and chat messages.

        Returns ``True`` if a task was removed and ``False`` if no task
        with that ID existed, in which case nothing is changed.
        """
        conn = get_connection()
        try:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            deleted = cursor.rowcount > 0
            conn.commit()
            if deleted:
                logger.info("Deleted task %s", task_id)
            return deleted
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Task deletion failed for id %s", task_id)
            raise
        finally:
            conn.close()
