"""
Service for recording and listing execution results.

Results are immutable: once inserted they are only ever read, and they
disappear together with their task through the cascading foreign key.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List

from agent_task_api.app.core.db import get_connection, to_db_timestamp, utc_now
from agent_task_api.app.core.exceptions import TaskReferenceError
from agent_task_api.app.schemas.execution_result import (
    ExecutionResultCreate,
    ExecutionResultQuery,
    ExecutionResultRead,
)
from agent_task_api.app.services.task_service import require_task


logger = logging.getLogger(__name__)


class ExecutionResultService:
    """Query service for the ``execution_results`` table."""

    @classmethod
    async def create_result(cls, data: ExecutionResultCreate) -> ExecutionResultRead:
        """Record an execution result for an existing task.

        The existence check and the insert share one write transaction.
        Raises ``TaskReferenceError`` if ``data.task_id`` does not point at
        a task; nothing is inserted in that case.
        """
        created_at = to_db_timestamp(utc_now())
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            require_task(cursor, data.task_id)
            cursor.execute(
                """
                INSERT INTO execution_results
                    (task_id, content, content_type, execution_time_ms, status, error_message, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.task_id,
                    data.content,
                    data.content_type.value,
                    data.execution_time_ms,
                    data.status.value,
                    data.error_message,
                    created_at,
                ),
            )
            result_id = cursor.lastrowid
            conn.commit()
            logger.info(
                "Recorded %s execution result %s for task %s",
                data.status.value,
                result_id,
                data.task_id,
            )
            return ExecutionResultRead(id=result_id, created_at=created_at, **data.model_dump())
        except TaskReferenceError:
            conn.rollback()
            logger.warning("Execution result rejected: task %s not found", data.task_id)
            raise
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if "FOREIGN KEY" in str(exc):
                raise TaskReferenceError(data.task_id) from exc
            logger.exception("Execution result creation failed")
            raise
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Execution result creation failed")
            raise
        finally:
            conn.close()

    @classmethod
    async def list_results(cls, query: ExecutionResultQuery) -> List[ExecutionResultRead]:
        """Return every result of a task, newest first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT id, task_id, content, content_type, execution_time_ms, status, error_message, created_at
                FROM execution_results
                WHERE task_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (query.task_id,),
            ).fetchall()
            return [ExecutionResultRead.model_validate(dict(row)) for row in rows]
        except sqlite3.Error:
            logger.exception("Execution result listing failed for task %s", query.task_id)
            raise
        finally:
            conn.close()
