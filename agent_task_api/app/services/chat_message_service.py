"""
Service layer for task conversations.

Messages belong to exactly one task and are returned oldest first so
clients can render a conversation top to bottom.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List

from agent_task_api.app.core.db import get_connection, to_db_timestamp, utc_now
from agent_task_api.app.core.exceptions import TaskReferenceError
from agent_task_api.app.schemas.chat_message import (
    ChatMessageCreate,
    ChatMessageQuery,
    ChatMessageRead,
)
from agent_task_api.app.services.task_service import require_task


logger = logging.getLogger(__name__)


class ChatMessageService:
    """Service for posting and reading chat messages."""

    @classmethod
    async def create_message(cls, data: ChatMessageCreate) -> ChatMessageRead:
        """Append a message to a task's conversation.

        Raises ``TaskReferenceError`` if the task does not exist.
        """
        timestamp = to_db_timestamp(utc_now())
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            require_task(cursor, data.task_id)
            cursor.execute(
                """
                INSERT INTO chat_messages (task_id, role, content, agent_name, timestamp)
                VALUES (?, ?, ?, ?, ?)
                """,
                (data.task_id, data.role.value, data.content, data.agent_name, timestamp),
            )
            message_id = cursor.lastrowid
            conn.commit()
            logger.debug("Chat message %s (%s) added to task %s", message_id, data.role.value, data.task_id)
            return ChatMessageRead(id=message_id, timestamp=timestamp, **data.model_dump())
        except TaskReferenceError:
            conn.rollback()
            logger.warning("Chat message rejected: task %s not found", data.task_id)
            raise
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if "FOREIGN KEY" in str(exc):
                raise TaskReferenceError(data.task_id) from exc
            logger.exception("Chat message creation failed")
            raise
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Chat message creation failed")
            raise
        finally:
            conn.close()

    @classmethod
    async def list_messages(cls, query: ChatMessageQuery) -> List[ChatMessageRead]:
        """Return one page of a task's conversation in chronological order."""
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT id, task_id, role, content, agent_name, timestamp
                FROM chat_messages
                WHERE task_id = ?
                ORDER BY timestamp ASC, id ASC
                LIMIT ? OFFSET ?
                """,
                (query.task_id, query.limit, query.offset),
            ).fetchall()
            return [ChatMessageRead.model_validate(dict(row)) for row in rows]
        except sqlite3.Error:
            logger.exception("Chat message listing failed for task %s", query.task_id)
            raise
        finally:
            conn.close()
