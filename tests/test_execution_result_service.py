"""Tests for ExecutionResultService."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from agent_task_api.app.core.exceptions import TaskReferenceError
from agent_task_api.app.schemas.enums import ContentType, ExecutionStatus
from agent_task_api.app.schemas.execution_result import ExecutionResultCreate, ExecutionResultQuery
from agent_task_api.app.schemas.task import TaskCreate
from agent_task_api.app.services.execution_result_service import ExecutionResultService
from agent_task_api.app.services.task_service import TaskService


async def _create_task() -> int:
    task = await TaskService.create_task(
        TaskCreate(title="Generate code", description=None, agent_type="code-generator")
    )
    return task.id


def _count_results(database: Path) -> int:
    conn = sqlite3.connect(database)
    try:
        return conn.execute("SELECT COUNT(*) FROM execution_results").fetchone()[0]
    finally:
        conn.close()


class TestCreateExecutionResult:
    @pytest.mark.asyncio
    async def test_create_result(self, database: Path) -> None:
        task_id = await _create_task()

        result = await ExecutionResultService.create_result(
            ExecutionResultCreate(
                task_id=task_id,
                content='{"ok": true}',
                content_type="json",
                execution_time_ms=120,
                status="partial",
                error_message="truncated output",
            )
        )

        assert result.id > 0
        assert result.task_id == task_id
        assert result.content_type is ContentType.JSON
        assert result.status is ExecutionStatus.PARTIAL
        assert result.execution_time_ms == 120
        assert result.error_message == "truncated output"
        assert result.created_at is not None

    @pytest.mark.asyncio
    async def test_missing_task_is_rejected(self, database: Path) -> None:
        with pytest.raises(TaskReferenceError) as excinfo:
            await ExecutionResultService.create_result(
                ExecutionResultCreate(task_id=99999, content="done", content_type="text", execution_time_ms=0, status="success")
            )

        assert excinfo.value.task_id == 99999
        assert "99999" in str(excinfo.value)
        assert _count_results(database) == 0

    @pytest.mark.asyncio
    async def test_success_with_error_message_is_allowed(self, database: Path) -> None:
        task_id = await _create_task()
        result = await ExecutionResultService.create_result(
            ExecutionResultCreate(
                task_id=task_id, content="done", content_type="text", execution_time_ms=0, status="success", error_message="just a note"
            )
        )
        assert result.status is ExecutionStatus.SUCCESS
        assert result.error_message == "just a note"


class TestListExecutionResults:
    @pytest.mark.asyncio
    async def test_newest_first_and_scoped_to_task(self, database: Path) -> None:
        task_id = await _create_task()
        other_task_id = await _create_task()
        created = [
            await ExecutionResultService.create_result(
                ExecutionResultCreate(
                    task_id=task_id, content=f"attempt {i}", content_type="text", execution_time_ms=i, status="success"
                )
            )
            for i in range(3)
        ]
        await ExecutionResultService.create_result(
            ExecutionResultCreate(task_id=other_task_id, content="elsewhere", content_type="text", execution_time_ms=0, status="success")
        )

        results = await ExecutionResultService.list_results(ExecutionResultQuery(task_id=task_id))

        assert [r.id for r in results] == [r.id for r in reversed(created)]
        assert results[0] == created[-1]

    @pytest.mark.asyncio
    async def test_no_results(self, database: Path) -> None:
        task_id = await _create_task()
        assert await ExecutionResultService.list_results(ExecutionResultQuery(task_id=task_id)) == []
        assert await ExecutionResultService.list_results(ExecutionResultQuery(task_id=424242)) == []
