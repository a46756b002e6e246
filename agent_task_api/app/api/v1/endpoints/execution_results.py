"""
Execution result endpoints for API v1.

Agents post the outcome of each attempt at a task here; clients read
them back per task.
"""

from typing import Annotated, List

from fastapi import APIRouter, HTTPException, Query, status

from agent_task_api.app.core.exceptions import TaskReferenceError
from agent_task_api.app.schemas.execution_result import (
    ExecutionResultCreate,
    ExecutionResultQuery,
    ExecutionResultRead,
)
from agent_task_api.app.services.execution_result_service import ExecutionResultService


router = APIRouter()


@router.post(
    "",
    response_model=ExecutionResultRead,
    status_code=status.HTTP_201_CREATED,
    operation_id="createExecutionResult",
)
async def create_execution_result(result: ExecutionResultCreate) -> ExecutionResultRead:
    """Record an execution result.  Responds with 404 if the task does not exist."""
    try:
        return await ExecutionResultService.create_result(result)
    except TaskReferenceError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("", response_model=List[ExecutionResultRead], operation_id="getExecutionResults")
async def list_execution_results(
    query: Annotated[ExecutionResultQuery, Query()],
) -> List[ExecutionResultRead]:
    """All results of ``task_id``, newest first.  Unknown tasks yield an empty list."""
    return await ExecutionResultService.list_results(query)
