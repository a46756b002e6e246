"""
Task endpoints for API v1.

These routes expose the task operations of ``TaskService``.  Each
route's ``operation_id`` is the name clients use for the operation
(``createTask``, ``getTasks`` and so on).  Request bodies and query
strings are validated by the schemas before the service is called;
invalid input is answered with HTTP 422.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, HTTPException, Query, status

from agent_task_api.app.schemas.task import TaskCreate, TaskQuery, TaskRead, TaskUpdate
from agent_task_api.app.services.task_service import TaskService


router = APIRouter()


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    operation_id="createTask",
)
async def create_task(task: TaskCreate) -> TaskRead:
    """Create a new task in the ``pending`` state."""
    return await TaskService.create_task(task)


@router.get("", response_model=List[TaskRead], operation_id="getTasks")
async def list_tasks(query: Annotated[TaskQuery, Query()]) -> List[TaskRead]:
    """List tasks, newest first.

    - **status**, **agent_type**: optional filters, combined with AND.
    - **limit** (1-100, default 50) and **offset** (default 0): pagination.
    """
    return await TaskService.list_tasks(query)


@router.get("/{task_id}", response_model=TaskRead, operation_id="getTaskById")
async def get_task(task_id: int) -> TaskRead:
    """Retrieve a single task.  Responds with 404 if it does not exist."""
    task = await TaskService.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Task {task_id} not found")
    return task


@router.patch("/{task_id}", response_model=TaskRead, operation_id="updateTask")
async def update_task(task_id: int, updates: Annotated[Optional[TaskUpdate], Body()] = None) -> TaskRead:
    """Partially update a task.

    Fields missing from the body keep their value; ``description`` may
    be set to ``null`` explicitly.  ``updated_at`` is refreshed on every
    call, including an empty or missing body.
    """
    task = await TaskService.update_task(task_id, updates or TaskUpdate())
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Task {task_id} not found")
    return task


@router.delete("/{task_id}", response_model=bool, operation_id="deleteTask")
async def delete_task(task_id: int) -> bool:
    """Delete a task with all its execution results and chat messages.

    Returns ``true`` if the task existed and ``false`` otherwise.
    """
    return await TaskService.delete_task(task_id)
