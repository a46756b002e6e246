"""
Pydantic models for execution results.

An execution result records one attempt by an agent to carry out a
task.  Results are write-once, so there is no update schema.
``error_message`` is free text; it is usually set when ``status`` is
not ``success`` but that correlation is not enforced.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .enums import ContentType, ExecutionStatus


class ExecutionResultCreate(BaseModel):
    """Schema for recording an execution result against a task.

    ``content_type``, ``execution_time_ms`` and ``status`` must be sent
    explicitly; ``error_message`` may be omitted or null.
    """

    task_id: int
    content: str = Field(..., examples=["def add(a, b):\n    return a + b"])
    content_type: ContentType
    execution_time_ms: int = Field(..., ge=0, examples=[120])
    status: ExecutionStatus
    error_message: Optional[str] = None


class ExecutionResultQuery(BaseModel):
    """All results of one task; this list is not paginated."""

    task_id: int


class ExecutionResultRead(BaseModel):
    id: int
    task_id: int
    content: str
    content_type: ContentType
    execution_time_ms: int
    status: ExecutionStatus
    error_message: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
