"""
Pydantic models for tasks.

A task is the unit of work handed to an agent.  ``TaskCreate`` and
``TaskUpdate`` validate request bodies, ``TaskQuery`` validates the
list filters and ``TaskRead`` is the record returned by every task
endpoint.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .enums import TaskStatus


# Shared pagination bounds for list queries.
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50


class TaskCreate(BaseModel):
    """Schema for creating a task.

    New tasks always start as ``pending``; a ``status`` key in the
    payload is ignored.
    """

    title: str = Field(..., min_length=1, examples=["Review PR"])
    description: Optional[str] = Field(None, examples=["Check the new parser module"])
    agent_type: str = Field(..., min_length=1, examples=["code-generator"])


class TaskUpdate(BaseModel):
    """Schema for a partial task update.

    Only keys present in the payload are applied.  Omitting a key keeps
    the stored value, while ``"description": null`` clears the
    description.  The other fields are not nullable, so an explicit
    ``null`` for them is rejected.
    """

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    agent_type: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "TaskUpdate":
        for name in ("title", "status", "agent_type"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self

    def changes(self) -> dict:
        """Return only the fields that were explicitly supplied."""
        return self.model_dump(mode="json", exclude_unset=True)


class TaskQuery(BaseModel):
    """Filters and pagination for listing tasks.

    ``status`` and ``agent_type`` are combined with AND semantics.
    """

    status: Optional[TaskStatus] = None
    agent_type: Optional[str] = None
    limit: int = Field(DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(0, ge=0)


class TaskRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    agent_type: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }
