"""
Pydantic models for chat messages.

Chat messages form the conversation attached to a task.  ``agent_name``
is conventionally filled in when ``role`` is ``agent``.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .enums import MessageRole
from .task import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class ChatMessageCreate(BaseModel):
    """Schema for posting a message to a task's conversation."""

    task_id: int
    role: MessageRole
    content: str = Field(..., min_length=1, examples=["please review"])
    agent_name: Optional[str] = Field(None, examples=["reviewer-bot"])


class ChatMessageQuery(BaseModel):
    task_id: int
    limit: int = Field(DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(0, ge=0)


class ChatMessageRead(BaseModel):
    id: int
    task_id: int
    role: MessageRole
    content: str
    agent_name: Optional[str] = None
    timestamp: datetime

    model_config = {
        "from_attributes": True,
    }
