"""
Chat message endpoints for API v1.
"""

from typing import Annotated, List

from fastapi import APIRouter, HTTPException, Query, status

from agent_task_api.app.core.exceptions import TaskReferenceError
from agent_task_api.app.schemas.chat_message import (
    ChatMessageCreate,
    ChatMessageQuery,
    ChatMessageRead,
)
from agent_task_api.app.services.chat_message_service import ChatMessageService


router = APIRouter()


@router.post(
    "",
    response_model=ChatMessageRead,
    status_code=status.HTTP_201_CREATED,
    operation_id="createChatMessage",
)
async def create_chat_message(message: ChatMessageCreate) -> ChatMessageRead:
    try:
        return await ChatMessageService.create_message(message)
    except TaskReferenceError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("", response_model=List[ChatMessageRead], operation_id="getChatMessages")
async def list_chat_messages(
    query: Annotated[ChatMessageQuery, Query()],
) -> List[ChatMessageRead]:
    """Messages of ``task_id`` in chronological order, paginated by **limit**/**offset**."""
    return await ChatMessageService.list_messages(query)
