"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (tasks, execution results,
chat messages) under a unified prefix.  When new endpoints are added,
update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import chat_messages, execution_results, health, tasks

router = APIRouter()

router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(execution_results.router, prefix="/execution-results", tags=["execution-results"])
router.include_router(chat_messages.router, prefix="/chat-messages", tags=["chat-messages"])
router.include_router(health.router, prefix="/healthcheck", tags=["health"])
