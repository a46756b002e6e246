"""
Health check endpoint for API v1.

Used by load balancers and the client to verify the API is reachable.
It does not touch the database.
"""

from typing import Dict

from fastapi import APIRouter

from agent_task_api.app.core.db import utc_now


router = APIRouter()


@router.get("", response_model=Dict[str, str], operation_id="healthcheck")
async def healthcheck() -> Dict[str, str]:
    return {"status": "ok", "timestamp": utc_now().isoformat()}
