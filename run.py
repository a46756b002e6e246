"""Entry point for serving the Agent Task API.

Starts the FastAPI application with Uvicorn.  Host, port, log level
and database location are read from environment variables (see
``agent_task_api/app/core/config.py``); ``HOST`` and ``PORT`` default
to ``0.0.0.0`` and ``2022``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from agent_task_api.app.core.config import settings
from agent_task_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        # uvicorn records go through the handlers installed by setup_logging.
        log_config=None,
    )
    server = Server(config)
    logging.getLogger(__name__).info("Agent Task API listening on %s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
