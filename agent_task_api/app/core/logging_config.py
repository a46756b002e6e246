"""
Logging setup for the Agent Task API.

``setup_logging`` takes the application ``Settings`` and applies
``LOG_LEVEL`` and ``LOG_FILE`` to three places: the handlers on the
root logger, the ``agent_task_api`` package logger used by the
services, and the ``uvicorn`` loggers so that server and access logs
follow the same level as the application.

Handlers installed here carry a known name.  Calling ``setup_logging``
again (tests, repeated ``create_app`` calls) replaces them instead of
stacking duplicates, and handlers added by anyone else are left alone.
"""

import logging
from pathlib import Path
from typing import List

from .config import Settings


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

HANDLER_PREFIX = "agent_task_api"
APP_LOGGER = "agent_task_api"
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names mean ``INFO``."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(config: Settings) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.set_name(f"{HANDLER_PREFIX}.console")
    handlers: List[logging.Handler] = [console_handler]

    if config.log_file:
        log_path = Path(config.log_file).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(f"{HANDLER_PREFIX}.file")
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: Settings) -> int:
    """Configure application and server logging from ``config``.

    Returns the numeric level that was applied.
    """
    level = resolve_level(config.log_level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if (handler.get_name() or "").startswith(HANDLER_PREFIX):
            root.removeHandler(handler)
            handler.close()
    for handler in _build_handlers(config):
        root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger(APP_LOGGER).setLevel(level)
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(level)

    return level
