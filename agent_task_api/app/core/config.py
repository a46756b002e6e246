"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration at all; in a real deployment you
should at least point ``DATABASE_URL`` at a persistent location.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Agent Task API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional path of a log file.  When empty only console logging is used.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite database.  A relative path is resolved relative
    # to the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "agent_tasks.db")

    # Origins allowed to call the API from a browser, comma separated.
    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        )
    )

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "2022"))


# Environment variables must be set before importing this module.
settings = Settings()
