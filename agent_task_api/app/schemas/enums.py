"""
Enumerated value domains shared by schemas and services.

Each enum subclasses ``str`` so members serialise as their plain value
in JSON and can be bound directly as SQLite parameters.  The same value
sets are enforced by ``CHECK`` constraints in the database schema.
"""

from enum import Enum


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ExecutionStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    PARTIAL = "partial"


class ContentType(str, Enum):
    TEXT = "text"
    CODE = "code"
    JSON = "json"
    MARKDOWN = "markdown"


class MessageRole(str, Enum):
    USER = "user"
    AGENT = "agent"
    SYSTEM = "system"
