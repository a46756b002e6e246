"""
Domain errors raised by the service layer.

Validation problems are reported by pydantic before a service is ever
called, and "not found" lookups return ``None``.  The only domain
error is therefore a write that points at a task which does not exist.
"""


class TaskReferenceError(ValueError):
    """Raised when a child record references a task that does not exist."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} not found")
