"""Agent Task API client.

This module defines a small client wrapper around the Agent Task REST
API.  Every operation of the API is addressed by its OpenAPI
``operationId`` (``createTask``, ``getTasks``, ``getTaskById``,
``updateTask``, ``deleteTask``, ``createExecutionResult``,
``getExecutionResults``, ``createChatMessage``, ``getChatMessages``).

If an ``openapi.json`` document is supplied (a file path or the parsed
dictionary, e.g. downloaded from ``/openapi.json``) the client reads the
method and path of each operation from it; otherwise it uses the paths
the server mounts by default under ``/api/v1``.

All public methods return a tuple ``(data, error)``.  On success
``error`` is ``None``; on failure ``data`` is empty and ``error`` is a
dictionary with ``status_code`` and ``message`` keys.  A task that does
not exist is reported as ``(None, None)`` by :meth:`get_task` and
:meth:`update_task`, mirroring the server's "absent" result.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import requests


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


@dataclass
class ApiEndpoint:
    """A resolved API operation.

    Attributes:
        path: The URI template, e.g. ``/api/v1/tasks/{task_id}``.
        method: The HTTP method in upper case (``GET``, ``POST``, etc.).
    """

    path: str
    method: str


_DEFAULT_OPERATIONS: Dict[str, ApiEndpoint] = {
    "createTask": ApiEndpoint("/api/v1/tasks", "POST"),
    "getTasks": ApiEndpoint("/api/v1/tasks", "GET"),
    "getTaskById": ApiEndpoint("/api/v1/tasks/{task_id}", "GET"),
    "updateTask": ApiEndpoint("/api/v1/tasks/{task_id}", "PATCH"),
    "deleteTask": ApiEndpoint("/api/v1/tasks/{task_id}", "DELETE"),
    "createExecutionResult": ApiEndpoint("/api/v1/execution-results", "POST"),
    "getExecutionResults": ApiEndpoint("/api/v1/execution-results", "GET"),
    "createChatMessage": ApiEndpoint("/api/v1/chat-messages", "POST"),
    "getChatMessages": ApiEndpoint("/api/v1/chat-messages", "GET"),
    "healthcheck": ApiEndpoint("/api/v1/healthcheck", "GET"),
}

# Marker for update fields that should be left untouched.
_UNSET: Any = object()


class AgentTaskAPI:
    """Client for interacting with the Agent Task API."""

    def __init__(
        self,
        *,
        base_url: str,
        openapi: Union[str, Dict[str, Any], None] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:2022``.
            openapi: Optional OpenAPI document, either a path to a JSON
                file or an already parsed dictionary.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.operations: Dict[str, ApiEndpoint] = dict(_DEFAULT_OPERATIONS)
        if isinstance(openapi, str):
            if os.path.exists(openapi):
                with open(openapi, "r", encoding="utf-8") as f:
                    self._discover_operations(json.load(f))
            else:
                logger.warning("OpenAPI document %s not found, using default paths", openapi)
        elif openapi:
            self._discover_operations(openapi)

    # ------------------------------------------------------------------
    # OpenAPI discovery
    # ------------------------------------------------------------------
    def _discover_operations(self, spec: Dict[str, Any]) -> None:
        """Override default endpoints with those declared in ``spec``.

        Only operations whose ``operationId`` the client knows about are
        taken over; anything else in the document is ignored.
        """
        for path, methods in spec.get("paths", {}).items():
            for method_lower, op in methods.items():
                if not isinstance(op, dict):
                    continue
                operation_id = op.get("operationId")
                if operation_id in self.operations:
                    self.operations[operation_id] = ApiEndpoint(path=path, method=method_lower.upper())

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        operation_id: str,
        *,
        path_params: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Tuple[Optional[Any], Optional[ApiError]]:
        """Call an operation and return ``(data, error)``.

        ``data`` is the decoded JSON body (``None`` for an empty body).
        Query parameters whose value is ``None`` are not sent.
        """
        endpoint = self.operations[operation_id]
        path = endpoint.path.format(**(path_params or {}))
        url = f"{self.base_url}{path}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            logger.debug("Sending %s request to %s", endpoint.method, url)
            response = self.session.request(
                method=endpoint.method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    detail = err_json.get("detail") if isinstance(err_json, dict) else None
                    message = detail if isinstance(detail, str) else json.dumps(detail or err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("%s failed (%s): %s", operation_id, status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("%s failed: %s", operation_id, exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _is_not_found(error: Optional[ApiError], task_id: int) -> bool:
        """True only for the API's own "task not found" answer.

        Any other 404 (wrong base URL, unknown route) stays an error.
        """
        if error is None or error.get("status_code") != 404:
            return False
        return error.get("message") in (f"Task {task_id} not found", f"Task with id {task_id} not found")

    # ------------------------------------------------------------------
    # Task operations
    # ------------------------------------------------------------------
    def create_task(
        self, title: str, agent_type: str, description: Optional[str] = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Create a task.  New tasks always start as ``pending``."""
        payload = {"title": title, "description": description, "agent_type": agent_type}
        return self._request("createTask", json_body=payload)

    def list_tasks(
        self,
        *,
        status: Optional[str] = None,
        agent_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """List tasks, newest first, optionally filtered by status and agent type."""
        data, error = self._request(
            "getTasks",
            params={"status": status, "agent_type": agent_type, "limit": limit, "offset": offset},
        )
        if error:
            return [], error
        return data or [], None

    def get_task(self, task_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Fetch a task; ``(None, None)`` when it does not exist."""
        data, error = self._request("getTaskById", path_params={"task_id": task_id})
        if self._is_not_found(error, task_id):
            return None, None
        return data, error

    def update_task(
        self,
        task_id: int,
        *,
        title: Any = _UNSET,
        description: Any = _UNSET,
        status: Any = _UNSET,
        agent_type: Any = _UNSET,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Partially update a task.

        Only the keyword arguments actually passed are sent, so
        ``update_task(1, description=None)`` clears the description while
        ``update_task(1)`` only refreshes ``updated_at``.
        """
        fields = {"title": title, "description": description, "status": status, "agent_type": agent_type}
        payload = {key: value for key, value in fields.items() if value is not _UNSET}
        data, error = self._request("updateTask", path_params={"task_id": task_id}, json_body=payload)
        if self._is_not_found(error, task_id):
            return None, None
        return data, error

    def delete_task(self, task_id: int) -> Tuple[bool, Optional[ApiError]]:
        """Delete a task and everything attached to it.

        Returns ``(True, None)`` if the task existed, ``(False, None)`` if not.
        """
        data, error = self._request("deleteTask", path_params={"task_id": task_id})
        if error:
            return False, error
        return bool(data), None

    # ------------------------------------------------------------------
    # Execution results
    # ------------------------------------------------------------------
    def create_execution_result(
        self,
        task_id: int,
        content: str,
        *,
        content_type: str = "text",
        execution_time_ms: int = 0,
        status: str = "success",
        error_message: Optional[str] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Record an execution result; a missing task yields a 404 error."""
        payload = {
            "task_id": task_id,
            "content": content,
            "content_type": content_type,
            "execution_time_ms": execution_time_ms,
            "status": status,
            "error_message": error_message,
        }
        return self._request("createExecutionResult", json_body=payload)

    def list_execution_results(self, task_id: int) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        data, error = self._request("getExecutionResults", params={"task_id": task_id})
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Chat messages
    # ------------------------------------------------------------------
    def create_chat_message(
        self,
        task_id: int,
        role: str,
        content: str,
        agent_name: Optional[str] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        payload = {"task_id": task_id, "role": role, "content": content, "agent_name": agent_name}
        return self._request("createChatMessage", json_body=payload)

    def list_chat_messages(
        self, task_id: int, *, limit: int = 50, offset: int = 0
    ) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Return one page of a task's conversation, oldest message first."""
        data, error = self._request(
            "getChatMessages", params={"task_id": task_id, "limit": limit, "offset": offset}
        )
        if error:
            return [], error
        return data or [], None

    def healthcheck(self) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        return self._request("healthcheck")
