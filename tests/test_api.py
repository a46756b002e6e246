"""HTTP-level tests for the v1 routers."""

from __future__ import annotations

from datetime import datetime

from fastapi.testclient import TestClient
from pydantic import TypeAdapter


def _create_task(client: TestClient, **overrides) -> dict:
    payload = {"title": "Review PR", "description": None, "agent_type": "code-generator"}
    payload.update(overrides)
    response = client.post("/api/v1/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _parse_timestamp(value: str) -> datetime:
    return TypeAdapter(datetime).validate_python(value)


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/api/v1/healthcheck")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_and_get_task(client: TestClient) -> None:
    task = _create_task(client, status="failed")

    assert task["status"] == "pending"
    assert task["created_at"] == task["updated_at"]

    response = client.get(f"/api/v1/tasks/{task['id']}")
    assert response.status_code == 200
    assert response.json() == task


def test_create_task_validation(client: TestClient) -> None:
    response = client.post("/api/v1/tasks", json={"title": "", "agent_type": "writer"})
    assert response.status_code == 422
    response = client.post("/api/v1/tasks", json={"title": "x"})
    assert response.status_code == 422
    assert client.get("/api/v1/tasks").json() == []


def test_get_missing_task(client: TestClient) -> None:
    response = client.get("/api/v1/tasks/99999")
    assert response.status_code == 404


def test_list_tasks_filters_and_pagination(client: TestClient) -> None:
    first = _create_task(client, title="first")
    second = _create_task(client, title="second", agent_type="writer")
    third = _create_task(client, title="third")

    response = client.get("/api/v1/tasks")
    assert [t["id"] for t in response.json()] == [third["id"], second["id"], first["id"]]

    response = client.get("/api/v1/tasks", params={"status": "pending", "agent_type": "code-generator"})
    assert [t["id"] for t in response.json()] == [third["id"], first["id"]]

    response = client.get("/api/v1/tasks", params={"limit": 1, "offset": 1})
    assert [t["id"] for t in response.json()] == [second["id"]]


def test_list_tasks_rejects_bad_query(client: TestClient) -> None:
    assert client.get("/api/v1/tasks", params={"limit": 0}).status_code == 422
    assert client.get("/api/v1/tasks", params={"limit": 101}).status_code == 422
    assert client.get("/api/v1/tasks", params={"offset": -1}).status_code == 422
    assert client.get("/api/v1/tasks", params={"status": "archived"}).status_code == 422


def test_update_task(client: TestClient) -> None:
    task = _create_task(client, description="original")

    response = client.patch(f"/api/v1/tasks/{task['id']}", json={"status": "running"})
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "running"
    assert updated["description"] == "original"
    assert updated["title"] == task["title"]
    assert updated["created_at"] == task["created_at"]
    assert updated["updated_at"] != task["updated_at"]

    response = client.patch(f"/api/v1/tasks/{task['id']}", json={"description": None})
    assert response.status_code == 200
    assert response.json()["description"] is None
    assert response.json()["status"] == "running"


def test_update_task_without_body_only_touches_updated_at(client: TestClient) -> None:
    task = _create_task(client, description="original")

    response = client.patch(f"/api/v1/tasks/{task['id']}")

    assert response.status_code == 200, response.text
    touched = response.json()
    assert _parse_timestamp(touched["updated_at"]) > _parse_timestamp(task["updated_at"])
    assert {k: v for k, v in touched.items() if k != "updated_at"} == {
        k: v for k, v in task.items() if k != "updated_at"
    }


def test_update_task_errors(client: TestClient) -> None:
    task = _create_task(client)
    assert client.patch("/api/v1/tasks/99999", json={"title": "x"}).status_code == 404
    assert client.patch(f"/api/v1/tasks/{task['id']}", json={"title": None}).status_code == 422
    assert client.patch(f"/api/v1/tasks/{task['id']}", json={"status": "done"}).status_code == 422


def test_delete_task(client: TestClient) -> None:
    task = _create_task(client)
    client.post(
        "/api/v1/execution-results",
        json={"task_id": task["id"], "content": "done", "content_type": "text", "execution_time_ms": 0, "status": "success"},
    )
    client.post("/api/v1/chat-messages", json={"task_id": task["id"], "role": "user", "content": "hi"})

    response = client.delete(f"/api/v1/tasks/{task['id']}")
    assert response.status_code == 200
    assert response.json() is True

    assert client.delete(f"/api/v1/tasks/{task['id']}").json() is False
    assert client.get("/api/v1/execution-results", params={"task_id": task["id"]}).json() == []
    assert client.get("/api/v1/chat-messages", params={"task_id": task["id"]}).json() == []


def test_execution_results(client: TestClient) -> None:
    task = _create_task(client)
    response = client.post(
        "/api/v1/execution-results",
        json={
            "task_id": task["id"],
            "content": "print('hi')",
            "content_type": "code",
            "execution_time_ms": 42,
            "status": "error",
            "error_message": "NameError",
        },
    )
    assert response.status_code == 201
    result = response.json()
    assert result["content_type"] == "code"
    assert result["status"] == "error"

    listed = client.get("/api/v1/execution-results", params={"task_id": task["id"]}).json()
    assert listed == [result]


def test_execution_result_for_missing_task(client: TestClient) -> None:
    response = client.post(
        "/api/v1/execution-results",
        json={"task_id": 99999, "content": "done", "content_type": "text", "execution_time_ms": 0, "status": "success"},
    )
    assert response.status_code == 404
    assert "99999" in response.json()["detail"]


def test_execution_result_validation(client: TestClient) -> None:
    task = _create_task(client)
    response = client.post(
        "/api/v1/execution-results",
        json={"task_id": task["id"], "content": "x", "content_type": "text", "execution_time_ms": -1, "status": "success"},
    )
    assert response.status_code == 422
    assert client.get("/api/v1/execution-results").status_code == 422


def test_execution_result_requires_type_time_and_status(client: TestClient) -> None:
    task = _create_task(client)

    response = client.post("/api/v1/execution-results", json={"task_id": task["id"], "content": "done"})

    assert response.status_code == 422
    missing = {tuple(error["loc"]) for error in response.json()["detail"]}
    assert missing == {("body", "content_type"), ("body", "execution_time_ms"), ("body", "status")}
    assert client.get("/api/v1/execution-results", params={"task_id": task["id"]}).json() == []


def test_chat_messages(client: TestClient) -> None:
    task = _create_task(client)
    for i in range(5):
        response = client.post(
            "/api/v1/chat-messages",
            json={"task_id": task["id"], "role": "user", "content": f"message {i + 1}"},
        )
        assert response.status_code == 201

    page = client.get("/api/v1/chat-messages", params={"task_id": task["id"], "limit": 2, "offset": 2}).json()
    assert [m["content"] for m in page] == ["message 3", "message 4"]


def test_chat_message_errors(client: TestClient) -> None:
    response = client.post("/api/v1/chat-messages", json={"task_id": 99999, "role": "user", "content": "hi"})
    assert response.status_code == 404

    task = _create_task(client)
    response = client.post("/api/v1/chat-messages", json={"task_id": task["id"], "role": "user", "content": ""})
    assert response.status_code == 422
    response = client.post("/api/v1/chat-messages", json={"task_id": task["id"], "role": "robot", "content": "x"})
    assert response.status_code == 422


def test_operation_ids_are_published(client: TestClient) -> None:
    spec = client.get("/openapi.json").json()
    operation_ids = {
        op["operationId"] for methods in spec["paths"].values() for op in methods.values()
    }
    assert {
        "createTask",
        "getTasks",
        "getTaskById",
        "updateTask",
        "deleteTask",
        "createExecutionResult",
        "getExecutionResults",
        "createChatMessage",
        "getChatMessages",
    } <= operation_ids
