from __future__ import annotations

import asyncio
import logging

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlmodel import create_engine

from todo_api.main import create_app


def _create(client: TestClient, body: str = "buy milk") -> dict:
    response = client.post("/todos", json={"body": body})
    assert response.status_code == 201, response.text
    return response.json()


def test_alive(client: TestClient) -> None:
    response = client.get("/alive")

    assert response.status_code == 200
    assert response.text == "ok"


def test_ready_probes_database(client: TestClient) -> None:
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "hello from todo-api"}


def test_ready_reports_unreachable_database(tmp_path, test_settings) -> None:
    broken = create_engine(f"sqlite:///{tmp_path / 'missing' / 'todos.db'}")
    with TestClient(create_app(broken, test_settings)) as client:
        response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "error"


def test_create_returns_full_todo(client: TestClient) -> None:
    todo = _create(client)

    assert set(todo) == {"id", "body", "completed", "created_at", "updated_at"}
    assert isinstance(todo["id"], int)
    assert todo["body"] == "buy milk"
    assert todo["completed"] is False
    assert todo["created_at"] == todo["updated_at"]


def test_create_then_read(client: TestClient) -> None:
    created = _create(client)

    response = client.get(f"/todos/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_update_twice_keeps_values_and_advances_timestamp(client: TestClient) -> None:
    created = _create(client)
    payload = {"body": "buy oat milk", "completed": True}

    first = client.put(f"/todos/{created['id']}", json=payload)
    second = client.put(f"/todos/{created['id']}", json=payload)

    assert first.status_code == second.status_code == 200
    first, second = first.json(), second.json()
    assert first["body"] == second["body"] == "buy oat milk"
    assert first["completed"] is second["completed"] is True
    assert second["created_at"] == created["created_at"]
    assert second["updated_at"] >= first["updated_at"] >= created["updated_at"]


def test_delete_returns_todo_then_404(client: TestClient) -> None:
    created = _create(client)

    deleted = client.delete(f"/todos/{created['id']}")
    again = client.get(f"/todos/{created['id']}")

    assert deleted.status_code == 200
    assert deleted.json()["id"] == created["id"]
    assert again.status_code == 404


@pytest.mark.parametrize(
    "method, kwargs",
    [
        ("get", {}),
        ("put", {"json": {"body": "x", "completed": False}}),
        ("delete", {}),
    ],
)
def test_unknown_id_is_404_with_error_envelope(client: TestClient, method: str, kwargs: dict) -> None:
    response = getattr(client, method)("/todos/-1", **kwargs)

    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Todo -1 not found"}


def test_list_is_capped_at_ten(client: TestClient) -> None:
    for i in range(15):
        _create(client, f"todo {i}")

    response = client.get("/todos")

    assert response.status_code == 200
    assert len(response.json()) == 10


def test_invalid_body_is_422_with_error_envelope(client: TestClient) -> None:
    response = client.post("/todos", json={"text": "wrong field"})

    assert response.status_code == 422
    assert response.json()["status"] == "error"
    assert "body" in response.json()["message"]


def test_put_requires_completed(client: TestClient) -> None:
    created = _create(client)

    response = client.put(f"/todos/{created['id']}", json={"body": "only body"})

    assert response.status_code == 422


def test_non_integer_id_is_422(client: TestClient) -> None:
    assert client.get("/todos/abc").status_code == 422


def test_database_error_is_500_not_a_crash(client: TestClient, engine) -> None:
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE todos"))

    response = client.get("/todos")

    assert response.status_code == 500
    assert response.json()["status"] == "error"
    assert client.get("/alive").status_code == 200


def test_cors_allows_any_origin(client: TestClient) -> None:
    response = client.options(
        "/todos",
        headers={"Origin": "https://example.org", "Access-Control-Request-Method": "DELETE"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/alive", headers={"X-Request-ID": "abc123"})
    generated = client.get("/alive")

    assert response.headers["x-request-id"] == "abc123"
    assert generated.headers["x-request-id"]


def test_openapi_lists_routes(client: TestClient) -> None:
    schema = client.get("/openapi.json").json()

    assert {"/alive", "/ready", "/todos", "/todos/{todo_id}"} <= set(schema["paths"])


@pytest.mark.anyio
async def test_concurrent_creates_have_distinct_ids(app) -> None:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        responses = await asyncio.gather(
            *(client.post("/todos", json={"body": f"parallel {i}"}) for i in range(20))
        )

    assert all(r.status_code == 201 for r in responses)
    ids = [r.json()["id"] for r in responses]
    assert len(set(ids)) == 20


def test_unhandled_error_is_traced_as_500(app, caplog: pytest.LogCaptureFixture) -> None:
    @app.get("/explode")
    def explode():
        raise RuntimeError("kaboom")

    caplog.set_level(logging.INFO, logger="todo_api.http")
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/explode")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "internal server error"}
    traced = [r for r in caplog.records if r.name == "todo_api.http" and getattr(r, "status", None) == 500]
    assert len(traced) == 1
    assert "/explode" in traced[0].getMessage()
