"""Tests for the API entrypoint wiring."""

from fastapi.testclient import TestClient

from inkwell.middleware.request_id import RequestIDMiddleware


def test_entrypoint_registers_routes_and_middleware():
    from apps.api.main import app

    paths = {route.path for route in app.routes}
    assert {"/health", "/content/sanitize", "/content/fields"} <= paths

    middleware_classes = [m.cls for m in app.user_middleware]
    assert middleware_classes[0] is RequestIDMiddleware


def test_entrypoint_serves_requests():
    from apps.api.main import app

    with TestClient(app) as client:
        response = client.post("/content/sanitize", json={"html": "<b onclick='x'>b</b>"})

    assert response.json()["data"]["html"] == "<b>b</b>"
    assert "X-Request-ID" in response.headers
