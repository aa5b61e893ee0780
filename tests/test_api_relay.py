import httpx
import pytest
from fastapi.testclient import TestClient

from balloonwatch.api.relay import get_relay_transport
from balloonwatch.config import settings
from balloonwatch.main import app


@pytest.fixture
def relay_client(monkeypatch):
    monkeypatch.setattr(settings, "enable_refresh_scheduler", False)
    monkeypatch.setattr(settings, "relay_upstream_url", "https://upstream.test")
    captured: list[httpx.Request] = []

    def install(handler):
        def recording(request: httpx.Request):
            captured.append(request)
            return handler(request)

        app.dependency_overrides[get_relay_transport] = lambda: httpx.MockTransport(recording)

    with TestClient(app) as client:
        yield client, install, captured
    app.dependency_overrides.clear()


def test_relay_passes_body_and_status_through(relay_client):
    client, install, captured = relay_client
    install(
        lambda request: httpx.Response(
            200, content=b"[[1.0, 2.0, 3.0]]", headers={"content-type": "application/json"}
        )
    )

    response = client.get("/api/windborne/treasure/00.json", params={"v": "2"})

    assert response.status_code == 200
    assert response.content == b"[[1.0, 2.0, 3.0]]"
    assert response.headers["cache-control"] == "no-store"
    assert response.headers["access-control-allow-origin"] == "*"
    assert str(captured[0].url) == "https://upstream.test/treasure/00.json?v=2"
    assert captured[0].headers["user-agent"] == "balloonwatch"


def test_relay_preserves_upstream_errors(relay_client):
    client, install, _ = relay_client
    install(lambda request: httpx.Response(404, text="missing", headers={"content-type": "text/plain"}))

    response = client.get("/api/windborne/treasure/99.json")

    assert response.status_code == 404
    assert response.text == "missing"
    assert response.headers["content-type"] == "text/plain"


def test_relay_forwards_method(relay_client):
    client, install, captured = relay_client
    install(lambda request: httpx.Response(201, json={"ok": True}))

    response = client.post("/api/windborne/submit", content=b"payload")

    assert response.status_code == 201
    assert captured[0].method == "POST"
    assert captured[0].content == b"payload"


def test_relay_transport_failure_returns_gateway_error(relay_client):
    client, install, _ = relay_client

    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    install(handler)

    response = client.get("/api/windborne/treasure/00.json")

    assert response.status_code == 502
    assert response.json() == {
        "error": "proxy_upstream_failed",
        "message": "connection refused",
    }
    assert response.headers["cache-control"] == "no-store"


def test_relay_keeps_upstream_content_type_verbatim(relay_client):
    client, install, _ = relay_client
    install(
        lambda request: httpx.Response(
            200, content=b"a,b\n1,2\n", headers={"content-type": "text/csv"}
        )
    )

    response = client.get("/api/windborne/export.csv")

    assert response.headers["content-type"] == "text/csv"
    assert response.content == b"a,b\n1,2\n"
