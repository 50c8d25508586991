import pytest
from starlette.testclient import TestClient
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse


async def protected(request):
    return PlainTextResponse("Bridge Running")


@pytest.fixture
def app_with_middleware(monkeypatch):
    from auth import APIKeyMiddleware
    monkeypatch.setattr(APIKeyMiddleware, "API_KEY", "valid-key")

    app = Starlette()
    app.add_middleware(APIKeyMiddleware)
    app.add_route("/", protected)
    app.add_route("/list", protected)
    return app


@pytest.fixture
def client(app_with_middleware):
    return TestClient(app_with_middleware)


@pytest.mark.parametrize("header_name", ["X-API-Key", "x-api-key", "X-Api-Key"])
def test_api_key_middleware_accepts_case_insensitive_header(client, header_name):
    """Given a valid API key, when the API key header is provided with different casings, it should be accepted."""
    response = client.get("/list", headers={header_name: "valid-key"})
    assert response.status_code == 200
    assert response.text == "Bridge Running"


def test_health_check_is_public(client):
    """Given no API key, the root health check should still be reachable."""
    response = client.get("/")
    assert response.status_code == 200


def test_api_key_middleware_rejects_missing_header(client):
    """Given a missing API key header, when accessing a protected route, it should return 401 Unauthorized."""
    response = client.get("/list")
    assert response.status_code == 401
    assert response.json()["detail"] == "Missing API key. Include 'X-API-Key' header in your request."
    assert response.json()["error"] == "unauthorized"


def test_api_key_middleware_rejects_invalid_key(client):
    """Given an invalid API key, when accessing a protected route, it should return 403 Forbidden."""
    response = client.get("/list", headers={"X-API-Key": "wrong-key"})
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_api_key_middleware_handles_empty_header(client):
    """Given an empty API key header, when accessing a protected route, it should return 401 Unauthorized."""
    response = client.get("/list", headers={"X-API-Key": ""})
    assert response.status_code == 401


def test_api_key_middleware_reports_missing_server_key(client, monkeypatch):
    """Given no API_KEY configured, protected routes should report a server misconfiguration."""
    from auth import APIKeyMiddleware
    monkeypatch.setattr(APIKeyMiddleware, "API_KEY", "")

    response = client.get("/list", headers={"X-API-Key": "anything"})
    assert response.status_code == 500
    assert response.json()["error"] == "server_error"
