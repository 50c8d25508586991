import pytest

from models.chat_models import ChatMessage


@pytest.fixture
def anyio_backend():
    """The code under test is built on asyncio primitives."""
    return "asyncio"


@pytest.fixture
def chat_messages():
    """Standard conversation with one system message."""
    return [
        ChatMessage(role="system", content="You are a helpful assistant."),
        ChatMessage(role="user", content="Hi"),
        ChatMessage(role="assistant", content="Hello! How can I help?"),
        ChatMessage(role="user", content="Tell me a joke"),
    ]


@pytest.fixture
def wire_transport_builder():
    from tests.fixtures.mock_clients import WireTransportBuilder
    return WireTransportBuilder()


@pytest.fixture
def auth_headers():
    """Authentication headers for API requests."""
    return {"X-API-Key": "test-key"}


@pytest.fixture
def app_transport():
    """Transport used by the app under test; tests fill in events or a JSON body."""
    from tests.fixtures.mock_clients import FakeTransport
    return FakeTransport()


@pytest.fixture
def configured_app(monkeypatch, app_transport):
    """Pre-configured app with auth enabled and provider traffic routed to app_transport."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from auth import APIKeyMiddleware
    from config import Config
    from routes import chat, chat_stream, models_route
    from services.providers import factory

    monkeypatch.setattr(APIKeyMiddleware, "API_KEY", "test-key")
    monkeypatch.setattr(Config, "OPENAI_API_KEY", "sk-openai")
    monkeypatch.setattr(Config, "DEEPSEEK_API_KEY", "sk-deepseek")
    monkeypatch.setattr(Config, "OPENAI_API_HOST", "https://api.openai.com")
    monkeypatch.setattr(Config, "OPENAI_API_PATH", "")
    monkeypatch.setattr(Config, "DEEPSEEK_MODEL", "deepseek-chat")

    def provider_with_fake_transport(provider, model=None, temperature=None, top_p=None):
        return factory.get_chat_provider(provider, model, temperature, top_p, transport=app_transport)

    monkeypatch.setattr(chat, "get_chat_provider", provider_with_fake_transport)
    monkeypatch.setattr(chat_stream, "get_chat_provider", provider_with_fake_transport)

    app = FastAPI()
    app.add_middleware(APIKeyMiddleware)
    app.include_router(chat.router)
    app.include_router(chat_stream.router)
    app.include_router(models_route.router)

    with TestClient(app) as client:
        yield client
