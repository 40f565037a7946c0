import httpx
import logfire
import pytest
from fastapi.testclient import TestClient
from logfire.testing import capfire  # noqa: F401

from tests.fakes import FakeGemini
from verdict_chat.app import app, get_http_client

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def gemini():
    """Factory for a fake Gemini API answering with a fixed JSON body and status."""

    def make(body=None, status_code: int = 200, respond=None) -> FakeGemini:
        if respond is None:

            def respond(request):
                return httpx.Response(status_code, json=body)

        return FakeGemini(respond)

    return make


@pytest.fixture
def use_gemini():
    """Route the app's outbound calls to a fake Gemini API."""

    def install(fake: FakeGemini) -> FakeGemini:
        async def http_client():
            async with fake.client() as client:
                yield client

        app.dependency_overrides[get_http_client] = http_client
        return fake

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client
