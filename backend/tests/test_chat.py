import json
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_client, get_settings
from app.core.config import Settings
from app.llm import OpenAICompatibleClient, get_llm_client
from app.services.chat_service import FALLBACK_REPLY, WARMING_UP_REPLY
from main import app

TEST_SETTINGS = Settings(
    hf_api_token="test-token",
    llm_base_url="http://llm.local",
    llm_model="test-model",
    system_prompt="You are GIA.",
)


@pytest.fixture(autouse=True)
def _reset_overrides():
    yield
    app.dependency_overrides.clear()


def _client_with_upstream(handler: Callable[[httpx.Request], httpx.Response]) -> TestClient:
    def _fake_client() -> OpenAICompatibleClient:
        return OpenAICompatibleClient(
            base_url=TEST_SETTINGS.llm_base_url,
            api_key=TEST_SETTINGS.hf_api_token,
            model=TEST_SETTINGS.llm_model,
            temperature=TEST_SETTINGS.llm_temperature,
            max_tokens=TEST_SETTINGS.llm_max_tokens,
            transport=httpx.MockTransport(handler),
        )

    app.dependency_overrides[get_client] = _fake_client
    app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS
    return TestClient(app)


def _completion(content: str | None) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "choices": [{"message": {"role": "assistant", "content": content}}],
            "usage": {"prompt_tokens": 12, "completion_tokens": 8, "total_tokens": 20},
        },
    )


def test_chat_forwards_two_turn_payload() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return _completion("Hi! How can I help?")

    client = _client_with_upstream(handler)
    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 200
    assert response.json() == {"reply": "Hi! How can I help?"}
    request = captured[0]
    assert str(request.url) == "http://llm.local/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-token"
    body = json.loads(request.content)
    assert body == {
        "model": "test-model",
        "messages": [
            {"role": "system", "content": "You are GIA."},
            {"role": "user", "content": "hi"},
        ],
        "max_tokens": 512,
        "temperature": 0.7,
        "stream": False,
    }


def test_chat_without_message_returns_400() -> None:
    client = _client_with_upstream(lambda request: _completion("unused"))

    response = client.post("/api/chat", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "Message is required"


def test_chat_with_blank_message_returns_400() -> None:
    client = _client_with_upstream(lambda request: _completion("unused"))

    response = client.post("/api/chat", json={"message": "   "})

    assert response.status_code == 400
    assert "error" in response.json()


def test_chat_with_malformed_body_returns_400() -> None:
    client = _client_with_upstream(lambda request: _completion("unused"))

    response = client.post(
        "/api/chat",
        content="not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_chat_warming_model_is_a_soft_failure() -> None:
    client = _client_with_upstream(
        lambda request: httpx.Response(503, text='{"error": "Model is currently loading"}')
    )

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 200
    reply = response.json()["reply"]
    assert reply == WARMING_UP_REPLY
    assert "warming up" in reply
    assert "loading" in reply


def test_chat_upstream_error_returns_500_with_details() -> None:
    client = _client_with_upstream(lambda request: httpx.Response(500, text="boom"))

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Failed to process your message. Please try again."
    assert data["details"] == "API error: 500 - boom"


def test_chat_unauthorized_upstream_is_a_hard_failure() -> None:
    client = _client_with_upstream(lambda request: httpx.Response(401, text="Invalid token"))

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 500
    assert "401" in response.json()["details"]


def test_chat_unreachable_upstream_returns_500() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client_with_upstream(handler)

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 500
    assert "connection refused" in response.json()["details"]


def test_chat_empty_completion_returns_fallback() -> None:
    client = _client_with_upstream(lambda request: _completion(None))

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 200
    assert response.json() == {"reply": FALLBACK_REPLY}


def test_chat_without_choices_returns_fallback() -> None:
    client = _client_with_upstream(lambda request: httpx.Response(200, json={"choices": []}))

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 200
    assert response.json() == {"reply": FALLBACK_REPLY}


def test_chat_preflight_allows_any_origin() -> None:
    client = TestClient(app)

    response = client.options(
        "/api/chat",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_health_and_root() -> None:
    client = TestClient(app)

    health = client.get("/api/health")
    root = client.get("/")

    assert health.status_code == 200
    assert health.json() == {"status": "ok", "message": "GIA backend is running!"}
    assert root.json()["endpoints"]["chat"] == "POST /api/chat"


@pytest.mark.parametrize(
    "body",
    [
        {"choices": [{"message": "plain string"}]},
        {"choices": {"0": {}}},
        {"choices": [{"message": {"content": 42}}]},
        {"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]},
        {"choices": ["not a choice"]},
        ["not", "an", "object"],
    ],
)
def test_chat_unextractable_reply_returns_fallback(body) -> None:
    client = _client_with_upstream(lambda request: httpx.Response(200, json=body))

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 200
    assert response.json() == {"reply": FALLBACK_REPLY}


def test_chat_non_json_completion_returns_fallback() -> None:
    client = _client_with_upstream(lambda request: httpx.Response(200, text="<html>oops</html>"))

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 200
    assert response.json() == {"reply": FALLBACK_REPLY}


class BrokenLLMClient:
    def generate(self, messages: list[dict[str, str]]):
        raise RuntimeError("client exploded")


def test_chat_unexpected_error_returns_json_500() -> None:
    app.dependency_overrides[get_client] = lambda: BrokenLLMClient()
    app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to process your message. Please try again.",
        "details": "client exploded",
    }


def test_get_llm_client_builds_from_settings() -> None:
    llm_client = get_llm_client(TEST_SETTINGS)

    assert isinstance(llm_client, OpenAICompatibleClient)
    assert llm_client.base_url == "http://llm.local"
    assert llm_client.api_key == "test-token"
    assert llm_client.model == "test-model"
    assert llm_client.max_tokens == 512
    assert llm_client.temperature == 0.7
