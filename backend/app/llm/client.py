from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from app.core.errors import UpstreamError, UpstreamWarming


@dataclass
class LLMResponse:
    text: str
    status_code: int
    prompt_tokens: int | None
    response_tokens: int | None
    total_tokens: int | None


class OpenAICompatibleClient:
    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 512,
        timeout: float = 60.0,
        warming_status_code: int = 503,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.warming_status_code = warming_status_code
        self.transport = transport

    def generate(self, messages: list[dict[str, str]]) -> LLMResponse:
        url = f"{self.base_url}/v1/chat/completions"
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "stream": False,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as http:
                response = http.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamError(None, str(exc) or type(exc).__name__) from exc

        if response.status_code == self.warming_status_code:
            raise UpstreamWarming(response.text)
        if response.status_code >= 400:
            raise UpstreamError(response.status_code, response.text)

        try:
            data: dict[str, Any] = response.json()
        except ValueError:
            data = {}

        if not isinstance(data, dict):
            data = {}
        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        return LLMResponse(
            text=_extract_text(data),
            status_code=response.status_code,
            prompt_tokens=usage.get("prompt_tokens"),
            response_tokens=usage.get("completion_tokens"),
            total_tokens=usage.get("total_tokens"),
        )


def _extract_text(data: dict[str, Any]) -> str:
    """Return the first choice's message content, or ``""`` when the payload has none."""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if not isinstance(message, dict):
        return ""
    text = message.get("content")
    return text if isinstance(text, str) else ""
