"""Client side of the chat widget: transcript state and the send flow.

A send appends the user turn, then a pending assistant turn, then replaces
that pending turn (by id) with the relay's reply or a conversational error.
"""

from __future__ import annotations

import logging
from typing import Iterable

import httpx

from app.core.config import Settings
from app.core.errors import NetworkFailure
from app.insights.classifier import DEFAULT_DATA_KEYWORDS, is_data_query
from app.insights.context import extract_relevant_data
from app.insights.prompt import compose_prompt
from app.schemas.chat import ChatMessage
from app.services.documents import DatasetSnapshot, DocumentStore

GREETING = (
    "Hello! I am GIA, the Gender and Development Center Information Assistant. "
    "How can I help you today?"
)
PENDING_CONTENT = "Thinking..."
NETWORK_FAILURE_REPLY = (
    "Sorry, I couldn't reach the GIA backend. "
    "Please make sure the backend server is running and try again."
)
RELAY_ERROR_REPLY = "Sorry, something went wrong while processing your message: {error}"

logger = logging.getLogger("gia")


class Transcript:
    def __init__(self, greeting: str | None = GREETING) -> None:
        self._messages: list[ChatMessage] = []
        if greeting:
            self._messages.append(ChatMessage(role="assistant", content=greeting))

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def append_user(self, content: str) -> ChatMessage:
        message = ChatMessage(role="user", content=content)
        self._messages.append(message)
        return message

    def append_pending(self) -> ChatMessage:
        message = ChatMessage(role="assistant", content=PENDING_CONTENT, status="pending")
        self._messages.append(message)
        return message

    def _index_of_pending(self, message_id: str) -> int:
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                if message.status != "pending":
                    raise ValueError(f"Message {message_id} is already {message.status}")
                return index
        raise KeyError(message_id)

    def _replace(self, message_id: str, content: str, status: str) -> ChatMessage:
        index = self._index_of_pending(message_id)
        resolved = ChatMessage(id=message_id, role="assistant", content=content, status=status)
        self._messages[index] = resolved
        return resolved

    def resolve(self, message_id: str, content: str) -> ChatMessage:
        return self._replace(message_id, content, "resolved")

    def fail(self, message_id: str, content: str) -> ChatMessage:
        return self._replace(message_id, content, "error")


class ChatSession:
    def __init__(
        self,
        relay_url: str,
        snapshot: DatasetSnapshot | None = None,
        keywords: Iterable[str] = DEFAULT_DATA_KEYWORDS,
        sample_size: int = 1,
        transport: httpx.BaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self.relay_url = relay_url
        self.snapshot = snapshot
        self.keywords = tuple(keywords)
        self.sample_size = sample_size
        self.transport = transport
        self.timeout = timeout
        self.transcript = Transcript()

    def build_prompt(self, text: str) -> str:
        data_query = is_data_query(text, self.keywords)
        if not data_query or self.snapshot is None:
            return text
        dataset = extract_relevant_data(text, self.snapshot.refresh())
        return compose_prompt(text, dataset, data_query, self.sample_size)

    def _post(self, prompt: str) -> str:
        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as http:
                response = http.post(self.relay_url, json={"message": prompt})
        except httpx.TransportError as exc:
            raise NetworkFailure(NETWORK_FAILURE_REPLY, details=str(exc)) from exc
        response.raise_for_status()
        reply = response.json().get("reply")
        if not reply:
            raise ValueError("No reply in response")
        return reply

    def send(self, text: str) -> ChatMessage | None:
        if not text or not text.strip():
            return None
        self.transcript.append_user(text)
        pending = self.transcript.append_pending()
        try:
            prompt = self.build_prompt(text)
            reply = self._post(prompt)
        except NetworkFailure as exc:
            logger.warning("relay unreachable url=%s error=%s", self.relay_url, exc.details)
            return self.transcript.fail(pending.id, exc.message)
        except httpx.HTTPStatusError as exc:
            error = _relay_error(exc.response)
            logger.warning("relay error status=%s error=%s", exc.response.status_code, error)
            return self.transcript.fail(pending.id, RELAY_ERROR_REPLY.format(error=error))
        except Exception as exc:
            logger.exception("chat send failed")
            return self.transcript.fail(pending.id, RELAY_ERROR_REPLY.format(error=exc))
        return self.transcript.resolve(pending.id, reply)


def create_session(config: Settings) -> ChatSession:
    snapshot = DatasetSnapshot(DocumentStore(config.data_dir))
    return ChatSession(
        config.relay_url,
        snapshot=snapshot,
        keywords=config.data_query_keywords,
        sample_size=config.schema_sample_size,
    )


def _relay_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"API error: {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"API error: {response.status_code}"
