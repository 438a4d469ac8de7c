from __future__ import annotations

import logging
import time

from app.core.config import Settings
from app.core.errors import InvalidRequest, UpstreamError, UpstreamWarming
from app.insights.prompt import build_messages
from app.llm.client import OpenAICompatibleClient
from app.schemas.chat import ChatReply, ChatRequest

WARMING_UP_REPLY = (
    "I'm currently warming up! The AI model is loading. "
    "Please try again in about 20-30 seconds."
)
FALLBACK_REPLY = "I apologize, but I couldn't generate a proper response. Please try again."


def relay_chat(
    payload: ChatRequest,
    llm_client: OpenAICompatibleClient,
    config: Settings,
) -> ChatReply:
    logger = logging.getLogger("gia")

    if not payload.message or not payload.message.strip():
        logger.info("chat rejected: no message provided")
        raise InvalidRequest("Message is required")

    messages = build_messages(config.system_prompt, payload.message)
    llm_start = time.perf_counter()
    try:
        llm_response = llm_client.generate(messages)
    except UpstreamWarming:
        logger.warning("chat upstream warming model=%s", config.llm_model)
        return ChatReply(reply=WARMING_UP_REPLY)
    except UpstreamError as exc:
        logger.error(
            "chat upstream error status=%s model=%s body=%s",
            exc.upstream_status,
            config.llm_model,
            exc.body[:200],
        )
        raise
    llm_ms = int((time.perf_counter() - llm_start) * 1000)

    logger.info(
        "chat prompt_chars=%s status=%s llm_ms=%s model=%s total_tokens=%s",
        len(payload.message),
        llm_response.status_code,
        llm_ms,
        config.llm_model,
        llm_response.total_tokens,
    )

    if not llm_response.text:
        logger.warning("chat empty completion model=%s", config.llm_model)
        return ChatReply(reply=FALLBACK_REPLY)
    return ChatReply(reply=llm_response.text)
