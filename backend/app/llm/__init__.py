from app.llm.client import LLMResponse, OpenAICompatibleClient
from app.llm.provider import get_llm_client

__all__ = ["LLMResponse", "OpenAICompatibleClient", "get_llm_client"]
