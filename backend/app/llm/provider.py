from app.core.config import Settings, settings
from app.llm.client import OpenAICompatibleClient


def get_llm_client(config: Settings = settings) -> OpenAICompatibleClient:
    # A missing token is left for the remote endpoint to reject.
    return OpenAICompatibleClient(
        base_url=config.llm_base_url,
        api_key=config.hf_api_token,
        model=config.llm_model,
        temperature=config.llm_temperature,
        max_tokens=config.llm_max_tokens,
        timeout=config.llm_timeout,
        warming_status_code=config.llm_warming_status_code,
    )
