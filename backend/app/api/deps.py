from fastapi import Depends

from app.core.config import Settings, settings
from app.llm.client import OpenAICompatibleClient
from app.llm.provider import get_llm_client
from app.services.documents import DocumentStore


def get_settings() -> Settings:
    return settings


def get_client(config: Settings = Depends(get_settings)) -> OpenAICompatibleClient:
    return get_llm_client(config)


def get_document_store(config: Settings = Depends(get_settings)) -> DocumentStore:
    return DocumentStore(config.data_dir)
