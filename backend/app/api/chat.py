from fastapi import APIRouter, Depends

from app.api.deps import get_client, get_settings
from app.core.config import Settings
from app.llm.client import OpenAICompatibleClient
from app.schemas.chat import ChatReply, ChatRequest, ErrorResponse
from app.services.chat_service import relay_chat

router = APIRouter(tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatReply,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat_endpoint(
    payload: ChatRequest,
    llm_client: OpenAICompatibleClient = Depends(get_client),
    config: Settings = Depends(get_settings),
) -> ChatReply:
    return relay_chat(payload, llm_client, config)
