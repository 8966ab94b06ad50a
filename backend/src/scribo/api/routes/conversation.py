"""Text generation endpoint."""
from typing import Any

from fastapi import APIRouter, Depends

from scribo.adapters.openai_adapter import OpenAIAdapter
from scribo.api.deps import get_current_user, get_generation_service, get_openai_adapter
from scribo.schemas.generation import ConversationRequest
from scribo.schemas.user import CurrentUser
from scribo.services.generation_service import GenerationService

router = APIRouter(tags=["Generation"])


@router.post("/conversation")
async def create_conversation(
    payload: ConversationRequest,
    current_user: CurrentUser = Depends(get_current_user),
    openai_adapter: OpenAIAdapter = Depends(get_openai_adapter),
    generation_service: GenerationService = Depends(get_generation_service),
) -> dict[str, Any]:
    """
    Continue a conversation with the chat model.

    - **messages**: Conversation history, each with a `role` and `content`

    Returns the assistant's reply message exactly as the provider produced it.
    Free-tier users are charged one generation on success.
    """
    messages = [message.model_dump(exclude_none=True) for message in payload.messages]

    return await generation_service.run(
        current_user.user_id,
        "conversation",
        lambda: openai_adapter.create_chat_completion(messages),
    )
