"""Image generation endpoint."""
from typing import Any

from fastapi import APIRouter, Depends

from scribo.adapters.openai_adapter import OpenAIAdapter
from scribo.api.deps import get_current_user, get_generation_service, get_openai_adapter
from scribo.schemas.generation import ImageRequest
from scribo.schemas.user import CurrentUser
from scribo.services.generation_service import GenerationService

router = APIRouter(tags=["Generation"])


@router.post("/image")
async def create_images(
    payload: ImageRequest,
    current_user: CurrentUser = Depends(get_current_user),
    openai_adapter: OpenAIAdapter = Depends(get_openai_adapter),
    generation_service: GenerationService = Depends(get_generation_service),
) -> list[dict[str, Any]]:
    """
    Generate images from a prompt.

    - **prompt**: Image description
    - **amount**: Number of images (default 1)
    - **resolution**: One of `256x256`, `512x512` (default), `1024x1024`
    """
    return await generation_service.run(
        current_user.user_id,
        "image",
        lambda: openai_adapter.generate_images(payload.prompt, n=payload.amount, size=payload.resolution),
    )
