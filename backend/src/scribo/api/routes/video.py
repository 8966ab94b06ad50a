"""Video generation endpoint."""
from typing import Any

from fastapi import APIRouter, Depends

from scribo.adapters.replicate_adapter import ReplicateAdapter
from scribo.api.deps import get_current_user, get_generation_service, get_replicate_adapter
from scribo.schemas.generation import VideoRequest
from scribo.schemas.user import CurrentUser
from scribo.services.generation_service import GenerationService

router = APIRouter(tags=["Generation"])


@router.post("/video")
async def create_video(
    payload: VideoRequest,
    current_user: CurrentUser = Depends(get_current_user),
    replicate_adapter: ReplicateAdapter = Depends(get_replicate_adapter),
    generation_service: GenerationService = Depends(get_generation_service),
) -> Any:
    """Generate a short video from a prompt; returns the model's native output."""
    return await generation_service.run(
        current_user.user_id,
        "video",
        lambda: replicate_adapter.generate_video(payload.prompt),
    )
