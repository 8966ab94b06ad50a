"""Request bodies for the generation endpoints."""
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from scribo.constants import DEFAULT_IMAGE_AMOUNT, DEFAULT_IMAGE_RESOLUTION

ImageResolution = Literal["256x256", "512x512", "1024x1024"]


class ChatMessage(BaseModel):
    """One chat message; provider-specific fields pass through untouched."""

    model_config = ConfigDict(extra="allow")

    role: str = Field(..., min_length=1, description="Message author role (system, user, assistant)")
    content: Any = Field(default=None, description="Message content")


class ConversationRequest(BaseModel):
    """Body of POST /api/conversation."""

    messages: list[ChatMessage] = Field(..., description="Conversation history, oldest first")


class ImageRequest(BaseModel):
    """Body of POST /api/image."""

    prompt: str = Field(..., min_length=1, description="Image description")
    amount: int = Field(default=DEFAULT_IMAGE_AMOUNT, gt=0, description="Number of images to generate")
    resolution: ImageResolution = Field(default=DEFAULT_IMAGE_RESOLUTION, description="Image size")


class VideoRequest(BaseModel):
    """Body of POST /api/video."""

    prompt: str = Field(..., min_length=1, description="Video description")
