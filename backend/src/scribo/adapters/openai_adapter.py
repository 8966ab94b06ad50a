"""OpenAI adapter for text and image generation."""
from typing import Any

from openai import AsyncOpenAI

from scribo.constants import CHAT_MODEL


class OpenAIAdapter:
    """
    Thin wrapper over the official async OpenAI SDK.

    Works against any OpenAI-compatible endpoint when ``base_url`` is set.
    """

    def __init__(self, api_key: str, base_url: str | None = None, client: AsyncOpenAI | None = None):
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def create_chat_completion(self, messages: list[dict[str, Any]]) -> dict[str, Any]:
        """Return the first assistant message of a chat completion."""
        response = await self.client.chat.completions.create(
            model=CHAT_MODEL,
            messages=messages,
        )
        return response.choices[0].message.model_dump(exclude_none=True)

    async def generate_images(self, prompt: str, n: int, size: str) -> list[dict[str, Any]]:
        """Return the image descriptors (URLs or base64 payloads) for a prompt."""
        response = await self.client.images.generate(prompt=prompt, n=n, size=size)
        return [image.model_dump(exclude_none=True) for image in response.data or []]
