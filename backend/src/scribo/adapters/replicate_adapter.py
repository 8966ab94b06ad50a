"""Replicate adapter for video generation."""
from typing import Any

import replicate

from scribo.constants import VIDEO_MODEL


class ReplicateAdapter:
    """Runs the text-to-video model hosted on Replicate."""

    def __init__(self, api_token: str, client: replicate.Client | None = None):
        self.client = client or replicate.Client(api_token=api_token)

    async def generate_video(self, prompt: str) -> Any:
        """
        Generate a video for a prompt.

        Returns:
            The model's native output, with files reported as URLs
        """
        return await self.client.async_run(
            VIDEO_MODEL,
            input={"prompt": prompt},
            use_file_output=False,
        )
