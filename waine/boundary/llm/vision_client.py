"""
Gemini vision client.

Produces a textual analysis of an uploaded image so it can be carried
into later chat turns as context.

Dependencies: google.genai
System role: Image analysis adapter
"""

import logging

from google import genai
from google.genai import types

from waine.core.exceptions import ImageAnalysisError

logger = logging.getLogger(__name__)


class GeminiVisionClient:
    """Analyses images with a Gemini multimodal model."""

    def __init__(self, client: genai.Client, model_id: str = "gemini-2.5-flash") -> None:
        self._client = client
        self._model_id = model_id

    async def analyze(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        """
        Describe an image.

        Args:
            image_bytes: Raw image data
            mime_type: Image MIME type
            prompt: Analysis instructions

        Returns:
            str: Model analysis text

        Raises:
            ImageAnalysisError: If the model call fails or returns nothing
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_id,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    prompt,
                ],
            )
        except Exception as e:
            logger.error(f"{__name__}:analyze - FAILED: {type(e).__name__}: {e}")
            raise ImageAnalysisError(
                "Failed to analyze image with AI",
                details={"model": self._model_id, "error_type": type(e).__name__},
            ) from e

        analysis = (response.text or "").strip()
        if not analysis:
            raise ImageAnalysisError("Image analysis returned no text", details={"model": self._model_id})
        return analysis
