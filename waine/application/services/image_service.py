"""
Image upload service.

Validates an uploaded image, has Gemini describe it and wraps the
description into context text the client sends back with its next chat
message.

Dependencies: waine.boundary.llm.vision_client
System role: Image context orchestration
"""

import logging

from waine.boundary.llm.vision_client import GeminiVisionClient
from waine.core.exceptions import InputError
from waine.models.image import ImageAnalysisResponse

logger = logging.getLogger(__name__)

ANALYSIS_ASPECTS = (
    "1) What you see in the image, 2) Key objects, people, or elements, "
    "3) Visual style and composition, 4) Any text or writing visible, "
    "5) Context or setting"
)


def build_analysis_prompt(description: str | None) -> str:
    """Vision prompt, mentioning the user's description when one was given."""
    if description and description.strip():
        return (
            "Analyze this image in detail. The user provided this description: "
            f'"{description.strip()}". Please provide a comprehensive analysis including: '
            f"{ANALYSIS_ASPECTS}, 6) How it relates to the user's description."
        )
    return (
        "Analyze this image in detail. Please provide a comprehensive analysis including: "
        f"{ANALYSIS_ASPECTS}, 6) Any interesting or notable features."
    )


def build_image_context(file_name: str, analysis: str) -> str:
    """Context block describing the uploaded image for the chat model."""
    return (
        f'USER HAS UPLOADED AN IMAGE: The user has provided an image file called "{file_name}".\n\n'
        f"DETAILED IMAGE ANALYSIS: {analysis}\n\n"
        "CONTEXT: This image was uploaded by the user and they want to discuss it or ask "
        "questions about it. Please acknowledge that you can see and analyze their uploaded "
        "image in your response."
    )


class ImageService:
    """Image validation and analysis."""

    def __init__(self, vision_client: GeminiVisionClient, max_bytes: int = 10 * 1024 * 1024) -> None:
        self.vision_client = vision_client
        self.max_bytes = max_bytes

    def validate(self, file_name: str | None, mime_type: str | None, data: bytes) -> None:
        """
        Check an upload before analysis.

        Raises:
            InputError: Missing file, non-image type, or file too large
        """
        if not file_name or not data:
            raise InputError("No file provided", field="file")
        if not (mime_type or "").startswith("image/"):
            raise InputError("Only image files are allowed", field="file", details={"mime_type": mime_type})
        if len(data) > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise InputError(
                f"File size must be less than {limit_mb}MB",
                field="file",
                details={"file_size": len(data)},
            )

    async def analyze_upload(
        self,
        file_name: str | None,
        mime_type: str | None,
        data: bytes,
        description: str | None = None,
    ) -> ImageAnalysisResponse:
        """
        Validate and analyse an uploaded image.

        Args:
            file_name: Uploaded file name
            mime_type: Uploaded content type
            data: File bytes
            description: Optional user description

        Returns:
            ImageAnalysisResponse: Analysis plus chat context text

        Raises:
            InputError: Invalid upload
            ImageAnalysisError: Vision model failure
        """
        self.validate(file_name, mime_type, data)
        logger.info(
            f"{__name__}:analyze_upload - file={file_name}, mime_type={mime_type}, "
            f"size={len(data)}, has_description={bool(description)}"
        )

        analysis = await self.vision_client.analyze(data, mime_type, build_analysis_prompt(description))

        return ImageAnalysisResponse(
            file_name=file_name,
            file_size=len(data),
            mime_type=mime_type,
            image_context=build_image_context(file_name, analysis),
            ai_analysis=analysis,
            user_description=description or None,
        )
