"""
Image upload schemas.

Dependencies: pydantic
System role: Image analysis API contract
"""

from pydantic import BaseModel, Field


class ImageAnalysisResponse(BaseModel):
    """Result of analysing an uploaded image."""

    success: bool = True
    file_name: str
    file_size: int
    mime_type: str
    image_context: str = Field(description="Context text to send with the next chat message")
    ai_analysis: str
    user_description: str | None = None
