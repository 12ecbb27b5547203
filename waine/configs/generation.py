"""
Generation configuration settings.

Gemini model identifiers and credentials for chat and image analysis.

Dependencies: pydantic, pydantic_settings
System role: Generative model configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationSettings(BaseSettings):
    """Gemini configuration for streamed chat and vision analysis."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Gemini API key")
    chat_model: str = Field(
        default="gemini-2.5-flash",
        description="Model used for streamed chat answers",
    )
    vision_model: str = Field(
        default="gemini-2.5-flash",
        description="Model used to analyse uploaded images",
    )
    temperature: float | None = Field(
        default=None,
        description="Sampling temperature (None keeps the model default)",
    )
    max_image_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted image upload in bytes",
    )
