"""
Unified application settings.

Combines the retrieval, generation and citation sections into one
read-only Settings object shared through FastAPI dependencies.

Dependencies: waine.configs.retrieval, waine.configs.generation, waine.configs.citation
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from waine.configs.base import BaseSettings
from waine.configs.citation import CitationSettings
from waine.configs.generation import GenerationSettings
from waine.configs.retrieval import RetrievalSettings


class Settings(BaseSettings):
    """Top-level settings; each section reads its own env prefix."""

    app_name: str = Field(default="Waine Chat API", description="Service title")

    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    citation: CitationSettings = Field(default_factory=CitationSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get the cached application settings.

    Environment variables and `.env` are read on first call; later calls
    return the same instance.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
