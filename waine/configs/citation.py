"""
Citation placement settings.

Character windows scanned after a grounding segment when choosing where
to insert a citation marker.

Dependencies: pydantic_settings
System role: Citation injection configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CitationSettings(BaseSettings):
    """Look-ahead windows for citation marker placement."""

    model_config = SettingsConfigDict(
        env_prefix="CITATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    search_window: int = Field(default=50, ge=0, description="Characters scanned for sentence ends")
    clause_window: int = Field(default=20, ge=0, description="Characters scanned for , ; :")
    whitespace_window: int = Field(default=15, ge=0, description="Characters scanned for whitespace")
