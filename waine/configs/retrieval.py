"""
Retrieval configuration settings.

Similarity search policy constants and page-quality ranking parameters.

Dependencies: pydantic, pydantic_settings
System role: Retrieval and source consolidation configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrievalSettings(BaseSettings):
    """Retrieval policy for the similarity search and page aggregation."""

    model_config = SettingsConfigDict(
        env_prefix="RETRIEVAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    similarity_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Minimum similarity score for a chunk to be returned (0.0-1.0)",
    )
    match_count: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of chunks returned per query",
    )
    quality_chunk_cap: int = Field(
        default=3,
        ge=1,
        description="Chunk count cap when multiplying a page's average score",
    )
    tie_epsilon: float = Field(
        default=0.05,
        ge=0.0,
        description="Quality scores closer than this are ordered by page number",
    )

    index_path: str = Field(
        default=".faiss_index",
        description="Directory of the persisted FAISS index",
    )
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google embedding model used for query embeddings",
    )
    embedding_dimension: int = Field(
        default=768,
        description="Output dimension requested from the embedding model",
    )
