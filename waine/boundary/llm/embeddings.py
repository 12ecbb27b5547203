"""
Query embedding client.

Wraps GoogleGenerativeAIEmbeddings with a fixed output dimensionality so
query vectors match the dimension of the stored index.

Dependencies: langchain_google_genai
System role: Embedding Service
"""

import logging

from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)


def create_embeddings(
    model: str = "models/gemini-embedding-001",
    api_key: str | None = None,
) -> GoogleGenerativeAIEmbeddings:
    """
    Build the LangChain embeddings model.

    Args:
        model: Google embedding model ID
        api_key: Optional key (falls back to GOOGLE_API_KEY)

    Returns:
        GoogleGenerativeAIEmbeddings: Configured embeddings
    """
    kwargs = {"model": model}
    if api_key:
        kwargs["google_api_key"] = api_key
    return GoogleGenerativeAIEmbeddings(**kwargs)


class QueryEmbedder:
    """Embeds user queries for similarity search."""

    def __init__(self, embeddings: Embeddings, output_dimensionality: int | None = None) -> None:
        """
        Initialize embedder.

        Args:
            embeddings: LangChain embeddings model
            output_dimensionality: Fixed vector dimension, None for model default
        """
        self._embeddings = embeddings
        self._output_dimensionality = output_dimensionality

    @property
    def embeddings(self) -> Embeddings:
        return self._embeddings

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single query.

        Args:
            text: Query text

        Returns:
            list[float]: Query vector
        """
        if self._output_dimensionality is None:
            vector = await self._embeddings.aembed_query(text)
        else:
            vector = await self._embeddings.aembed_query(
                text,
                output_dimensionality=self._output_dimensionality,
            )
        logger.debug(f"{__name__}:embed - Embedded query, dimension={len(vector)}")
        return list(vector)
