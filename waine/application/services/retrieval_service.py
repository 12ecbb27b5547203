"""
Retrieval service.

Embeds a query and runs the similarity search with the configured policy
constants. Any failure becomes a RetrievalError; retrieval is never
retried, a partial answer being worse than an explicit failure.

Dependencies: waine.boundary.llm, waine.boundary.vdb, fastapi.concurrency
System role: Retrieval orchestration
"""

import logging

from fastapi.concurrency import run_in_threadpool

from waine.boundary.llm.embeddings import QueryEmbedder
from waine.boundary.vdb.faiss_store import FAISSChunkStore
from waine.configs.retrieval import RetrievalSettings
from waine.core.exceptions import RetrievalError
from waine.models.chunk import ScoredChunk

logger = logging.getLogger(__name__)


def parse_document_id(value: int | str | None) -> int | None:
    """
    Parse a document filter sent by the client.

    Args:
        value: Numeric ID, numeric string, or None

    Returns:
        int | None: Parsed ID, or None when absent or not numeric
    """
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip(), 10)
    except ValueError:
        logger.warning(
            f"{__name__}:parse_document_id - documentId {value!r} is not a valid number, skipping filter"
        )
        return None


class RetrievalService:
    """Embedding plus similarity search for one query."""

    def __init__(
        self,
        embedder: QueryEmbedder,
        chunk_store: FAISSChunkStore,
        settings: RetrievalSettings,
    ) -> None:
        """
        Initialize retrieval service.

        Args:
            embedder: Query embedding client
            chunk_store: Similarity search store
            settings: Threshold and match count policy
        """
        self._embedder = embedder
        self._chunk_store = chunk_store
        self._settings = settings

    async def retrieve(self, query: str, document_id: int | None = None) -> list[ScoredChunk]:
        """
        Find chunks relevant to a query.

        Args:
            query: User query text
            document_id: Optional document filter

        Returns:
            list[ScoredChunk]: Matches above the similarity threshold

        Raises:
            RetrievalError: If embedding or search fails
        """
        try:
            embedding = await self._embedder.embed(query)
        except Exception as e:
            logger.error(f"{__name__}:retrieve - Embedding FAILED: {type(e).__name__}: {e}")
            raise RetrievalError("Failed to embed query", operation="embed") from e

        try:
            chunks = await run_in_threadpool(
                self._chunk_store.search,
                query_embedding=embedding,
                threshold=self._settings.similarity_threshold,
                count=self._settings.match_count,
                document_id=document_id,
            )
        except Exception as e:
            logger.error(f"{__name__}:retrieve - Search FAILED: {type(e).__name__}: {e}")
            raise RetrievalError(
                "Failed to retrieve relevant document chunks",
                operation="search",
                details={"document_id": document_id},
            ) from e

        logger.info(
            f"{__name__}:retrieve - Retrieved {len(chunks)} chunks "
            f"(threshold={self._settings.similarity_threshold}, count={self._settings.match_count}, "
            f"document_id={document_id})"
        )
        return chunks
