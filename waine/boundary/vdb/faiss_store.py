"""
FAISS chunk store.

Similarity search over a persisted FAISS index whose documents carry
``document_id``, ``page_number``, ``name`` and ``chunk_id`` metadata.
Ingestion happens elsewhere; this store only loads and queries.

Dependencies: langchain_community.vectorstores, langchain_core
System role: Similarity Search Service
"""

import logging
from pathlib import Path
from typing import Any

from langchain_community.vectorstores import FAISS
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from waine.models.chunk import ScoredChunk

logger = logging.getLogger(__name__)


def distance_to_similarity(distance: float) -> float:
    """Squared L2 distance between unit vectors to cosine similarity in [0, 1]."""
    return max(0.0, min(1.0, 1.0 - float(distance) / 2.0))


class FAISSChunkStore:
    """
    Read-only FAISS store for document chunks.

    Wraps LangChain FAISS and returns ScoredChunk results.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        persist_directory: str = ".faiss_index",
    ) -> None:
        """
        Initialize the store and load the index if one exists.

        Args:
            embeddings: Embedding model the index was built with
            persist_directory: Directory holding index.faiss / index.pkl
        """
        self._persist_dir = Path(persist_directory)
        self._embeddings = embeddings
        self._index: FAISS | None = None
        self._load_index()

    def _load_index(self) -> None:
        """Load the persisted index, leaving the store empty when absent."""
        index_path = self._persist_dir / "index.faiss"
        if not index_path.exists():
            logger.warning(
                f"{__name__}:_load_index - No FAISS index at {self._persist_dir}, store is empty"
            )
            return
        self._index = FAISS.load_local(
            str(self._persist_dir),
            self._embeddings,
            allow_dangerous_deserialization=True,
        )
        logger.info(f"{__name__}:_load_index - Loaded FAISS index from {self._persist_dir}")

    @property
    def is_loaded(self) -> bool:
        """Whether an index is available for search."""
        return self._index is not None

    def search(
        self,
        query_embedding: list[float],
        threshold: float,
        count: int,
        document_id: int | None = None,
    ) -> list[ScoredChunk]:
        """
        Find chunks similar to a query embedding.

        Args:
            query_embedding: Query vector
            threshold: Minimum similarity kept (0.0-1.0)
            count: Maximum number of matches
            document_id: Restrict the search to one document

        Returns:
            list[ScoredChunk]: Matches in descending similarity order
        """
        if self._index is None:
            return []

        filter_dict: dict[str, Any] | None = None
        if document_id is not None:
            filter_dict = {"document_id": document_id}

        results = self._index.similarity_search_with_score_by_vector(
            query_embedding,
            k=count,
            filter=filter_dict,
        )

        chunks = []
        for document, distance in results:
            similarity = distance_to_similarity(distance)
            if similarity < threshold:
                continue
            chunks.append(self._to_chunk(document, similarity))
        return chunks

    @staticmethod
    def _to_chunk(document: Document, similarity: float) -> ScoredChunk:
        metadata = document.metadata
        page = metadata.get("page_number")
        return ScoredChunk(
            id=metadata.get("chunk_id"),
            document_id=int(metadata["document_id"]),
            page_number=int(page) if page is not None else None,
            content=document.page_content,
            similarity=similarity,
            source_name=metadata.get("name", ""),
        )
