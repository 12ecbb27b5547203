"""
Test suite for RetrievalService.

Tests embedding and search orchestration with the configured policy and
the mapping of failures onto RetrievalError.

System role: Verification of retrieval orchestration
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from waine.application.services.retrieval_service import RetrievalService, parse_document_id
from waine.configs.retrieval import RetrievalSettings
from waine.core.exceptions import RetrievalError


@pytest.fixture
def mock_embedder() -> AsyncMock:
    """Provide mock QueryEmbedder."""
    embedder = AsyncMock()
    embedder.embed = AsyncMock(return_value=[0.1, 0.2, 0.3])
    return embedder


@pytest.fixture
def mock_chunk_store() -> MagicMock:
    """Provide mock FAISSChunkStore."""
    store = MagicMock()
    store.search = MagicMock(return_value=[])
    return store


@pytest.fixture
def retrieval_service(mock_embedder: AsyncMock, mock_chunk_store: MagicMock) -> RetrievalService:
    """Provide RetrievalService with default policy."""
    return RetrievalService(
        embedder=mock_embedder,
        chunk_store=mock_chunk_store,
        settings=RetrievalSettings(similarity_threshold=0.7, match_count=10),
    )


class TestRetrieve:
    """Test suite for RetrievalService.retrieve."""

    @pytest.mark.asyncio
    async def test_retrieve_should_search_with_policy_constants(
        self,
        retrieval_service: RetrievalService,
        mock_embedder: AsyncMock,
        mock_chunk_store: MagicMock,
        smoke_taint_chunks,
    ) -> None:
        """Test the query is embedded once and searched with threshold and count."""
        # Arrange
        mock_chunk_store.search.return_value = smoke_taint_chunks

        # Act
        chunks = await retrieval_service.retrieve("smoke taint", document_id=42)

        # Assert
        assert chunks == smoke_taint_chunks
        mock_embedder.embed.assert_awaited_once_with("smoke taint")
        mock_chunk_store.search.assert_called_once_with(
            query_embedding=[0.1, 0.2, 0.3],
            threshold=0.7,
            count=10,
            document_id=42,
        )

    @pytest.mark.asyncio
    async def test_embedding_failure_should_raise_retrieval_error(
        self, retrieval_service: RetrievalService, mock_embedder: AsyncMock, mock_chunk_store: MagicMock
    ) -> None:
        mock_embedder.embed.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(RetrievalError) as exc_info:
            await retrieval_service.retrieve("smoke taint")

        assert exc_info.value.details["operation"] == "embed"
        mock_chunk_store.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_failure_should_raise_retrieval_error(
        self, retrieval_service: RetrievalService, mock_chunk_store: MagicMock
    ) -> None:
        mock_chunk_store.search.side_effect = RuntimeError("index corrupt")

        with pytest.raises(RetrievalError) as exc_info:
            await retrieval_service.retrieve("smoke taint")

        assert exc_info.value.details["operation"] == "search"
        assert exc_info.value.to_payload() == {
            "kind": "retrieval_error",
            "detail": "Failed to retrieve relevant document chunks",
        }


class TestParseDocumentId:
    """Test suite for parse_document_id."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, None), ("", None), (7, 7), ("12", 12), (" 3 ", 3), ("abc", None), ("1.5", None)],
    )
    def test_parse_document_id(self, value, expected) -> None:
        assert parse_document_id(value) == expected
