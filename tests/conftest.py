"""
Shared test fixtures and configuration for entire test suite.

Provides: Chunk/source factories, grounding builders, mocked model clients
Dependencies: pytest, waine.models
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from waine.models.chat import ChatMessage, ChatRequest
from waine.models.chunk import ScoredChunk
from waine.models.grounding import GroundingMetadata, GroundingSegment, GroundingSupport, WebSource
from waine.models.streaming import ModelStreamChunk


def make_chunk(
    document_id: int = 1,
    page_number: int | None = 1,
    similarity: float = 0.8,
    content: str = "chunk content",
    source_name: str = "Vineyard Guide",
    chunk_id: int | str | None = None,
) -> ScoredChunk:
    """Build a ScoredChunk with sensible defaults."""
    return ScoredChunk(
        id=chunk_id,
        document_id=document_id,
        page_number=page_number,
        content=content,
        similarity=similarity,
        source_name=source_name,
    )


def make_support(end_index: int, source_indices: list[int], start_index: int = 0) -> GroundingSupport:
    """Build a GroundingSupport for a segment ending at ``end_index``."""
    return GroundingSupport(
        segment=GroundingSegment(start_index=start_index, end_index=end_index),
        source_indices=source_indices,
    )


def model_stream(*chunks: ModelStreamChunk):
    """Return a callable producing a fresh async generator over ``chunks``."""

    async def _stream(**kwargs):
        for chunk in chunks:
            yield chunk

    return _stream


def failing_stream(error: Exception, *before: ModelStreamChunk):
    """Return a callable producing an async generator that raises after ``before``."""

    async def _stream(**kwargs):
        for chunk in before:
            yield chunk
        raise error

    return _stream


@pytest.fixture
def chunk_factory():
    """Expose make_chunk as a fixture."""
    return make_chunk


@pytest.fixture
def smoke_taint_chunks() -> list[ScoredChunk]:
    """
    Five chunks of one document spread over pages 3 and 9.

    Page 9 has the single best chunk, but page 3 has three solid matches
    and therefore the higher quality score.
    """
    return [
        make_chunk(document_id=42, page_number=3, similarity=0.82, content="p3 a", chunk_id=1),
        make_chunk(document_id=42, page_number=9, similarity=0.91, content="p9 a", chunk_id=2),
        make_chunk(document_id=42, page_number=3, similarity=0.80, content="p3 b", chunk_id=3),
        make_chunk(document_id=42, page_number=3, similarity=0.78, content="p3 c", chunk_id=4),
        make_chunk(document_id=42, page_number=9, similarity=0.60, content="p9 b", chunk_id=5),
    ]


@pytest.fixture
def web_grounding() -> GroundingMetadata:
    """Grounding metadata with one web source supporting "Smoke taint reduces quality"."""
    return GroundingMetadata(
        grounding_chunks=[WebSource(uri="https://example.org/smoke", title="Smoke taint")],
        grounding_supports=[
            GroundingSupport(
                segment=GroundingSegment(start_index=0, end_index=27),
                source_indices=[0],
                confidence_scores=[0.9],
            )
        ],
        web_search_queries=["smoke taint wine"],
    )


@pytest.fixture
def chat_request() -> ChatRequest:
    """Single-turn chat request about a wine topic."""
    return ChatRequest(
        messages=[ChatMessage(role="user", content="What causes smoke taint in grapes?")],
    )


@pytest.fixture
def mock_retrieval_service() -> AsyncMock:
    """RetrievalService mock returning no chunks."""
    service = AsyncMock()
    service.retrieve = AsyncMock(return_value=[])
    return service


@pytest.fixture
def mock_chat_client() -> MagicMock:
    """GeminiChatClient mock streaming a plain answer."""
    client = MagicMock()
    client.stream = MagicMock(side_effect=model_stream(ModelStreamChunk(text="Hello there.")))
    return client


@pytest.fixture
def support_factory():
    """Expose make_support as a fixture."""
    return make_support


@pytest.fixture
def stream_factory():
    """Expose model_stream as a fixture."""
    return model_stream


@pytest.fixture
def failing_stream_factory():
    """Expose failing_stream as a fixture."""
    return failing_stream
