"""
Retrieval chunk and source models.

ScoredChunk is what the similarity search returns; PageStats is the
per-page accumulator used while ranking; DeduplicatedSource is the
one-per-document result that citation markers point at.

Dependencies: pydantic
System role: Retrieval data structures
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ScoredChunk(BaseModel):
    """A single chunk matched by the similarity search."""

    model_config = ConfigDict(frozen=True)

    id: int | str | None = Field(default=None, description="Chunk identifier in the store")
    document_id: int = Field(description="Owning document identifier")
    page_number: int | None = Field(default=None, description="Page the chunk came from")
    content: str = Field(description="Chunk text content")
    similarity: float = Field(ge=0.0, le=1.0, description="Similarity score (0.0-1.0)")
    source_name: str = Field(default="", description="Source document name")


@dataclass
class PageStats:
    """Running score totals for one (document, page) pair."""

    page_number: int
    chunks: list[ScoredChunk] = field(default_factory=list)
    total_score: float = 0.0

    def add(self, chunk: ScoredChunk) -> None:
        self.chunks.append(chunk)
        self.total_score += chunk.similarity

    @property
    def count(self) -> int:
        return len(self.chunks)

    @property
    def avg_score(self) -> float:
        return self.total_score / self.count if self.chunks else 0.0

    def quality_score(self, chunk_cap: int = 3) -> float:
        """Average similarity weighted by chunk count, capped at ``chunk_cap``."""
        return self.avg_score * min(self.count, chunk_cap)

    def best_chunk(self) -> ScoredChunk:
        """Highest-similarity chunk on the page, first seen wins ties."""
        return max(self.chunks, key=lambda chunk: chunk.similarity)


class DeduplicatedSource(BaseModel):
    """
    One consolidated source per document.

    Attributes:
        primary_chunk: Representative chunk of the best page
        additional_pages: Other matched pages, best first
        citation_index: 1-based number used in [n] markers (set by renumbering)
    """

    model_config = ConfigDict(frozen=True)

    primary_chunk: ScoredChunk
    additional_pages: list[int] = Field(default_factory=list)
    citation_index: int | None = None

    @property
    def document_id(self) -> int:
        return self.primary_chunk.document_id

    @property
    def page_number(self) -> int | None:
        return self.primary_chunk.page_number

    def to_frame_dict(self) -> dict[str, Any]:
        """Flatten into the shape the chat client renders."""
        payload = self.primary_chunk.model_dump()
        payload["additional_pages"] = list(self.additional_pages)
        payload["citation_index"] = self.citation_index
        return payload
