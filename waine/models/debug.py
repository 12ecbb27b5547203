"""
Citation debugging schemas.

Response contract of the debug-citations endpoint, which exposes the
page ranking behind each consolidated source.

Dependencies: pydantic
System role: Retrieval diagnostics API contracts
"""

from typing import Any

from pydantic import BaseModel, Field

from waine.models.chunk import ScoredChunk


class DebugCitationsRequest(BaseModel):
    """Query to analyse."""

    query: str = ""
    document_id: int | str | None = None


class PageScore(BaseModel):
    """Score summary of one matched page."""

    page: int
    avg_score: float
    chunk_count: int
    quality_score: float


class PageAnalysis(BaseModel):
    """How a document's matched pages were ranked."""

    document_id: int
    document_name: str
    all_matching_pages: list[int] = Field(default_factory=list)
    primary_page: int | None = None
    additional_pages: list[int] = Field(default_factory=list)
    primary_chunk_score: float
    primary_chunk_preview: str
    page_score_distribution: list[PageScore] = Field(default_factory=list)


class DebugCitationsResponse(BaseModel):
    """Full diagnostic report for a query."""

    query: str
    total_chunks_found: int
    relevant_chunks: list[ScoredChunk]
    deduplicated_sources: list[dict[str, Any]]
    page_analysis: list[PageAnalysis]
    potential_issues: list[str]
