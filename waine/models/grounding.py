"""
Web grounding models.

Normalised form of the grounding metadata attached to a Gemini response
when Google Search grounding is enabled.

Dependencies: pydantic
System role: Web citation data structures
"""

from pydantic import BaseModel, Field


class GroundingSegment(BaseModel):
    """Span of generated text backed by web sources."""

    start_index: int = 0
    end_index: int
    text: str | None = None


class GroundingSupport(BaseModel):
    """Links a generated-text segment to indices into ``grounding_chunks``."""

    segment: GroundingSegment
    source_indices: list[int] = Field(default_factory=list)
    confidence_scores: list[float] = Field(default_factory=list)


class WebSource(BaseModel):
    """A web page used for grounding."""

    uri: str | None = None
    title: str | None = None


class GroundingMetadata(BaseModel):
    """Grounding metadata for one generated answer."""

    grounding_chunks: list[WebSource] = Field(default_factory=list)
    grounding_supports: list[GroundingSupport] = Field(default_factory=list)
    web_search_queries: list[str] = Field(default_factory=list)
