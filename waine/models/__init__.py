"""Domain models and API schemas."""

from waine.models.chunk import DeduplicatedSource, PageStats, ScoredChunk
from waine.models.grounding import (
    GroundingMetadata,
    GroundingSegment,
    GroundingSupport,
    WebSource,
)

__all__ = [
    "DeduplicatedSource",
    "GroundingMetadata",
    "GroundingSegment",
    "GroundingSupport",
    "PageStats",
    "ScoredChunk",
    "WebSource",
]
