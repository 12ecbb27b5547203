"""
Page-quality source consolidation.

Collapses raw similarity matches, possibly many per document and page,
into one DeduplicatedSource per document. Pages are ranked by

    quality = avg_similarity * min(chunk_count, chunk_cap)

so that a page with a pile of weak matches cannot outrank a page with a
couple of strong ones. The representative chunk of a document is the best
chunk on its best page; the remaining matched pages are listed best first.

Dependencies: waine.models.chunk
System role: Retrieval deduplication and ranking
"""

import functools
import logging
from collections.abc import Iterable

from waine.models.chunk import DeduplicatedSource, PageStats, ScoredChunk

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_CAP = 3
DEFAULT_TIE_EPSILON = 0.05


class DocumentPages:
    """Chunks of a single document, grouped by page in first-seen order."""

    def __init__(self, document_id: int) -> None:
        self.document_id = document_id
        self.chunks: list[ScoredChunk] = []
        self.pages: dict[int, PageStats] = {}

    def add(self, chunk: ScoredChunk) -> None:
        self.chunks.append(chunk)
        if chunk.page_number is None:
            return
        stats = self.pages.get(chunk.page_number)
        if stats is None:
            stats = self.pages[chunk.page_number] = PageStats(page_number=chunk.page_number)
        stats.add(chunk)


def group_by_document(chunks: Iterable[ScoredChunk]) -> dict[int, DocumentPages]:
    """
    Group chunks by document and page.

    Args:
        chunks: Scored chunks in search order

    Returns:
        dict[int, DocumentPages]: Keyed by document ID, in first-seen order
    """
    documents: dict[int, DocumentPages] = {}
    for chunk in chunks:
        document = documents.get(chunk.document_id)
        if document is None:
            document = documents[chunk.document_id] = DocumentPages(chunk.document_id)
        document.add(chunk)
    return documents


class PageQualityAggregator:
    """
    Consolidates scored chunks into one ranked source per document.

    Every call builds its own grouping maps; instances only hold policy.
    """

    def __init__(
        self,
        chunk_cap: int = DEFAULT_CHUNK_CAP,
        tie_epsilon: float = DEFAULT_TIE_EPSILON,
    ) -> None:
        """
        Initialize aggregator policy.

        Args:
            chunk_cap: Maximum chunk count rewarded in a page's quality score
            tie_epsilon: Quality scores closer than this are treated as equal
                when ordering pages, and the lower page number goes first
        """
        if chunk_cap < 1:
            raise ValueError("chunk_cap must be at least 1")
        self.chunk_cap = chunk_cap
        self.tie_epsilon = tie_epsilon

    def aggregate(self, chunks: Iterable[ScoredChunk]) -> list[DeduplicatedSource]:
        """
        Build one DeduplicatedSource per document.

        Args:
            chunks: Scored chunks from the similarity search (may be empty)

        Returns:
            list[DeduplicatedSource]: In order of first appearance of each document,
                without citation indices
        """
        documents = group_by_document(chunks)
        sources = [self._consolidate(document) for document in documents.values()]
        logger.debug(
            "Aggregated sources",
            extra={"document_count": len(sources)},
        )
        return sources

    def quality(self, stats: PageStats) -> float:
        return stats.quality_score(self.chunk_cap)

    def primary_page(self, document: DocumentPages) -> PageStats | None:
        """Page with the highest quality score; the earliest page wins exact ties."""
        if not document.pages:
            return None
        return max(document.pages.values(), key=self.quality)

    def rank_pages(self, document: DocumentPages) -> list[int]:
        """
        Order a document's matched pages, primary page first.

        Remaining pages follow by descending quality, where scores within
        ``tie_epsilon`` of each other fall back to ascending page number.
        """
        primary = self.primary_page(document)
        if primary is None:
            return []

        def compare(a: PageStats, b: PageStats) -> int:
            qa, qb = self.quality(a), self.quality(b)
            if abs(qa - qb) < self.tie_epsilon:
                return a.page_number - b.page_number
            return -1 if qa > qb else 1

        others = [stats for stats in document.pages.values() if stats is not primary]
        others.sort(key=functools.cmp_to_key(compare))
        return [primary.page_number] + [stats.page_number for stats in others]

    def _consolidate(self, document: DocumentPages) -> DeduplicatedSource:
        primary = self.primary_page(document)
        if primary is None:
            # No page numbers at all: best chunk overall, nothing else to list.
            best = max(document.chunks, key=lambda chunk: chunk.similarity)
            return DeduplicatedSource(primary_chunk=best)

        ranked = self.rank_pages(document)
        return DeduplicatedSource(
            primary_chunk=primary.best_chunk(),
            additional_pages=ranked[1:],
        )
