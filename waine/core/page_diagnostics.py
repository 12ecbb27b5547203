"""
Page ranking diagnostics.

Explains how PageQualityAggregator ranked each document's pages and flags
retrieval results that look suspicious. Purely observational: nothing here
feeds back into ranking.

Dependencies: waine.core.page_aggregator, waine.models
System role: Retrieval observability
"""

import logging
from collections.abc import Sequence

from waine.core.page_aggregator import PageQualityAggregator, group_by_document
from waine.models.chunk import DeduplicatedSource, ScoredChunk
from waine.models.debug import PageAnalysis, PageScore

logger = logging.getLogger(__name__)

LARGE_PAGE_GAP = 5
PREVIEW_LENGTH = 100


def analyze_pages(
    chunks: Sequence[ScoredChunk],
    sources: Sequence[DeduplicatedSource],
    aggregator: PageQualityAggregator,
) -> list[PageAnalysis]:
    """
    Describe the page ranking behind each source.

    Args:
        chunks: Raw chunks the sources were built from
        sources: Output of ``aggregator.aggregate(chunks)``
        aggregator: Aggregator holding the ranking policy

    Returns:
        list[PageAnalysis]: One entry per source, same order
    """
    documents = group_by_document(chunks)
    analyses = []
    for source in sources:
        document = documents[source.document_id]
        distribution = sorted(
            (
                PageScore(
                    page=stats.page_number,
                    avg_score=stats.avg_score,
                    chunk_count=stats.count,
                    quality_score=aggregator.quality(stats),
                )
                for stats in document.pages.values()
            ),
            key=lambda score: score.avg_score,
            reverse=True,
        )
        primary = source.primary_chunk
        analyses.append(
            PageAnalysis(
                document_id=source.document_id,
                document_name=primary.source_name or "Unknown",
                all_matching_pages=sorted(document.pages),
                primary_page=primary.page_number,
                additional_pages=list(source.additional_pages),
                primary_chunk_score=primary.similarity,
                primary_chunk_preview=primary.content[:PREVIEW_LENGTH],
                page_score_distribution=distribution,
            )
        )
    return analyses


def detect_issues(chunks: Sequence[ScoredChunk], analyses: Sequence[PageAnalysis]) -> list[str]:
    """
    Heuristic warnings about a retrieval result.

    Args:
        chunks: Raw chunks
        analyses: Output of ``analyze_pages``

    Returns:
        list[str]: Human-readable warnings, empty when nothing stands out
    """
    issues: list[str] = []
    if not chunks:
        issues.append(
            "No chunks found above similarity threshold - query may be too specific "
            "or documents may not contain relevant content"
        )
        return issues

    for analysis in analyses:
        name = analysis.document_name
        distribution = analysis.page_score_distribution

        if len(distribution) > 1 and distribution[0].page != analysis.primary_page:
            best = distribution[0]
            issues.append(
                f'Document "{name}": Primary page {analysis.primary_page} '
                f"(score: {analysis.primary_chunk_score:.3f}) is not the page with highest "
                f"average score (page {best.page}, avg: {best.avg_score:.3f})"
            )

        pages = analysis.all_matching_pages
        for previous, current in zip(pages, pages[1:]):
            if current - previous > LARGE_PAGE_GAP:
                issues.append(
                    f'Document "{name}": Large page gap detected ({previous} to {current}) '
                    "- may indicate chunking issues"
                )

        document_chunks = sum(1 for chunk in chunks if chunk.document_id == analysis.document_id)
        counts = {score.chunk_count for score in distribution}
        if document_chunks > 3 and 1 in counts and len(counts) > 1:
            issues.append(
                f'Document "{name}": Some pages have only 1 matching chunk while others have '
                "multiple - may indicate uneven content distribution"
            )

    return issues


def log_page_diagnostics(
    chunks: Sequence[ScoredChunk],
    sources: Sequence[DeduplicatedSource],
    aggregator: PageQualityAggregator,
) -> None:
    """Log ranking warnings at DEBUG level; no-op unless DEBUG is enabled."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    issues = detect_issues(chunks, analyze_pages(chunks, sources, aggregator))
    for issue in issues:
        logger.debug("Page diagnostics: %s", issue)
