"""
Citation marker injection.

Rewrites a generated answer so every web-grounded span is followed by
bracketed source numbers. Web sources are numbered after the retrieved
document sources, so ``[1]..[K]`` always mean document sources and web
sources start at ``[K + 1]``.

Markers are only ever inserted; no existing character is removed or moved
relative to its neighbours.

Dependencies: waine.models.grounding
System role: Citation placement in generated text
"""

import logging
from collections.abc import Sequence

from waine.models.grounding import GroundingSupport

logger = logging.getLogger(__name__)

SENTENCE_END = ".!?"
CLAUSE_BREAK = ",;:"


def find_insertion_point(
    text: str,
    end_index: int,
    search_window: int = 50,
    clause_window: int = 20,
    whitespace_window: int = 15,
) -> int:
    """
    Choose where a marker for a segment ending at ``end_index`` goes.

    Looks ahead from ``end_index`` for, in order of preference: a sentence
    end followed by whitespace or the end of the text, a clause break
    followed by whitespace, then any whitespace. Falls back to ``end_index``.

    Args:
        text: Current (possibly already annotated) text
        end_index: Segment end offset reported by the grounding metadata
        search_window: Characters scanned for a sentence end
        clause_window: Characters scanned for a clause break
        whitespace_window: Characters scanned for whitespace

    Returns:
        int: Offset to insert at
    """
    end_index = max(0, min(end_index, len(text)))
    length = len(text)

    def followed_by_break(position: int) -> bool:
        return position + 1 >= length or text[position + 1].isspace()

    limit = min(end_index + search_window, length)
    for position in range(end_index, limit):
        if text[position] in SENTENCE_END and followed_by_break(position):
            return position + 1

    limit = min(end_index + clause_window, length)
    for position in range(end_index, limit):
        if text[position] in CLAUSE_BREAK and followed_by_break(position):
            return position + 1

    limit = min(end_index + whitespace_window, length)
    for position in range(end_index, limit):
        if text[position].isspace():
            return position

    return end_index


def build_marker(source_indices: Sequence[int], rag_source_count: int) -> str:
    """Render ``[n]`` markers for web sources, offset past the document sources."""
    return "".join(f"[{index + rag_source_count + 1}]" for index in source_indices)


class CitationInjector:
    """Inserts web citation markers into a complete answer."""

    def __init__(
        self,
        search_window: int = 50,
        clause_window: int = 20,
        whitespace_window: int = 15,
    ) -> None:
        self.search_window = search_window
        self.clause_window = clause_window
        self.whitespace_window = whitespace_window

    def inject(
        self,
        text: str,
        supports: Sequence[GroundingSupport],
        rag_source_count: int,
    ) -> str:
        """
        Insert markers for every grounding support.

        Supports are applied from the last segment to the first so that an
        insertion never shifts an offset that still has to be processed.

        Args:
            text: Full generated answer
            supports: Grounding supports (may be empty)
            rag_source_count: Number of retrieved document sources

        Returns:
            str: Annotated text (``text`` itself when there are no supports)
        """
        if not supports:
            return text

        # sorted() is stable, equal end offsets keep their input order
        ordered = sorted(supports, key=lambda support: support.segment.end_index, reverse=True)

        annotated = text
        inserted = 0
        for support in ordered:
            marker = build_marker(support.source_indices, rag_source_count)
            if not marker:
                continue
            position = find_insertion_point(
                annotated,
                support.segment.end_index,
                search_window=self.search_window,
                clause_window=self.clause_window,
                whitespace_window=self.whitespace_window,
            )
            annotated = annotated[:position] + marker + annotated[position:]
            inserted += 1

        logger.debug(
            "Injected citation markers",
            extra={"support_count": len(supports), "inserted": inserted},
        )
        return annotated


def inject_citations(
    text: str,
    supports: Sequence[GroundingSupport],
    rag_source_count: int,
) -> str:
    """Shortcut for ``CitationInjector().inject`` with default windows."""
    return CitationInjector().inject(text, supports, rag_source_count)
