"""
Source renumbering.

Assigns the 1-based citation index each consolidated source is referred
to by in ``[n]`` markers.

Dependencies: waine.models.chunk
System role: Citation numbering
"""

from collections.abc import Sequence

from waine.models.chunk import DeduplicatedSource


def renumber_sources(sources: Sequence[DeduplicatedSource]) -> list[DeduplicatedSource]:
    """
    Number sources ``1..K`` in their current order.

    Args:
        sources: Consolidated sources in output order

    Returns:
        list[DeduplicatedSource]: Copies carrying ``citation_index = position + 1``
    """
    return [
        source.model_copy(update={"citation_index": position + 1})
        for position, source in enumerate(sources)
    ]
