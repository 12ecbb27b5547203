"""Citation debugging endpoint.

Routes:
- POST /debug-citations - Show how retrieved chunks were consolidated into sources

Uses the same aggregator as the chat path, so what this endpoint reports is
exactly what chat would cite.

Dependencies: waine.application.services.retrieval_service, waine.core
System role: Retrieval diagnostics HTTP API
"""

from fastapi import APIRouter, Depends

from waine.api.deps import get_aggregator, get_retrieval_service
from waine.api.routers.router_utils import handle_service_errors
from waine.application.services.retrieval_service import RetrievalService, parse_document_id
from waine.core.exceptions import InputError
from waine.core.page_aggregator import PageQualityAggregator
from waine.core.page_diagnostics import analyze_pages, detect_issues
from waine.core.source_renumberer import renumber_sources
from waine.models.debug import DebugCitationsRequest, DebugCitationsResponse

router = APIRouter(tags=["debug"])


@router.post("/debug-citations", response_model=DebugCitationsResponse)
@handle_service_errors
async def debug_citations(
    body: DebugCitationsRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
    aggregator: PageQualityAggregator = Depends(get_aggregator),
) -> DebugCitationsResponse:
    """Run retrieval for a query and explain the resulting sources.

    Raises:
        HTTPException(400): Empty query
        HTTPException(502): Retrieval failed
    """
    if not body.query.strip():
        raise InputError("Query is required", field="query")

    chunks = await retrieval_service.retrieve(
        body.query,
        document_id=parse_document_id(body.document_id),
    )
    sources = renumber_sources(aggregator.aggregate(chunks))
    analyses = analyze_pages(chunks, sources, aggregator)

    return DebugCitationsResponse(
        query=body.query,
        total_chunks_found=len(chunks),
        relevant_chunks=chunks,
        deduplicated_sources=[source.to_frame_dict() for source in sources],
        page_analysis=analyses,
        potential_issues=detect_issues(chunks, analyses),
    )
