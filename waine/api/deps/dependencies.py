"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived clients are built
once in the application lifespan and kept on ``app.state``; per-request
services are assembled here from them.

Dependencies: waine.configs, waine.application, waine.boundary
System role: DI container for service injection
"""

from fastapi import Depends, Request

from waine.application.services import ChatService, ImageService, RetrievalService
from waine.boundary.vdb.faiss_store import FAISSChunkStore
from waine.configs import Settings, get_settings
from waine.core.citation_injector import CitationInjector
from waine.core.page_aggregator import PageQualityAggregator
from waine.core.query_classifier import QueryClassifier


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_retrieval_service(request: Request) -> RetrievalService:
    """Shared retrieval service from app state."""
    return request.app.state.retrieval_service


def get_chunk_store(request: Request) -> FAISSChunkStore:
    """Shared chunk store from app state."""
    return request.app.state.chunk_store


def get_aggregator(settings: Settings = Depends(get_settings_dependency)) -> PageQualityAggregator:
    """
    Get the page-quality aggregator configured from retrieval settings.

    Args:
        settings: Application settings (injected)

    Returns:
        PageQualityAggregator: Aggregator with configured chunk cap and tie epsilon
    """
    return PageQualityAggregator(
        chunk_cap=settings.retrieval.quality_chunk_cap,
        tie_epsilon=settings.retrieval.tie_epsilon,
    )


def get_chat_service(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
    aggregator: PageQualityAggregator = Depends(get_aggregator),
) -> ChatService:
    """
    Get chat service instance for one request.

    Args:
        request: Incoming request (for app state)
        settings: Application settings (injected)
        aggregator: Configured aggregator (injected)

    Returns:
        ChatService: Chat service wired to the shared clients
    """
    state = request.app.state
    return ChatService(
        retrieval_service=state.retrieval_service,
        chat_client=state.chat_client,
        classifier=QueryClassifier(),
        aggregator=aggregator,
        injector=CitationInjector(
            search_window=settings.citation.search_window,
            clause_window=settings.citation.clause_window,
            whitespace_window=settings.citation.whitespace_window,
        ),
    )


def get_image_service(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> ImageService:
    """
    Get image service instance.

    Args:
        request: Incoming request (for app state)
        settings: Application settings (injected)

    Returns:
        ImageService: Image service with the shared vision client
    """
    return ImageService(
        vision_client=request.app.state.vision_client,
        max_bytes=settings.generation.max_image_bytes,
    )
