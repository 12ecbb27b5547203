"""Dependency injection providers."""

from waine.api.deps.dependencies import (
    get_aggregator,
    get_chat_service,
    get_chunk_store,
    get_image_service,
    get_retrieval_service,
    get_settings_dependency,
)

__all__ = [
    "get_aggregator",
    "get_chat_service",
    "get_chunk_store",
    "get_image_service",
    "get_retrieval_service",
    "get_settings_dependency",
]
