"""
Health check API endpoints.

Routes: GET /health, GET /health/vector-store

Dependencies: waine.boundary.vdb
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from waine.api.deps import get_chunk_store
from waine.boundary.vdb.faiss_store import FAISSChunkStore


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/vector-store", response_model=HealthResponse)
async def health_check_vector_store(
    chunk_store: FAISSChunkStore = Depends(get_chunk_store),
) -> HealthResponse:
    """Vector store health check."""
    if chunk_store.is_loaded:
        return HealthResponse(status="healthy", message="Vector store accessible")
    return HealthResponse(status="degraded", message="Vector index not loaded")
