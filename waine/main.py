"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, google.genai, waine.api, waine.observability, waine.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from google import genai

from waine.api import api_router
from waine.application.services import RetrievalService
from waine.boundary.llm import (
    GeminiChatClient,
    GeminiVisionClient,
    QueryEmbedder,
    create_embeddings,
)
from waine.boundary.vdb import FAISSChunkStore
from waine.configs import Settings, get_settings
from waine.observability.logger import configure_logging
from waine.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


def init_resources(app: FastAPI, settings: Settings) -> None:
    """
    Build long-lived clients and attach them to ``app.state``.

    Args:
        app: Application instance
        settings: Application settings
    """
    retrieval = settings.retrieval
    generation = settings.generation

    embeddings = create_embeddings(model=retrieval.embedding_model, api_key=generation.api_key)
    chunk_store = FAISSChunkStore(embeddings=embeddings, persist_directory=retrieval.index_path)
    logger.info("Chunk store initialized", extra={"index_loaded": chunk_store.is_loaded})

    google_client = genai.Client(api_key=generation.api_key) if generation.api_key else genai.Client()

    app.state.chunk_store = chunk_store
    app.state.retrieval_service = RetrievalService(
        embedder=QueryEmbedder(embeddings, output_dimensionality=retrieval.embedding_dimension),
        chunk_store=chunk_store,
        settings=retrieval,
    )
    app.state.chat_client = GeminiChatClient(
        client=google_client,
        model_id=generation.chat_model,
        temperature=generation.temperature,
    )
    app.state.vision_client = GeminiVisionClient(
        client=google_client,
        model_id=generation.vision_model,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    Initializes shared clients (vector store, embeddings, Gemini).
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    try:
        init_resources(app, settings)
        logger.info("Application startup complete: all resources initialized")
    except Exception as e:
        logger.exception(
            "Failed to initialize application resources",
            extra={"error": str(e)},
        )
        raise

    yield

    # Shutdown
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Retrieval-augmented wine assistant with cited, streamed answers",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    return app


load_dotenv()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "waine.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
