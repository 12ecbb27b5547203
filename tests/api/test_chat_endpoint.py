"""
Test suite for chat API endpoint.

Tests POST /chat with FastAPI TestClient.
Covers the framed stream, stream headers and the structured errors
returned before streaming starts.

System role: Verification of chat HTTP API endpoint
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from waine.api.deps import get_chat_service
from waine.api.routers.chat import router
from waine.application.services.chat_service import ChatService
from waine.core.exceptions import RetrievalError
from waine.core.stream_encoder import collect_text, decode_stream
from waine.models.streaming import FrameType, ModelStreamChunk


@pytest.fixture
def app() -> FastAPI:
    """Create FastAPI test application with chat router."""
    app = FastAPI()
    app.include_router(router)
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Provide TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def chat_service(mock_retrieval_service: AsyncMock, mock_chat_client: MagicMock) -> ChatService:
    """Provide ChatService wired to mocked clients."""
    return ChatService(retrieval_service=mock_retrieval_service, chat_client=mock_chat_client)


@pytest.fixture
def chat_body() -> dict:
    """Provide sample chat request body."""
    return {
        "messages": [{"role": "user", "content": "What causes smoke taint in grapes?"}],
    }


class TestChatEndpointSuccessful:
    """Test suite for successful chat endpoint requests."""

    def test_chat_should_stream_sources_then_text(
        self,
        client: TestClient,
        chat_service: ChatService,
        chat_body: dict,
        mock_retrieval_service: AsyncMock,
        smoke_taint_chunks,
    ) -> None:
        """Test the response body is a sources frame followed by the answer."""
        # Arrange
        mock_retrieval_service.retrieve.return_value = smoke_taint_chunks
        client.app.dependency_overrides[get_chat_service] = lambda: chat_service

        # Act
        response = client.post("/chat", json=chat_body)

        # Assert
        assert response.status_code == 200
        frames = decode_stream(response.content)
        assert [frame.frame_type for frame in frames] == [FrameType.DATA, FrameType.TEXT]
        sources = frames[0].payload[0]["sources"]
        assert len(sources) == 1
        assert sources[0]["document_id"] == 42
        assert sources[0]["page_number"] == 3
        assert sources[0]["citation_index"] == 1
        assert collect_text(frames) == "Hello there."

    def test_chat_should_set_stream_headers(
        self, client: TestClient, chat_service: ChatService, chat_body: dict
    ) -> None:
        client.app.dependency_overrides[get_chat_service] = lambda: chat_service

        response = client.post("/chat", json=chat_body)

        assert response.headers["x-experimental-stream-data"] == "true"
        assert response.headers["content-type"].startswith("text/plain")

    def test_chat_should_emit_final_frame_when_grounded(
        self,
        client: TestClient,
        chat_service: ChatService,
        mock_chat_client: MagicMock,
        stream_factory,
        web_grounding,
    ) -> None:
        """Test web grounding adds markers and a closing metadata frame."""
        # Arrange
        mock_chat_client.stream.side_effect = stream_factory(
            ModelStreamChunk(text="Smoke taint reduces quality. It is caused by fire exposure"),
            ModelStreamChunk(grounding_metadata=web_grounding),
        )
        client.app.dependency_overrides[get_chat_service] = lambda: chat_service

        # Act
        response = client.post(
            "/chat",
            json={
                "messages": [{"role": "user", "content": "What causes smoke taint in grapes?"}],
                "enable_search": True,
                "image_context": "A smoky vineyard.",
            },
        )

        # Assert
        frames = decode_stream(response.content)
        assert [frame.frame_type for frame in frames] == [FrameType.DATA, FrameType.TEXT, FrameType.DATA]
        assert collect_text(frames).startswith("Smoke taint reduces quality.[1] It")
        assert frames[2].payload[0]["image_context_used"] is True


class TestChatEndpointErrors:
    """Test suite for chat endpoint error handling."""

    def test_chat_should_return_400_for_missing_user_message(
        self, client: TestClient, chat_service: ChatService
    ) -> None:
        client.app.dependency_overrides[get_chat_service] = lambda: chat_service

        response = client.post("/chat", json={"messages": []})

        assert response.status_code == 400
        assert response.json()["detail"] == {
            "kind": "input_error",
            "detail": "No user message text found",
        }

    def test_chat_should_return_502_when_retrieval_fails(
        self,
        client: TestClient,
        chat_service: ChatService,
        chat_body: dict,
        mock_retrieval_service: AsyncMock,
        mock_chat_client: MagicMock,
    ) -> None:
        """Test retrieval failures surface before any stream byte."""
        # Arrange
        mock_retrieval_service.retrieve.side_effect = RetrievalError(
            "Failed to retrieve relevant document chunks", operation="search"
        )
        client.app.dependency_overrides[get_chat_service] = lambda: chat_service

        # Act
        response = client.post("/chat", json=chat_body)

        # Assert
        assert response.status_code == 502
        assert response.json()["detail"]["kind"] == "retrieval_error"
        mock_chat_client.stream.assert_not_called()

    def test_chat_should_return_422_for_malformed_body(
        self, client: TestClient, chat_service: ChatService
    ) -> None:
        client.app.dependency_overrides[get_chat_service] = lambda: chat_service

        response = client.post("/chat", json={"messages": "not a list"})

        assert response.status_code == 422
