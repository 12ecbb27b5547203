"""
Test suite for image upload endpoint.

Tests POST /upload-image with FastAPI TestClient and a mocked vision client.

System role: Verification of image context HTTP API
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from waine.api.deps import get_image_service
from waine.api.routers.images import router
from waine.application.services.image_service import ImageService
from waine.core.exceptions import ImageAnalysisError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def mock_vision_client() -> AsyncMock:
    """Provide mock GeminiVisionClient."""
    client = AsyncMock()
    client.analyze = AsyncMock(return_value="A glass of sparkling wine.")
    return client


@pytest.fixture
def client(mock_vision_client: AsyncMock) -> TestClient:
    """Provide TestClient with the image service overridden."""
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_image_service] = lambda: ImageService(
        vision_client=mock_vision_client,
        max_bytes=1024,
    )
    return TestClient(app)


class TestUploadImage:
    """Test suite for POST /upload-image."""

    def test_upload_should_return_analysis_and_context(self, client: TestClient) -> None:
        # Act
        response = client.post(
            "/upload-image",
            files={"file": ("glass.png", PNG_BYTES, "image/png")},
            data={"description": "Tonight's aperitif"},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["file_name"] == "glass.png"
        assert data["mime_type"] == "image/png"
        assert data["ai_analysis"] == "A glass of sparkling wine."
        assert "A glass of sparkling wine." in data["image_context"]
        assert data["user_description"] == "Tonight's aperitif"

    def test_upload_should_reject_missing_file(self, client: TestClient) -> None:
        response = client.post("/upload-image", data={"description": "no file"})

        assert response.status_code == 400
        assert response.json()["detail"] == {"kind": "input_error", "detail": "No file provided"}

    def test_upload_should_reject_non_image(self, client: TestClient) -> None:
        response = client.post(
            "/upload-image",
            files={"file": ("notes.txt", b"tasting notes", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["detail"] == "Only image files are allowed"

    def test_upload_should_reject_large_file(self, client: TestClient) -> None:
        response = client.post(
            "/upload-image",
            files={"file": ("huge.png", b"\x00" * 4096, "image/png")},
        )

        assert response.status_code == 400

    def test_upload_should_return_502_when_analysis_fails(
        self, client: TestClient, mock_vision_client: AsyncMock
    ) -> None:
        mock_vision_client.analyze.side_effect = ImageAnalysisError("Failed to analyze image with AI")

        response = client.post(
            "/upload-image",
            files={"file": ("glass.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 502
        assert response.json()["detail"]["kind"] == "image_analysis_error"
