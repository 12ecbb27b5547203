"""
Exception hierarchy for the Waine chat backend.

Provides layered exception structure for domain-specific errors.
Every surfaced error carries a stable machine-readable kind plus a
human-readable detail string.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class WaineException(Exception):
    """Base exception for all Waine application errors."""

    kind: str = "internal_error"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_payload(self) -> dict[str, str]:
        """Structured failure object returned across the API boundary."""
        return {"kind": self.kind, "detail": self.message}


class InputError(WaineException):
    """Raised when the user message is missing or malformed. Never retried."""

    kind = "input_error"
    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize input error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class RetrievalError(WaineException):
    """Raised when the embedding or similarity search call fails."""

    kind = "retrieval_error"
    status_code = 502

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize retrieval error.

        Args:
            message: Error message
            operation: Operation that failed (embed, search, load)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class GenerationError(WaineException):
    """Base exception for generative model failures."""

    kind = "generation_error"
    status_code = 502


class GenerationToolError(GenerationError):
    """Raised when a tool-augmented (web grounding) model call fails."""

    kind = "generation_tool_error"


class GenerationFatalError(GenerationError):
    """Raised when the model call fails and no retry remains."""

    kind = "generation_fatal_error"


class StreamWriteError(WaineException):
    """Raised when the downstream consumer is gone. Never shown to the user."""

    kind = "stream_write_error"
    status_code = 499


class ImageAnalysisError(WaineException):
    """Raised when the vision model cannot analyse an uploaded image."""

    kind = "image_analysis_error"
    status_code = 502
