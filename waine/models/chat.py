"""
Chat domain models and schemas.

Request schemas for the streamed chat endpoint and the query
classification result.

Dependencies: pydantic
System role: Chat API contracts
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class ContentPart(BaseModel):
    """One part of a multi-part message (only text parts are used)."""

    type: str
    text: str | None = None


class ChatMessage(BaseModel):
    """A single conversation message as sent by the chat client."""

    role: str = Field(description="Message role: 'user', 'assistant' or 'system'")
    content: str | list[ContentPart] = Field(default="", description="Text or content parts")

    @property
    def text(self) -> str:
        """Plain text of the message, taken from the first text part when multi-part."""
        if isinstance(self.content, str):
            return self.content
        for part in self.content:
            if part.type == "text" and isinstance(part.text, str):
                return part.text
        return ""


class ChatRequest(BaseModel):
    """Request schema for a streamed chat turn."""

    messages: list[ChatMessage] = Field(default_factory=list)
    document_id: int | str | None = Field(
        default=None,
        description="Restrict retrieval to one document",
    )
    document_name: str | None = Field(
        default=None,
        description="Name of the document the user is asking about",
    )
    enable_search: bool = Field(default=False, description="Enable web search grounding")
    image_context: str | None = Field(
        default=None,
        description="Analysis text from a previously uploaded image",
    )


class QueryCategory(str, Enum):
    """Response-shape category for a user utterance."""

    CONVERSATIONAL = "conversational"
    SPECIFIC = "specific"
    OPEN_ENDED = "open-ended"


class QueryClassification(BaseModel):
    """Outcome of classifying a user utterance."""

    category: QueryCategory
    should_retrieve: bool


class HistoryTurn(BaseModel):
    """Earlier conversation turn in model terms."""

    role: Literal["user", "model"]
    text: str
