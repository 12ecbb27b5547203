"""
Gemini streaming chat client.

Streams an answer from Gemini with an optional Google Search grounding
tool and normalises each response chunk into a ModelStreamChunk.

Dependencies: google.genai
System role: Generative Model Service
"""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing
from typing import Any

from google import genai
from google.genai import types

from waine.core.exceptions import GenerationFatalError, GenerationToolError
from waine.models.chat import HistoryTurn
from waine.models.grounding import (
    GroundingMetadata,
    GroundingSegment,
    GroundingSupport,
    WebSource,
)
from waine.models.streaming import ModelStreamChunk

logger = logging.getLogger(__name__)


def to_grounding_metadata(raw: Any) -> GroundingMetadata | None:
    """
    Convert SDK grounding metadata into the domain model.

    Args:
        raw: ``types.GroundingMetadata`` or None

    Returns:
        GroundingMetadata | None: None when the metadata carries nothing usable
    """
    if raw is None:
        return None

    sources = []
    for chunk in raw.grounding_chunks or []:
        web = getattr(chunk, "web", None)
        sources.append(WebSource(uri=web.uri, title=web.title) if web else WebSource())

    supports = []
    for support in raw.grounding_supports or []:
        segment = support.segment
        if segment is None or segment.end_index is None:
            continue
        supports.append(
            GroundingSupport(
                segment=GroundingSegment(
                    start_index=segment.start_index or 0,
                    end_index=segment.end_index,
                    text=segment.text,
                ),
                source_indices=list(support.grounding_chunk_indices or []),
                confidence_scores=list(support.confidence_scores or []),
            )
        )

    queries = list(raw.web_search_queries or [])
    if not (sources or supports or queries):
        return None
    return GroundingMetadata(
        grounding_chunks=sources,
        grounding_supports=supports,
        web_search_queries=queries,
    )


def to_stream_chunk(response: Any) -> ModelStreamChunk:
    """Extract text and grounding metadata from one streamed response."""
    candidates = response.candidates or []
    if not candidates:
        return ModelStreamChunk()
    candidate = candidates[0]

    text = None
    if candidate.content and candidate.content.parts:
        pieces = [
            part.text
            for part in candidate.content.parts
            if part.text and not getattr(part, "thought", False)
        ]
        text = "".join(pieces) or None

    return ModelStreamChunk(
        text=text,
        grounding_metadata=to_grounding_metadata(candidate.grounding_metadata),
    )


class GeminiChatClient:
    """Streams chat answers from Gemini."""

    def __init__(
        self,
        client: genai.Client,
        model_id: str = "gemini-2.5-flash",
        temperature: float | None = None,
    ) -> None:
        """
        Initialize chat client.

        Args:
            client: Google GenAI client
            model_id: Gemini model identifier
            temperature: Sampling temperature, None for the model default
        """
        self._client = client
        self._model_id = model_id
        self._temperature = temperature

    @property
    def model_id(self) -> str:
        return self._model_id

    def _build_config(self, system_instruction: str, use_search: bool) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if use_search else None
        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self._temperature,
            tools=tools,
        )

    @staticmethod
    def _build_contents(prompt: str, history: Sequence[HistoryTurn]) -> list[types.Content]:
        contents = [
            types.Content(role=turn.role, parts=[types.Part(text=turn.text)])
            for turn in history
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=prompt)]))
        return contents

    async def stream(
        self,
        prompt: str,
        history: Sequence[HistoryTurn],
        system_instruction: str,
        use_search: bool = False,
    ) -> AsyncIterator[ModelStreamChunk]:
        """
        Stream a model answer.

        Closing the returned iterator closes the underlying SDK stream, which
        aborts the in-flight request.

        Args:
            prompt: Current user message
            history: Earlier conversation turns
            system_instruction: System instruction text
            use_search: Enable Google Search grounding

        Yields:
            ModelStreamChunk: Text fragments and grounding metadata

        Raises:
            GenerationToolError: Call failed with grounding enabled
            GenerationFatalError: Call failed without grounding
        """
        error_class = GenerationToolError if use_search else GenerationFatalError
        logger.info(
            f"{__name__}:stream - START model={self._model_id}, "
            f"history_len={len(history)}, grounded={use_search}"
        )
        try:
            response_stream = await self._client.aio.models.generate_content_stream(
                model=self._model_id,
                contents=self._build_contents(prompt, history),
                config=self._build_config(system_instruction, use_search),
            )
            async with aclosing(response_stream) as responses:
                async for response in responses:
                    yield to_stream_chunk(response)
        except Exception as e:
            logger.error(f"{__name__}:stream - FAILED: {type(e).__name__}: {e}")
            raise error_class(
                f"Model stream failed: {type(e).__name__}",
                details={"model": self._model_id, "grounded": use_search},
            ) from e
        logger.info(f"{__name__}:stream - END model={self._model_id}")
