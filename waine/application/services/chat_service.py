"""
Chat service for retrieval-augmented answers.

Orchestrates one chat turn: input validation, query classification,
retrieval, source consolidation, streamed generation (with a single
ungrounded retry), citation injection and stream framing.

Split in two phases so that input and retrieval failures surface as a
normal error response before any stream byte is written:
- prepare(): synchronous error path
- stream(): framed byte stream

Dependencies: waine.core, waine.application.services.retrieval_service, waine.boundary.llm
System role: Chat service orchestration layer
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import aclosing
from dataclasses import dataclass, field

from waine.application.services.retrieval_service import RetrievalService, parse_document_id
from waine.boundary.llm.gemini_client import GeminiChatClient
from waine.core.citation_injector import CitationInjector
from waine.core.exceptions import (
    GenerationFatalError,
    GenerationToolError,
    InputError,
    StreamWriteError,
    WaineException,
)
from waine.core.page_aggregator import PageQualityAggregator
from waine.core.page_diagnostics import log_page_diagnostics
from waine.core.prompts import build_system_instruction
from waine.core.query_classifier import QueryClassifier
from waine.core.source_renumberer import renumber_sources
from waine.core.stream_encoder import StreamEncoder
from waine.models.chat import ChatMessage, ChatRequest, HistoryTurn, QueryClassification
from waine.models.chunk import DeduplicatedSource, ScoredChunk
from waine.models.grounding import GroundingMetadata

logger = logging.getLogger(__name__)

DisconnectCheck = Callable[[], Awaitable[bool]]


@dataclass
class PreparedChat:
    """Everything needed to stream one chat turn."""

    prompt: str
    history: list[HistoryTurn]
    classification: QueryClassification
    system_instruction: str
    enable_search: bool = False
    image_context_used: bool = False
    chunks: list[ScoredChunk] = field(default_factory=list)
    sources: list[DeduplicatedSource] = field(default_factory=list)

    def sources_payload(self) -> list[dict]:
        return [source.to_frame_dict() for source in self.sources]


def build_history(messages: list[ChatMessage]) -> list[HistoryTurn]:
    """
    Convert earlier client messages into model history.

    Only user and assistant messages are kept; assistant becomes ``model``.
    Messages without text are dropped.
    """
    history = []
    for message in messages:
        if message.role not in ("user", "assistant"):
            continue
        text = message.text
        if not text:
            continue
        history.append(HistoryTurn(role="user" if message.role == "user" else "model", text=text))
    return history


class ChatService:
    """
    Chat service for streamed RAG answers.

    Holds only collaborators and policy; every call builds its own
    request-local state.
    """

    def __init__(
        self,
        retrieval_service: RetrievalService,
        chat_client: GeminiChatClient,
        classifier: QueryClassifier | None = None,
        aggregator: PageQualityAggregator | None = None,
        injector: CitationInjector | None = None,
        encoder: StreamEncoder | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            retrieval_service: Embedding + similarity search
            chat_client: Streaming generative model client
            classifier: Query classifier
            aggregator: Page-quality source aggregator
            injector: Citation marker injector
            encoder: Stream frame encoder
        """
        self.retrieval_service = retrieval_service
        self.chat_client = chat_client
        self.classifier = classifier or QueryClassifier()
        self.aggregator = aggregator or PageQualityAggregator()
        self.injector = injector or CitationInjector()
        self.encoder = encoder or StreamEncoder()

    async def prepare(self, request: ChatRequest) -> PreparedChat:
        """
        Validate the request and run retrieval.

        Args:
            request: Chat request from the client

        Returns:
            PreparedChat: Prompt, history, sources and system instruction

        Raises:
            InputError: If there is no usable user message
            RetrievalError: If retrieval was needed and failed
        """
        if not request.messages:
            raise InputError("No user message text found", field="messages")

        last_message = request.messages[-1]
        prompt = last_message.text
        if last_message.role != "user" or not prompt.strip():
            raise InputError("No user message text found", field="messages")

        image_context = (request.image_context or "").strip()
        classification = self.classifier.classify(prompt, has_image_context=bool(image_context))
        logger.info(
            f"{__name__}:prepare - category={classification.category.value}, "
            f"should_retrieve={classification.should_retrieve}, messages={len(request.messages)}"
        )

        chunks: list[ScoredChunk] = []
        if classification.should_retrieve:
            document_id = parse_document_id(request.document_id)
            chunks = await self.retrieval_service.retrieve(prompt, document_id=document_id)

        sources = renumber_sources(self.aggregator.aggregate(chunks))
        log_page_diagnostics(chunks, sources, self.aggregator)

        system_instruction = build_system_instruction(
            sources,
            chunks,
            classification.category,
            document_name=request.document_name,
            image_context=image_context or None,
        )

        return PreparedChat(
            prompt=prompt,
            history=build_history(request.messages[:-1]),
            classification=classification,
            system_instruction=system_instruction,
            enable_search=request.enable_search,
            image_context_used=bool(image_context),
            chunks=chunks,
            sources=sources,
        )

    async def generate(
        self,
        prepared: PreparedChat,
        is_disconnected: DisconnectCheck | None = None,
    ) -> tuple[str, GroundingMetadata | None]:
        """
        Run the model to completion, retrying once without grounding.

        Args:
            prepared: Prepared chat turn
            is_disconnected: Optional client disconnect probe

        Returns:
            tuple[str, GroundingMetadata | None]: Full answer and grounding metadata

        Raises:
            GenerationFatalError: If generation cannot complete
            StreamWriteError: If the client went away mid-generation
        """
        if not prepared.enable_search:
            return await self._collect(prepared, use_search=False, is_disconnected=is_disconnected)

        try:
            return await self._collect(prepared, use_search=True, is_disconnected=is_disconnected)
        except GenerationToolError as e:
            logger.warning(
                f"{__name__}:generate - Grounded generation failed, retrying without search: {e}"
            )
        return await self._collect(prepared, use_search=False, is_disconnected=is_disconnected)

    async def _collect(
        self,
        prepared: PreparedChat,
        use_search: bool,
        is_disconnected: DisconnectCheck | None,
    ) -> tuple[str, GroundingMetadata | None]:
        fragments: list[str] = []
        grounding: GroundingMetadata | None = None
        model_stream = self.chat_client.stream(
            prompt=prepared.prompt,
            history=prepared.history,
            system_instruction=prepared.system_instruction,
            use_search=use_search,
        )
        try:
            async with aclosing(model_stream) as chunks:
                async for chunk in chunks:
                    if chunk.text:
                        fragments.append(chunk.text)
                    if chunk.grounding_metadata is not None:
                        grounding = chunk.grounding_metadata
                    await self._ensure_connected(is_disconnected)
        except WaineException:
            raise
        except Exception as e:
            error_class = GenerationToolError if use_search else GenerationFatalError
            raise error_class(
                f"Model stream failed: {type(e).__name__}",
                details={"grounded": use_search},
            ) from e

        full_answer = "".join(fragments)
        logger.info(
            f"{__name__}:_collect - Generation complete, fragments={len(fragments)}, "
            f"answer_len={len(full_answer)}, grounded={grounding is not None}"
        )
        return full_answer, grounding

    @staticmethod
    async def _ensure_connected(is_disconnected: DisconnectCheck | None) -> None:
        if is_disconnected is not None and await is_disconnected():
            raise StreamWriteError("Client disconnected")

    async def stream(
        self,
        prepared: PreparedChat,
        is_disconnected: DisconnectCheck | None = None,
    ) -> AsyncGenerator[bytes, None]:
        """
        Stream the framed answer.

        Frames: sources data frame, one annotated text frame, then a final
        data frame with grounding metadata when the answer was grounded.
        A fatal generation error after the first frame is reported as an
        ``error`` data frame.

        Args:
            prepared: Output of prepare()
            is_disconnected: Optional client disconnect probe

        Yields:
            bytes: Complete frame lines
        """
        sources_payload = prepared.sources_payload()
        try:
            await self._ensure_connected(is_disconnected)
            yield self.encoder.data_frame({"sources": sources_payload})

            try:
                text, grounding = await self.generate(prepared, is_disconnected)
            except GenerationFatalError as e:
                logger.error(f"{__name__}:stream - Generation failed: {e}")
                await self._ensure_connected(is_disconnected)
                yield self.encoder.data_frame({"error": e.to_payload()})
                return

            supports = grounding.grounding_supports if grounding is not None else []
            annotated = self.injector.inject(text, supports, len(prepared.sources))
            await self._ensure_connected(is_disconnected)
            yield self.encoder.text_frame(annotated)

            if grounding is not None:
                await self._ensure_connected(is_disconnected)
                yield self.encoder.data_frame({
                    "sources": sources_payload,
                    "grounding_metadata": grounding.model_dump(),
                    "image_context_used": prepared.image_context_used,
                })
        except StreamWriteError:
            logger.info(f"{__name__}:stream - Client disconnected, upstream aborted")
            return

        logger.info(
            f"{__name__}:stream - END sources={len(prepared.sources)}, answer_len={len(annotated)}"
        )
