"""Chat API endpoint.

Routes:
- POST /chat - Stream a retrieval-augmented answer as text and data frames

Input and retrieval failures are returned as a regular JSON error before
streaming starts; everything after that travels inside the stream.

Dependencies: waine.application.services.chat_service
System role: Streamed chat HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from waine.api.deps import get_chat_service
from waine.api.routers.router_utils import handle_service_errors
from waine.application.services.chat_service import ChatService
from waine.models.chat import ChatRequest
from waine.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAM_HEADERS = {"X-Experimental-Stream-Data": "true"}


@router.post("/chat")
@handle_service_errors
async def chat(
    request: Request,
    body: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Answer the last user message as a framed stream.

    Args:
        request: Raw request (used to detect client disconnects)
        body: Conversation, optional document scope, search and image flags
        chat_service: Injected ChatService

    Returns:
        StreamingResponse: ``0:`` text frames and ``2:`` data frames

    Raises:
        HTTPException(400): No usable user message
        HTTPException(502): Retrieval failed
    """
    prepared = await chat_service.prepare(body)
    log_with_context(
        logger,
        logging.INFO,
        "Chat stream starting",
        source_count=len(prepared.sources),
        enable_search=prepared.enable_search,
        category=prepared.classification.category.value,
    )
    return StreamingResponse(
        chat_service.stream(prepared, is_disconnected=request.is_disconnected),
        media_type=STREAM_MEDIA_TYPE,
        headers=STREAM_HEADERS,
    )
