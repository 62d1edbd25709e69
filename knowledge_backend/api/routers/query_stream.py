"""
Streaming query endpoint.

Answers a question as server-sent events: confidence, tokens with inline
citations, metadata, then done (or a single error event).

Routes: POST /query/stream

Dependencies: knowledge_backend.application.services.answer_stream_service
System role: Answer streaming HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from knowledge_backend.api.deps import get_answer_stream_service
from knowledge_backend.application.services.answer_stream_service import AnswerStreamService
from knowledge_backend.core.streaming.sse import SSE_HEADERS
from knowledge_backend.models.query import QueryRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("/stream")
async def stream_query(
    body: QueryRequest,
    service: AnswerStreamService = Depends(get_answer_stream_service),
) -> StreamingResponse:
    """
    Stream a grounded answer to a question.

    Args:
        body: Validated query request (camelCase or snake_case keys)
        service: Injected answer stream service

    Returns:
        StreamingResponse: text/event-stream of encoded stream chunks

    Raises:
        HTTPException(503): No answer source is configured
    """
    logger.info(
        f"{__name__}:stream_query - Streaming answer",
        extra={"session_id": body.session_id, "top_k": body.top_k},
    )
    return StreamingResponse(
        service.stream_events(body),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
