"""
Answer stream service for grounded, cited responses.

Turns a prepared answer (eligible citations, confidence, and a stream of
raw generated text) into the ordered stream chunk sequence delivered to
clients: confidence, then tokens interleaved with newly detected
citations, then metadata, then done. Any failure ends the stream with a
single error chunk.

Retrieval, ranking and the generation model sit behind AnswerSource.

Dependencies: knowledge_backend.core.streaming, knowledge_backend.models
System role: Serving-time streaming orchestration
"""

import asyncio
import logging
import math
import time
import uuid
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from knowledge_backend.configs.streaming import StreamingSettings
from knowledge_backend.core.exceptions import GenerationTimeoutError, KnowledgeBaseError
from knowledge_backend.core.streaming.citation_detector import CitationDetector
from knowledge_backend.core.streaming.response_builder import StreamResponseBuilder
from knowledge_backend.core.streaming.sse import (
    citation_chunk,
    confidence_chunk,
    done_chunk,
    error_chunk,
    format_event,
    metadata_chunk,
    token_chunk,
)
from knowledge_backend.models.citation import Citation
from knowledge_backend.models.query import QueryRequest
from knowledge_backend.models.streaming import ConfidenceInfo, ResponseMetadata, StreamChunk

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4
UNKNOWN_ERROR = "Unknown error"

CompletionCallback = Callable[[StreamResponseBuilder], Awaitable[None]]


@dataclass
class PreparedAnswer:
    """
    Everything needed to stream one answer.

    Attributes:
        citations: Citations eligible for this answer, in rank order
        confidence: Evidence quality of the retrieved context
        tokens: Raw text fragments from the generation model, in order
        vector_result_count: Results contributed by vector search
        graph_result_count: Results contributed by graph traversal
    """

    citations: list[Citation]
    confidence: ConfidenceInfo
    tokens: AsyncIterator[str]
    vector_result_count: int = 0
    graph_result_count: int = 0


class AnswerSource(Protocol):
    """Retrieval and generation collaborator."""

    async def prepare(self, request: QueryRequest) -> PreparedAnswer:
        """Retrieve context for the request and start generation."""
        ...


def estimate_tokens(text: str) -> int:
    """Rough token count used in response metadata (four characters per token)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _error_message(error: Exception) -> str:
    if isinstance(error, KnowledgeBaseError):
        return error.message
    return str(error) or UNKNOWN_ERROR


class AnswerStreamService:
    """
    Streams grounded answers as typed chunks.

    One detector and one builder are created per request, so concurrent
    streams share no mutable state.
    """

    def __init__(
        self,
        answer_source: AnswerSource,
        settings: StreamingSettings | None = None,
    ) -> None:
        """
        Initialize answer stream service.

        Args:
            answer_source: Retrieval and generation collaborator
            settings: Latency target, idle timeout and citation buffer bound
        """
        self.answer_source = answer_source
        self.settings = settings or StreamingSettings()

    async def stream_chunks(
        self,
        request: QueryRequest,
        on_complete: CompletionCallback | None = None,
    ) -> AsyncGenerator[StreamChunk, None]:
        """
        Stream the answer to a query as stream chunks.

        Args:
            request: Validated query request
            on_complete: Receives the accumulated response after metadata is built;
                its failures are logged and do not affect the stream

        Yields:
            StreamChunk: confidence, token/citation, metadata, done; or a
                single error chunk at the point of failure
        """
        started = time.perf_counter()
        query_id = str(uuid.uuid4())
        builder = StreamResponseBuilder()
        first_token_ms: int | None = None

        logger.info(
            f"{__name__}:stream_chunks - START query_id={query_id}",
            extra={"query_id": query_id, "session_id": request.session_id},
        )

        try:
            prepared = await self.answer_source.prepare(request)
            detector = CitationDetector(
                prepared.citations,
                max_buffer_chars=self.settings.citation_buffer_chars,
            )

            yield confidence_chunk(prepared.confidence)

            async for fragment in self._iter_fragments(prepared.tokens):
                if not fragment:
                    continue
                if first_token_ms is None:
                    first_token_ms = int((time.perf_counter() - started) * 1000)
                    if first_token_ms > self.settings.first_token_target_ms:
                        logger.warning(
                            f"{__name__}:stream_chunks - First token took {first_token_ms}ms "
                            f"(target {self.settings.first_token_target_ms}ms)",
                            extra={"query_id": query_id},
                        )

                builder.add_token(fragment)
                yield token_chunk(fragment)

                for citation in detector.process_token(fragment):
                    builder.add_citation(citation)
                    yield citation_chunk(citation)

            metadata = ResponseMetadata(
                query_id=query_id,
                total_tokens=estimate_tokens(builder.get_text()),
                citation_count=len(detector.emitted_citation_ids),
                confidence=prepared.confidence.level,
                vector_result_count=prepared.vector_result_count,
                graph_result_count=prepared.graph_result_count,
                latency_ms=int((time.perf_counter() - started) * 1000),
                first_token_latency_ms=first_token_ms,
                first_token_target_met=(
                    first_token_ms <= self.settings.first_token_target_ms
                    if first_token_ms is not None
                    else None
                ),
            )
            builder.set_metadata(metadata)
            yield metadata_chunk(metadata)

        except Exception as e:
            logger.error(
                f"{__name__}:stream_chunks - Stream failed: {type(e).__name__}: {e}",
                extra={"query_id": query_id},
            )
            yield error_chunk(_error_message(e))
            return

        if on_complete is not None:
            try:
                await on_complete(builder)
            except Exception as e:
                logger.error(
                    f"{__name__}:stream_chunks - Completion callback failed: {type(e).__name__}: {e}",
                    extra={"query_id": query_id},
                )

        yield done_chunk()
        logger.info(
            f"{__name__}:stream_chunks - END query_id={query_id}",
            extra={"query_id": query_id, "latency_ms": metadata.latency_ms},
        )

    async def stream_events(
        self,
        request: QueryRequest,
        on_complete: CompletionCallback | None = None,
    ) -> AsyncGenerator[str, None]:
        """
        Stream the answer to a query as wire-encoded server-sent events.

        Args:
            request: Validated query request
            on_complete: Passed through to stream_chunks

        Yields:
            str: One encoded event per stream chunk
        """
        async for chunk in self.stream_chunks(request, on_complete=on_complete):
            yield format_event(chunk)

    async def _iter_fragments(self, tokens: AsyncIterator[str]) -> AsyncGenerator[str, None]:
        timeout = self.settings.generation_idle_timeout_s
        iterator = aiter(tokens)
        try:
            while True:
                try:
                    fragment = await asyncio.wait_for(anext(iterator), timeout)
                except StopAsyncIteration:
                    return
                except asyncio.TimeoutError as e:
                    raise GenerationTimeoutError(timeout) from e
                yield fragment
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()
