"""
Server-sent event framing for answer streams.

Encodes stream chunks as `event:`/`data:` pairs terminated by a blank line,
and decodes them again. Decoding never raises: malformed input from the
network yields None.

Dependencies: pydantic, knowledge_backend.models
System role: Streaming wire protocol
"""

import json
import logging
from collections.abc import AsyncGenerator, AsyncIterable

from pydantic import ValidationError

from knowledge_backend.models.citation import Citation
from knowledge_backend.models.streaming import (
    TERMINAL_CHUNK_TYPES,
    CitationChunk,
    ConfidenceChunk,
    ConfidenceInfo,
    DoneChunk,
    ErrorChunk,
    MetadataChunk,
    ResponseMetadata,
    StreamChunk,
    TokenChunk,
    stream_chunk_adapter,
)

logger = logging.getLogger(__name__)

SSE_HEADERS: dict[str, str] = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

EVENT_SEPARATOR = "\n\n"


def token_chunk(content: str) -> TokenChunk:
    """Create a token stream chunk."""
    return TokenChunk(content=content)


def citation_chunk(citation: Citation) -> CitationChunk:
    """Create a citation stream chunk."""
    return CitationChunk(citation=citation)


def metadata_chunk(metadata: ResponseMetadata) -> MetadataChunk:
    """Create a metadata stream chunk."""
    return MetadataChunk(metadata=metadata)


def confidence_chunk(confidence: ConfidenceInfo) -> ConfidenceChunk:
    """
    Create a confidence stream chunk.

    Emitted early in the stream so clients can show evidence quality
    before the answer arrives.
    """
    return ConfidenceChunk(confidence=confidence)


def done_chunk() -> DoneChunk:
    """Create the terminal done chunk."""
    return DoneChunk()


def error_chunk(error: str) -> ErrorChunk:
    """Create a stream-terminating error chunk."""
    return ErrorChunk(error=error)


def format_event(chunk: StreamChunk) -> str:
    """
    Format a stream chunk as an SSE event.

    Args:
        chunk: Stream chunk of any kind

    Returns:
        str: "event: <type>\\ndata: <json>\\n\\n"
    """
    data = json.dumps(chunk.to_wire(), ensure_ascii=False, separators=(",", ":"))
    return f"event: {chunk.type}\ndata: {data}{EVENT_SEPARATOR}"


def parse_event(event_text: str) -> StreamChunk | None:
    """
    Parse a single SSE event back into a stream chunk.

    Multiple data lines are joined with a newline, as SSE requires.

    Args:
        event_text: Raw event text (one event, separator optional)

    Returns:
        StreamChunk | None: Parsed chunk, or None for malformed input
    """
    data_lines: list[str] = []
    # Only CR/LF end lines; U+2028, U+0085 and friends may appear inside JSON strings
    lines = event_text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    for line in lines:
        if not line.startswith("data:"):
            continue
        value = line[len("data:"):]
        if value.startswith(" "):
            value = value[1:]
        data_lines.append(value)

    if not data_lines:
        return None

    data = "\n".join(data_lines)
    if not data.strip():
        return None

    try:
        return stream_chunk_adapter.validate_json(data)
    except ValidationError as e:
        logger.debug(
            "Discarding malformed SSE payload",
            extra={"error_count": e.error_count(), "data_preview": data[:100]},
        )
        return None


async def iter_stream_chunks(
    fragments: AsyncIterable[str],
) -> AsyncGenerator[StreamChunk, None]:
    """
    Decode stream chunks incrementally from arriving text fragments.

    Fragments may split events anywhere. Decoding stops after a done or
    error chunk; a trailing event without separator is parsed at end of input.

    Args:
        fragments: Async iterable of decoded response text

    Yields:
        StreamChunk: Each well-formed chunk in arrival order
    """
    buffer = ""
    async for fragment in fragments:
        buffer = (buffer + fragment).replace("\r\n", "\n")

        while EVENT_SEPARATOR in buffer:
            event_text, buffer = buffer.split(EVENT_SEPARATOR, 1)
            if not event_text.strip():
                continue
            chunk = parse_event(event_text)
            if chunk is None:
                continue
            yield chunk
            if chunk.type in TERMINAL_CHUNK_TYPES:
                return

    if buffer.strip():
        chunk = parse_event(buffer)
        if chunk is not None:
            yield chunk
