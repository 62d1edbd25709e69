"""
Answer streaming protocol.

Stream chunk constructors, SSE framing, citation detection, and response
accumulation for grounded answer delivery.
"""

from knowledge_backend.core.streaming.citation_detector import CitationDetector
from knowledge_backend.core.streaming.response_builder import StreamResponseBuilder
from knowledge_backend.core.streaming.sse import (
    SSE_HEADERS,
    citation_chunk,
    confidence_chunk,
    done_chunk,
    error_chunk,
    format_event,
    iter_stream_chunks,
    metadata_chunk,
    parse_event,
    token_chunk,
)

__all__ = [
    "CitationDetector",
    "SSE_HEADERS",
    "StreamResponseBuilder",
    "citation_chunk",
    "confidence_chunk",
    "done_chunk",
    "error_chunk",
    "format_event",
    "iter_stream_chunks",
    "metadata_chunk",
    "parse_event",
    "token_chunk",
]
