"""
Streaming event schemas for server-sent answer delivery.

Defines the closed set of stream chunk kinds (token, citation, metadata,
confidence, done, error) and the payloads they carry.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from knowledge_backend.models.citation import Citation
from knowledge_backend.models.common import CamelModel


class StreamChunkType(str, Enum):
    """Server-to-client stream chunk types."""

    TOKEN = "token"
    CITATION = "citation"
    METADATA = "metadata"
    CONFIDENCE = "confidence"
    DONE = "done"
    ERROR = "error"


ConfidenceLevel = Literal["high", "medium", "low", "insufficient"]


class ConfidenceInfo(CamelModel):
    """Evidence quality summary sent before the answer text."""

    level: ConfidenceLevel
    has_insufficient_evidence: bool = False
    top_score: float = 0.0


class ResponseMetadata(CamelModel):
    """
    Metadata about a completed response.

    Attributes:
        query_id: Identifier of the answered query
        total_tokens: Estimated tokens in the generated answer
        citation_count: Distinct citations emitted
        confidence: Confidence level of the evidence
        vector_result_count: Results contributed by vector search
        graph_result_count: Results contributed by graph traversal
        latency_ms: Total response latency
        first_token_latency_ms: Latency until the first token, when one was produced
        first_token_target_met: Whether the first token met the latency target
    """

    query_id: str
    total_tokens: int
    citation_count: int
    confidence: ConfidenceLevel
    vector_result_count: int
    graph_result_count: int
    latency_ms: int
    first_token_latency_ms: int | None = None
    first_token_target_met: bool | None = None


class TokenChunk(CamelModel):
    """A fragment of generated answer text."""

    type: Literal["token"] = "token"
    content: str


class CitationChunk(CamelModel):
    """A citation detected in the answer text."""

    type: Literal["citation"] = "citation"
    citation: Citation


class MetadataChunk(CamelModel):
    """Final response metadata."""

    type: Literal["metadata"] = "metadata"
    metadata: ResponseMetadata


class ConfidenceChunk(CamelModel):
    """Evidence quality, emitted ahead of the first token."""

    type: Literal["confidence"] = "confidence"
    confidence: ConfidenceInfo


class DoneChunk(CamelModel):
    """Terminal chunk of a well-formed stream."""

    type: Literal["done"] = "done"


class ErrorChunk(CamelModel):
    """Stream-terminating failure with a human-readable message."""

    type: Literal["error"] = "error"
    error: str


StreamChunk = Annotated[
    Union[TokenChunk, CitationChunk, MetadataChunk, ConfidenceChunk, DoneChunk, ErrorChunk],
    Field(discriminator="type"),
]

stream_chunk_adapter: TypeAdapter[StreamChunk] = TypeAdapter(StreamChunk)

TERMINAL_CHUNK_TYPES = frozenset({StreamChunkType.DONE.value, StreamChunkType.ERROR.value})
