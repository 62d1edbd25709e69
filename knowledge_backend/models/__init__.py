"""Domain models and API schemas."""

from knowledge_backend.models.chunk import ChunkMetadata, EmbeddedChunk
from knowledge_backend.models.citation import Citation
from knowledge_backend.models.query import QueryRequest
from knowledge_backend.models.storage import (
    DeletionResult,
    StoragePhase,
    StorageProgress,
    StorageResult,
    StoreChunksRequest,
)
from knowledge_backend.models.streaming import (
    CitationChunk,
    ConfidenceChunk,
    ConfidenceInfo,
    DoneChunk,
    ErrorChunk,
    MetadataChunk,
    ResponseMetadata,
    StreamChunk,
    StreamChunkType,
    TokenChunk,
)

__all__ = [
    "ChunkMetadata",
    "Citation",
    "CitationChunk",
    "ConfidenceChunk",
    "ConfidenceInfo",
    "DeletionResult",
    "DoneChunk",
    "EmbeddedChunk",
    "ErrorChunk",
    "MetadataChunk",
    "QueryRequest",
    "ResponseMetadata",
    "StoragePhase",
    "StorageProgress",
    "StorageResult",
    "StoreChunksRequest",
    "StreamChunk",
    "StreamChunkType",
    "TokenChunk",
]
