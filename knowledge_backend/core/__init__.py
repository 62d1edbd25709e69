"""
Core domain logic.

Chunk identity derivation, the exception hierarchy, connection retry,
the cross-store storage coordinator (knowledge_backend.core.chunk_storage)
and the answer streaming protocol (knowledge_backend.core.streaming).
"""

from knowledge_backend.core.chunk_identity import derive_chunk_key, derive_content_hash
from knowledge_backend.core.exceptions import (
    AnswerSourceError,
    ChunkStorageError,
    GenerationTimeoutError,
    GraphStoreError,
    KnowledgeBaseError,
    StoreConnectionError,
    VectorStoreError,
)

__all__ = [
    "AnswerSourceError",
    "ChunkStorageError",
    "GenerationTimeoutError",
    "GraphStoreError",
    "KnowledgeBaseError",
    "StoreConnectionError",
    "VectorStoreError",
    "derive_chunk_key",
    "derive_content_hash",
]
