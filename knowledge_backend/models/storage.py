"""
Chunk storage result models.

Return types and progress events of the cross-store storage coordinator.

Dependencies: pydantic
System role: Storage coordinator contracts
"""

from enum import Enum

from pydantic import BaseModel, Field

from knowledge_backend.models.chunk import EmbeddedChunk


class StoragePhase(str, Enum):
    """Store currently being written."""

    MILVUS = "milvus"
    NEO4J = "neo4j"


class StorageProgress(BaseModel):
    """Progress of one store phase."""

    phase: StoragePhase
    completed: int
    total: int


class StorageResult(BaseModel):
    """Outcome of storing one ingestion unit in both stores."""

    vector_inserted: int = Field(default=0, description="Records inserted into Milvus")
    graph_created: int = Field(default=0, description="Chunk nodes written to Neo4j")
    errors: list[str] = Field(default_factory=list, description="Per-store failure messages")
    duration_ms: int = Field(default=0, description="Wall-clock duration in milliseconds")

    @property
    def succeeded(self) -> bool:
        """True when both stores were written without error."""
        return not self.errors


class DeletionResult(BaseModel):
    """Outcome of deleting a document's chunks from both stores."""

    vector_deleted: int = Field(default=0, description="Records deleted from Milvus")
    graph_deleted: int = Field(default=0, description="Chunk nodes deleted from Neo4j")


class StoreChunksRequest(BaseModel):
    """Request body for storing an embedded document."""

    document_url: str = Field(min_length=1, description="Source document URL")
    chunks: list[EmbeddedChunk] = Field(description="Embedded chunks in document order")
