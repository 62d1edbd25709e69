"""
Chunk domain model.

Represents an embedded document chunk as handed over by the ingestion
pipeline. Chunks are immutable once created and shared by both writers.

Dependencies: pydantic
System role: Document chunk data structure
"""

from pydantic import ConfigDict, Field

from knowledge_backend.models.common import CamelModel


class ChunkMetadata(CamelModel):
    """Metadata attached to each document chunk."""

    model_config = ConfigDict(frozen=True)

    document_id: str = Field(description="Source document identifier")
    document_title: str = Field(default="", description="Source document title")
    document_url: str = Field(default="", description="Source document URL")
    section_header: str | None = Field(default=None, description="Enclosing section heading")
    chunk_index: int = Field(default=0, description="Position assigned by the chunker", ge=0)
    total_chunks: int = Field(default=0, description="Chunks produced for the document", ge=0)
    token_count: int = Field(default=0, description="Token count of the content", ge=0)
    has_code: bool = Field(default=False, description="Content contains a code block")
    has_formula: bool = Field(default=False, description="Content contains a formula")
    has_table: bool = Field(default=False, description="Content contains a table")


class EmbeddedChunk(CamelModel):
    """Document chunk with its embedding vector."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque chunk identifier")
    content: str = Field(description="Chunk text content")
    embedding: list[float] = Field(description="Embedding vector")
    metadata: ChunkMetadata = Field(description="Chunk metadata")
