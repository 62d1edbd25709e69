"""
Chunk storage configuration settings.

Batch sizes and collection naming shared by the Milvus and Neo4j
chunk writers and the storage coordinator.

Dependencies: pydantic, pydantic_settings
System role: Ingestion write-path configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COLLECTION_NAME = "knowledge_chunks"


class ChunkStorageSettings(BaseSettings):
    """Options for persisting embedded chunks across both stores."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUNK_STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    collection_name: str = Field(
        default=DEFAULT_COLLECTION_NAME,
        description="Milvus collection holding chunk vectors",
    )
    vector_batch_size: int = Field(
        default=100,
        description="Records per Milvus insert call",
        ge=1,
    )
    graph_batch_size: int = Field(
        default=50,
        description="Rows per Neo4j UNWIND statement",
        ge=1,
    )
    preview_chars: int = Field(
        default=200,
        description="Characters of chunk content stored as graph preview",
        ge=0,
    )
    concurrent_writes: bool = Field(
        default=True,
        description="Write to Milvus and Neo4j concurrently instead of one after the other",
    )
