"""
Vector database boundary layer.

Milvus client lifecycle, chunk collection schema, and the chunk writer.

Dependencies: pymilvus
System role: Vector store adapter for chunk persistence
"""

from knowledge_backend.boundary.vdb.chunk_vector_writer import (
    MilvusChunkWriter,
    extract_topic_tag,
    parse_delete_count,
)
from knowledge_backend.boundary.vdb.milvus_client import (
    check_milvus_health,
    close_milvus_client,
    create_milvus_client,
)
from knowledge_backend.boundary.vdb.milvus_schema import build_chunk_schema, init_chunk_collection

__all__ = [
    "MilvusChunkWriter",
    "build_chunk_schema",
    "check_milvus_health",
    "close_milvus_client",
    "create_milvus_client",
    "extract_topic_tag",
    "init_chunk_collection",
    "parse_delete_count",
]
