"""
Milvus collection schema for knowledge chunks.

Creates the chunk collection when missing, ensures the HNSW vector index,
and loads the collection for search. Safe to run on every startup.

Dependencies: pymilvus, knowledge_backend.configs
System role: Vector store schema bootstrap
"""

import asyncio
import logging

from pymilvus import CollectionSchema, DataType, MilvusClient, MilvusException

from knowledge_backend.boundary.vdb.chunk_vector_writer import TOPIC_TAG_MAX_LENGTH
from knowledge_backend.configs.storage import ChunkStorageSettings
from knowledge_backend.configs.vector_store import MilvusSettings
from knowledge_backend.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)

CONTENT_TEXT_MAX_LENGTH = 65535


def build_chunk_schema(client: MilvusClient, vector_dim: int) -> CollectionSchema:
    """
    Build the chunk collection schema.

    Args:
        client: pymilvus client
        vector_dim: Embedding dimension

    Returns:
        CollectionSchema: chunk_id (INT64 primary key, caller-assigned), vector,
            content_text, metadata (JSON) and topic_tag fields
    """
    schema = client.create_schema(auto_id=False, enable_dynamic_field=False)
    schema.add_field(field_name="chunk_id", datatype=DataType.INT64, is_primary=True)
    schema.add_field(field_name="vector", datatype=DataType.FLOAT_VECTOR, dim=vector_dim)
    schema.add_field(
        field_name="content_text",
        datatype=DataType.VARCHAR,
        max_length=CONTENT_TEXT_MAX_LENGTH,
    )
    schema.add_field(field_name="metadata", datatype=DataType.JSON)
    schema.add_field(
        field_name="topic_tag",
        datatype=DataType.VARCHAR,
        max_length=TOPIC_TAG_MAX_LENGTH,
    )
    return schema


def _build_index_params(client: MilvusClient, milvus_settings: MilvusSettings):
    index_params = client.prepare_index_params()
    index_params.add_index(
        field_name="vector",
        index_name=milvus_settings.index_name,
        index_type="HNSW",
        metric_type=milvus_settings.metric_type,
        params={
            "M": milvus_settings.hnsw_m,
            "efConstruction": milvus_settings.hnsw_ef_construction,
        },
    )
    return index_params


def _init_collection_sync(
    client: MilvusClient,
    milvus_settings: MilvusSettings,
    collection_name: str,
) -> bool:
    created = False
    if not client.has_collection(collection_name=collection_name):
        client.create_collection(
            collection_name=collection_name,
            schema=build_chunk_schema(client, milvus_settings.vector_dim),
            index_params=_build_index_params(client, milvus_settings),
        )
        created = True
    elif milvus_settings.index_name not in client.list_indexes(collection_name=collection_name):
        client.create_index(
            collection_name=collection_name,
            index_params=_build_index_params(client, milvus_settings),
        )

    client.load_collection(collection_name=collection_name)
    return created


async def init_chunk_collection(
    client: MilvusClient,
    milvus_settings: MilvusSettings | None = None,
    storage_settings: ChunkStorageSettings | None = None,
) -> bool:
    """
    Create, index and load the chunk collection.

    Args:
        client: pymilvus client
        milvus_settings: Vector dimension and index parameters
        storage_settings: Collection name

    Returns:
        bool: True if the collection was created, False if it already existed

    Raises:
        VectorStoreError: If any schema operation fails
    """
    milvus_settings = milvus_settings or MilvusSettings()
    collection_name = (storage_settings or ChunkStorageSettings()).collection_name

    try:
        created = await asyncio.to_thread(
            _init_collection_sync, client, milvus_settings, collection_name
        )
    except MilvusException as e:
        raise VectorStoreError(
            message="Failed to initialize Milvus chunk collection",
            operation="init_schema",
            details={"error": str(e), "collection": collection_name},
        ) from e

    logger.info(
        f"{__name__}:init_chunk_collection - Collection {collection_name} ready",
        extra={"collection": collection_name, "created": created},
    )
    return created
