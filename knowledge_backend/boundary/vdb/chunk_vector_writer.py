"""
Milvus chunk writer.

Batches embedded chunks into the Milvus chunk collection and deletes them
by source document. The pymilvus client is synchronous; calls run in a
worker thread so the event loop stays free.

Batches are committed independently: a failure leaves earlier batches
inserted. There is no local retry.

Dependencies: pymilvus, knowledge_backend.core, knowledge_backend.configs
System role: Vector store write path for ingestion
"""

import asyncio
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from pymilvus import MilvusClient, MilvusException

from knowledge_backend.configs.storage import ChunkStorageSettings
from knowledge_backend.core.chunk_identity import derive_chunk_key
from knowledge_backend.core.exceptions import VectorStoreError
from knowledge_backend.models.chunk import ChunkMetadata, EmbeddedChunk

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

TOPIC_TAG_MAX_LENGTH = 256
_WHITESPACE = re.compile(r"\s+")


def extract_topic_tag(metadata: ChunkMetadata) -> str:
    """
    Derive the topic tag stored alongside a vector.

    Args:
        metadata: Chunk metadata

    Returns:
        str: Lower-cased section header with whitespace runs replaced by "-",
            or "" when the chunk has no section header
    """
    if not metadata.section_header:
        return ""
    tag = _WHITESPACE.sub("-", metadata.section_header.lower())
    return tag[:TOPIC_TAG_MAX_LENGTH]


def parse_delete_count(response: Any) -> int:
    """
    Read the deleted-record count from a Milvus delete response.

    Depending on client version the count arrives as an int, a numeric
    string, or inside a mapping/object under delete_count or delete_cnt.

    Args:
        response: Raw delete response

    Returns:
        int: Number of deleted records (0 when the response carries none)

    Raises:
        VectorStoreError: When the count is present but not numeric
    """
    count = response
    if isinstance(response, dict):
        count = response.get("delete_count", response.get("delete_cnt"))
    elif response is not None and not isinstance(response, (int, str)):
        count = getattr(response, "delete_count", getattr(response, "delete_cnt", None))

    if count is None or count == "":
        return 0
    if isinstance(count, bool):
        raise VectorStoreError(
            message="Unexpected delete count in Milvus response",
            operation="delete",
            details={"delete_count": count},
        )
    if isinstance(count, int):
        return count
    try:
        return int(str(count).strip())
    except ValueError as e:
        raise VectorStoreError(
            message="Unexpected delete count in Milvus response",
            operation="delete",
            details={"delete_count": repr(count)},
        ) from e


def _quote_filter_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class MilvusChunkWriter:
    """
    Vector store writer for chunk embeddings.

    Each record carries the derived chunk key (primary key), the vector,
    the raw text, the chunk metadata as JSON and a topic tag.
    """

    def __init__(
        self,
        client: MilvusClient,
        settings: ChunkStorageSettings | None = None,
    ) -> None:
        """
        Initialize writer.

        Args:
            client: Connected pymilvus client
            settings: Batch size and collection name (defaults apply when omitted)
        """
        self.client = client
        self.settings = settings or ChunkStorageSettings()

    @property
    def collection_name(self) -> str:
        """Name of the target Milvus collection."""
        return self.settings.collection_name

    def build_record(self, chunk: EmbeddedChunk) -> dict[str, Any]:
        """
        Project a chunk into the collection's row shape.

        Args:
            chunk: Embedded chunk

        Returns:
            dict: Row for MilvusClient.insert
        """
        return {
            "chunk_id": derive_chunk_key(chunk.id),
            "vector": list(chunk.embedding),
            "content_text": chunk.content,
            "metadata": chunk.metadata.model_dump(mode="json", by_alias=True),
            "topic_tag": extract_topic_tag(chunk.metadata),
        }

    async def insert_chunks(
        self,
        chunks: Sequence[EmbeddedChunk],
        on_progress: ProgressCallback | None = None,
    ) -> int:
        """
        Insert embedded chunks in batches, then flush once.

        Args:
            chunks: Embedded chunks in document order
            on_progress: Called with (inserted_so_far, total) after each batch

        Returns:
            int: Number of chunks inserted

        Raises:
            VectorStoreError: If an insert or the flush fails
        """
        if not chunks:
            return 0

        total = len(chunks)
        batch_size = self.settings.vector_batch_size
        inserted = 0

        for start in range(0, total, batch_size):
            batch = chunks[start:start + batch_size]
            records = [self.build_record(chunk) for chunk in batch]

            try:
                await asyncio.to_thread(
                    self.client.insert,
                    collection_name=self.collection_name,
                    data=records,
                )
            except MilvusException as e:
                raise VectorStoreError(
                    message="Failed to insert chunk batch into Milvus",
                    operation="insert",
                    details={
                        "error": str(e),
                        "collection": self.collection_name,
                        "batch_start": start,
                        "batch_size": len(batch),
                        "inserted_before_failure": inserted,
                    },
                ) from e

            inserted += len(batch)
            logger.debug(
                f"{__name__}:insert_chunks - Inserted chunk batch",
                extra={"collection": self.collection_name, "inserted": inserted, "total": total},
            )
            if on_progress:
                on_progress(inserted, total)

        try:
            await asyncio.to_thread(self.client.flush, collection_name=self.collection_name)
        except MilvusException as e:
            raise VectorStoreError(
                message="Failed to flush Milvus collection",
                operation="flush",
                details={"error": str(e), "collection": self.collection_name},
            ) from e

        logger.info(
            f"{__name__}:insert_chunks - Inserted {inserted} chunks into Milvus",
            extra={"collection": self.collection_name, "chunk_count": inserted},
        )
        return inserted

    def document_filter(self, document_id: str) -> str:
        """Build the filter expression selecting a document's chunks."""
        return f'metadata["documentId"] == {_quote_filter_value(document_id)}'

    async def delete_by_document_id(self, document_id: str) -> int:
        """
        Delete every chunk of a document.

        Args:
            document_id: Document identifier stored in chunk metadata

        Returns:
            int: Number of deleted records

        Raises:
            VectorStoreError: If the delete fails or returns an unreadable count
        """
        expression = self.document_filter(document_id)
        try:
            response = await asyncio.to_thread(
                self.client.delete,
                collection_name=self.collection_name,
                filter=expression,
            )
        except MilvusException as e:
            raise VectorStoreError(
                message="Failed to delete document chunks from Milvus",
                operation="delete",
                details={"error": str(e), "document_id": document_id},
            ) from e

        deleted = parse_delete_count(response)
        logger.info(
            f"{__name__}:delete_by_document_id - Deleted {deleted} chunks from Milvus",
            extra={"document_id": document_id, "deleted": deleted},
        )
        return deleted
