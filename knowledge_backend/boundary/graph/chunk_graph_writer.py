"""
Neo4j chunk writer.

Maintains the knowledge graph side of chunk storage: one Document node per
source URL, one Chunk node per chunk (keyed by the same derived key used as
the Milvus primary key), FROM_DOCUMENT and NEXT_CHUNK relationships, and
links from chunks to Concept nodes.

Writing a document happens in two phases: chunk nodes are upserted first,
then consecutive chunks are linked. Linking matches nodes created in the
first phase, so the phases must run in that order.

Dependencies: neo4j (async driver), knowledge_backend.core, knowledge_backend.configs
System role: Graph store write path for ingestion
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from neo4j import AsyncDriver, AsyncSession
from neo4j.exceptions import DriverError, Neo4jError

from knowledge_backend.configs.storage import ChunkStorageSettings
from knowledge_backend.core.chunk_identity import derive_chunk_key, derive_content_hash
from knowledge_backend.core.exceptions import GraphStoreError
from knowledge_backend.models.chunk import EmbeddedChunk

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

UNTITLED_DOCUMENT = "Untitled"

UPSERT_DOCUMENT_QUERY = """
MERGE (d:Document {url: $url})
SET d.title = $title,
    d.chunkCount = $chunkCount,
    d.status = 'active',
    d.updatedAt = datetime()
"""

UPSERT_CHUNKS_QUERY = """
UNWIND $chunks AS chunk
MERGE (c:Chunk {chunk_id: chunk.chunkId})
SET c.sourceId = chunk.sourceId,
    c.hash = chunk.hash,
    c.preview = chunk.preview,
    c.tokenCount = chunk.tokenCount,
    c.hasCode = chunk.hasCode,
    c.hasFormula = chunk.hasFormula,
    c.hasTable = chunk.hasTable,
    c.chunkIndex = chunk.chunkIndex
WITH c, chunk
MATCH (d:Document {url: $documentUrl})
MERGE (c)-[:FROM_DOCUMENT]->(d)
"""

LINK_SEQUENTIAL_QUERY = """
UNWIND $pairs AS pair
MATCH (c1:Chunk {chunk_id: pair.from})
MATCH (c2:Chunk {chunk_id: pair.to})
MERGE (c1)-[:NEXT_CHUNK]->(c2)
"""

LINK_CONCEPTS_QUERY = """
MATCH (c:Chunk {chunk_id: $chunkId})
UNWIND $concepts AS conceptName
MERGE (concept:Concept {name: conceptName})
MERGE (c)-[:DISCUSSES]->(concept)
"""

LINK_CODE_EXAMPLE_QUERY = """
MATCH (c:Chunk {chunk_id: $chunkId})
MERGE (concept:Concept {name: $concept})
MERGE (c)-[:CODE_EXAMPLE_FOR]->(concept)
"""

LINK_FORMULA_QUERY = """
MATCH (c:Chunk {chunk_id: $chunkId})
MERGE (concept:Concept {name: $concept})
MERGE (c)-[:FORMULA_FOR]->(concept)
"""

DELETE_DOCUMENT_CHUNKS_QUERY = """
MATCH (c:Chunk)-[:FROM_DOCUMENT]->(d:Document {url: $documentUrl})
DETACH DELETE c
RETURN count(c) AS deleted
"""


class Neo4jChunkWriter:
    """Graph store writer for chunk nodes and their relationships."""

    def __init__(
        self,
        driver: AsyncDriver,
        settings: ChunkStorageSettings | None = None,
        database: str | None = None,
    ) -> None:
        """
        Initialize writer.

        Args:
            driver: Neo4j async driver
            settings: Batch size and preview length (defaults apply when omitted)
            database: Target database, server default when None
        """
        self.driver = driver
        self.settings = settings or ChunkStorageSettings()
        self.database = database

    def _session(self) -> AsyncSession:
        return self.driver.session(database=self.database)

    def build_chunk_row(self, chunk: EmbeddedChunk, chunk_index: int) -> dict[str, Any]:
        """
        Project a chunk into the parameters of one UNWIND row.

        Args:
            chunk: Embedded chunk
            chunk_index: Position of the chunk in the delivered sequence

        Returns:
            dict: Row consumed by the chunk upsert statement
        """
        return {
            "chunkId": derive_chunk_key(chunk.id),
            "sourceId": chunk.id,
            "hash": derive_content_hash(chunk.content),
            "preview": chunk.content[: self.settings.preview_chars],
            "tokenCount": chunk.metadata.token_count,
            "hasCode": chunk.metadata.has_code,
            "hasFormula": chunk.metadata.has_formula,
            "hasTable": chunk.metadata.has_table,
            "chunkIndex": chunk_index,
        }

    async def create_chunk_nodes(
        self,
        chunks: Sequence[EmbeddedChunk],
        document_url: str,
        on_progress: ProgressCallback | None = None,
    ) -> int:
        """
        Upsert a document's chunk nodes, then link consecutive chunks.

        Both phases share one session and run strictly in order.

        Args:
            chunks: Embedded chunks in document order
            document_url: Source document URL
            on_progress: Called with (upserted_so_far, total) after each batch

        Returns:
            int: Number of chunk nodes upserted

        Raises:
            GraphStoreError: If a statement fails
        """
        if not chunks:
            return 0

        async with self._session() as session:
            created = await self._upsert_chunk_nodes(session, chunks, document_url, on_progress)
            await self._link_sequential_chunks(session, chunks)

        logger.info(
            f"{__name__}:create_chunk_nodes - Created {created} chunk nodes",
            extra={"document_url": document_url, "chunk_count": created},
        )
        return created

    async def upsert_chunk_nodes(
        self,
        chunks: Sequence[EmbeddedChunk],
        document_url: str,
        on_progress: ProgressCallback | None = None,
    ) -> int:
        """
        Upsert the Document node and the chunk nodes attached to it.

        Args:
            chunks: Embedded chunks in document order
            document_url: Source document URL
            on_progress: Called with (upserted_so_far, total) after each batch

        Returns:
            int: Number of chunk nodes upserted

        Raises:
            GraphStoreError: If a statement fails
        """
        if not chunks:
            return 0
        async with self._session() as session:
            return await self._upsert_chunk_nodes(session, chunks, document_url, on_progress)

    async def link_sequential_chunks(self, chunks: Sequence[EmbeddedChunk]) -> int:
        """
        Create NEXT_CHUNK relationships between consecutive chunks.

        Chunk nodes must already exist.

        Args:
            chunks: Embedded chunks in document order

        Returns:
            int: Number of consecutive pairs linked

        Raises:
            GraphStoreError: If a statement fails
        """
        if len(chunks) <= 1:
            return 0
        async with self._session() as session:
            return await self._link_sequential_chunks(session, chunks)

    async def _upsert_chunk_nodes(
        self,
        session: AsyncSession,
        chunks: Sequence[EmbeddedChunk],
        document_url: str,
        on_progress: ProgressCallback | None,
    ) -> int:
        total = len(chunks)
        title = chunks[0].metadata.document_title or UNTITLED_DOCUMENT

        await self._run(
            session,
            UPSERT_DOCUMENT_QUERY,
            {"url": document_url, "title": title, "chunkCount": total},
            operation="upsert_document",
        )

        batch_size = self.settings.graph_batch_size
        upserted = 0
        for start in range(0, total, batch_size):
            rows = [
                self.build_chunk_row(chunk, start + offset)
                for offset, chunk in enumerate(chunks[start:start + batch_size])
            ]
            await self._run(
                session,
                UPSERT_CHUNKS_QUERY,
                {"chunks": rows, "documentUrl": document_url},
                operation="upsert_chunks",
            )
            upserted += len(rows)
            if on_progress:
                on_progress(upserted, total)

        return upserted

    async def _link_sequential_chunks(
        self,
        session: AsyncSession,
        chunks: Sequence[EmbeddedChunk],
    ) -> int:
        keys = [derive_chunk_key(chunk.id) for chunk in chunks]
        pairs = [{"from": keys[i], "to": keys[i + 1]} for i in range(len(keys) - 1)]
        if not pairs:
            return 0

        batch_size = self.settings.graph_batch_size
        for start in range(0, len(pairs), batch_size):
            await self._run(
                session,
                LINK_SEQUENTIAL_QUERY,
                {"pairs": pairs[start:start + batch_size]},
                operation="link_sequential",
            )
        return len(pairs)

    async def link_chunk_to_concepts(self, chunk_id: str, concepts: Sequence[str]) -> None:
        """
        Link a chunk to the concepts it discusses.

        Args:
            chunk_id: Chunk identifier
            concepts: Concept names; an empty list is a no-op
        """
        if not concepts:
            return
        async with self._session() as session:
            await self._run(
                session,
                LINK_CONCEPTS_QUERY,
                {"chunkId": derive_chunk_key(chunk_id), "concepts": list(concepts)},
                operation="link_concepts",
            )

    async def link_code_example(self, chunk_id: str, concept: str) -> None:
        """Mark a chunk as a code example for a concept."""
        async with self._session() as session:
            await self._run(
                session,
                LINK_CODE_EXAMPLE_QUERY,
                {"chunkId": derive_chunk_key(chunk_id), "concept": concept},
                operation="link_code_example",
            )

    async def link_formula(self, chunk_id: str, concept: str) -> None:
        """Mark a chunk as a formula for a concept."""
        async with self._session() as session:
            await self._run(
                session,
                LINK_FORMULA_QUERY,
                {"chunkId": derive_chunk_key(chunk_id), "concept": concept},
                operation="link_formula",
            )

    async def delete_by_document_url(self, document_url: str) -> int:
        """
        Delete every chunk node attached to a document.

        Args:
            document_url: Source document URL

        Returns:
            int: Number of chunk nodes deleted (0 when none matched)

        Raises:
            GraphStoreError: If the statement fails
        """
        async with self._session() as session:
            try:
                result = await session.run(
                    DELETE_DOCUMENT_CHUNKS_QUERY, {"documentUrl": document_url}
                )
                record = await result.single()
            except (Neo4jError, DriverError) as e:
                raise GraphStoreError(
                    message="Failed to delete document chunks from Neo4j",
                    operation="delete",
                    details={"error": str(e), "document_url": document_url},
                ) from e

        deleted = int(record["deleted"]) if record is not None else 0
        logger.info(
            f"{__name__}:delete_by_document_url - Deleted {deleted} chunk nodes",
            extra={"document_url": document_url, "deleted": deleted},
        )
        return deleted

    async def _run(
        self,
        session: AsyncSession,
        query: str,
        parameters: dict[str, Any],
        operation: str,
    ) -> None:
        try:
            result = await session.run(query, parameters)
            await result.consume()
        except (Neo4jError, DriverError) as e:
            raise GraphStoreError(
                message="Neo4j statement failed",
                operation=operation,
                details={"error": str(e)},
            ) from e
