"""
Cross-store chunk storage coordinator.

Drives the Milvus and Neo4j writers for one document. Storage is
best-effort rather than transactional: each store has its own failure
boundary, and the result reports per-store errors so callers can re-run
a failed ingestion. Deletion runs both stores to completion and raises
one ChunkStorageError that aggregates every failure.

Dependencies: knowledge_backend.boundary, knowledge_backend.configs
System role: Ingestion write orchestration
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from neo4j import AsyncDriver
from pymilvus import MilvusClient

from knowledge_backend.boundary.graph.chunk_graph_writer import Neo4jChunkWriter
from knowledge_backend.boundary.vdb.chunk_vector_writer import MilvusChunkWriter
from knowledge_backend.configs.storage import ChunkStorageSettings
from knowledge_backend.core.exceptions import ChunkStorageError
from knowledge_backend.models.chunk import EmbeddedChunk
from knowledge_backend.models.storage import (
    DeletionResult,
    StoragePhase,
    StorageProgress,
    StorageResult,
)
from knowledge_backend.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

StorageProgressCallback = Callable[[StorageProgress], None]


class ChunkStorageCoordinator:
    """
    Coordinates chunk persistence across the vector and graph stores.

    Writers are injected so either store can be replaced in tests.
    """

    def __init__(
        self,
        vector_writer: MilvusChunkWriter,
        graph_writer: Neo4jChunkWriter,
        settings: ChunkStorageSettings | None = None,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            vector_writer: Milvus chunk writer
            graph_writer: Neo4j chunk writer
            settings: Storage options (concurrency of the two writes)
        """
        self._vector_writer = vector_writer
        self._graph_writer = graph_writer
        self.settings = settings or ChunkStorageSettings()

    @property
    def vector_writer(self) -> MilvusChunkWriter:
        return self._vector_writer

    @property
    def graph_writer(self) -> Neo4jChunkWriter:
        return self._graph_writer

    async def store_chunks(
        self,
        chunks: Sequence[EmbeddedChunk],
        document_url: str,
        on_progress: StorageProgressCallback | None = None,
    ) -> StorageResult:
        """
        Store embedded chunks in both stores.

        A failure in one store never prevents or cancels the write to the
        other. Store failures are reported in the result, not raised.

        Args:
            chunks: Embedded chunks in document order
            document_url: Source document URL
            on_progress: Receives StorageProgress for each completed batch

        Returns:
            StorageResult: Per-store counts, error messages and duration
        """
        started = time.perf_counter()

        def report(phase: StoragePhase) -> Callable[[int, int], None] | None:
            if on_progress is None:
                return None
            return lambda completed, total: on_progress(
                StorageProgress(phase=phase, completed=completed, total=total)
            )

        def vector_step() -> Awaitable[tuple[int, str | None]]:
            return self._guard(
                self._vector_writer.insert_chunks(chunks, on_progress=report(StoragePhase.MILVUS)),
                "Milvus insertion failed",
            )

        def graph_step() -> Awaitable[tuple[int, str | None]]:
            return self._guard(
                self._graph_writer.create_chunk_nodes(
                    chunks, document_url, on_progress=report(StoragePhase.NEO4J)
                ),
                "Neo4j creation failed",
            )

        if self.settings.concurrent_writes:
            (vector_inserted, vector_error), (graph_created, graph_error) = await asyncio.gather(
                vector_step(), graph_step()
            )
        else:
            vector_inserted, vector_error = await vector_step()
            graph_created, graph_error = await graph_step()

        errors = [error for error in (vector_error, graph_error) if error]
        result = StorageResult(
            vector_inserted=vector_inserted,
            graph_created=graph_created,
            errors=errors,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )

        log_with_context(
            logger,
            logging.WARNING if errors else logging.INFO,
            f"{__name__}:store_chunks - Stored {len(chunks)} chunks with {len(errors)} store failure(s)",
            document_url=document_url,
            vector_inserted=vector_inserted,
            graph_created=graph_created,
            duration_ms=result.duration_ms,
            errors="; ".join(errors),
        )
        return result

    async def _guard(self, step: Awaitable[int], label: str) -> tuple[int, str | None]:
        try:
            return await step, None
        except Exception as e:
            logger.error(
                f"{__name__}:store_chunks - {label}",
                extra={"error_type": type(e).__name__, "error_msg": str(e)},
            )
            return 0, f"{label}: {e}"

    async def delete_chunks(self, document_url: str, document_id: str) -> DeletionResult:
        """
        Delete a document's chunks from both stores.

        Both deletions run concurrently and are awaited to completion.

        Args:
            document_url: Source document URL (graph key)
            document_id: Document identifier (vector metadata key)

        Returns:
            DeletionResult: Per-store deleted counts

        Raises:
            ChunkStorageError: If either deletion failed; the message is the
                first failure, errors lists all of them
        """
        vector_outcome, graph_outcome = await asyncio.gather(
            self._vector_writer.delete_by_document_id(document_id),
            self._graph_writer.delete_by_document_url(document_url),
            return_exceptions=True,
        )

        failures: list[tuple[str, BaseException]] = []
        for label, outcome in (
            ("Milvus deletion failed", vector_outcome),
            ("Neo4j deletion failed", graph_outcome),
        ):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                failures.append((label, outcome))

        if failures:
            errors = [f"{label}: {exc}" for label, exc in failures]
            logger.error(
                f"{__name__}:delete_chunks - Deletion failed",
                extra={"document_url": document_url, "document_id": document_id, "errors": errors},
            )
            raise ChunkStorageError(
                message=errors[0],
                errors=errors,
                details={"document_url": document_url, "document_id": document_id},
            ) from failures[0][1]

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:delete_chunks - Deleted document chunks",
            document_url=document_url,
            document_id=document_id,
            vector_deleted=vector_outcome,
            graph_deleted=graph_outcome,
        )
        return DeletionResult(vector_deleted=vector_outcome, graph_deleted=graph_outcome)


def create_chunk_storage(
    milvus_client: MilvusClient,
    neo4j_driver: AsyncDriver,
    settings: ChunkStorageSettings | None = None,
    database: str | None = None,
) -> ChunkStorageCoordinator:
    """
    Build a coordinator over connected store clients.

    Args:
        milvus_client: Connected pymilvus client
        neo4j_driver: Connected Neo4j async driver
        settings: Storage options shared by both writers
        database: Neo4j database, server default when None

    Returns:
        ChunkStorageCoordinator: Ready-to-use coordinator
    """
    settings = settings or ChunkStorageSettings()
    return ChunkStorageCoordinator(
        vector_writer=MilvusChunkWriter(milvus_client, settings),
        graph_writer=Neo4jChunkWriter(neo4j_driver, settings, database=database),
        settings=settings,
    )
