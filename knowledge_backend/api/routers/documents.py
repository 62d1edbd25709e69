"""
Document chunk storage API endpoints.

Routes: POST /documents/chunks, DELETE /documents/chunks

Dependencies: knowledge_backend.core.chunk_storage, knowledge_backend.models
System role: Ingestion write HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from knowledge_backend.api.deps import get_chunk_storage
from knowledge_backend.core.chunk_storage import ChunkStorageCoordinator
from knowledge_backend.core.exceptions import ChunkStorageError
from knowledge_backend.models.storage import DeletionResult, StorageResult, StoreChunksRequest
from knowledge_backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/chunks", response_model=StorageResult)
async def store_document_chunks(
    body: StoreChunksRequest,
    storage: ChunkStorageCoordinator = Depends(get_chunk_storage),
) -> StorageResult:
    """
    Store a document's embedded chunks in the vector and graph stores.

    Per-store failures do not fail the request; they are listed in the
    result's errors so the caller can re-run ingestion.

    Args:
        body: Document URL and embedded chunks in document order
        storage: Injected storage coordinator

    Returns:
        StorageResult: Per-store counts, errors and duration
    """
    return await storage.store_chunks(body.chunks, body.document_url)


@router.delete("/chunks", response_model=DeletionResult)
async def delete_document_chunks(
    document_url: str = Query(..., min_length=1),
    document_id: str = Query(..., min_length=1),
    storage: ChunkStorageCoordinator = Depends(get_chunk_storage),
) -> DeletionResult:
    """
    Delete a document's chunks from both stores.

    Args:
        document_url: Source document URL (graph key)
        document_id: Document identifier (vector metadata key)
        storage: Injected storage coordinator

    Returns:
        DeletionResult: Per-store deleted counts

    Raises:
        HTTPException(502): Deletion failed in at least one store
    """
    try:
        return await storage.delete_chunks(document_url, document_id)
    except ChunkStorageError as e:
        log_exception_with_context(
            logger,
            f"{__name__}:delete_document_chunks - Deletion failed",
            e,
            document_url=document_url,
            document_id=document_id,
        )
        raise HTTPException(
            status_code=502,
            detail={"message": e.message, "errors": e.errors},
        )
