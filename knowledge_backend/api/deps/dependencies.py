"""
Dependency injection container.

Lazily connects the Milvus client and Neo4j driver, builds the storage
coordinator over them, and exposes FastAPI dependency functions.

Dependencies: fastapi, knowledge_backend.configs, knowledge_backend.boundary, knowledge_backend.core
System role: DI container for service injection
"""

import asyncio
import logging

from fastapi import Depends, HTTPException, Request
from neo4j import AsyncDriver
from pymilvus import MilvusClient

from knowledge_backend.application.services.answer_stream_service import AnswerStreamService
from knowledge_backend.boundary.graph.neo4j_driver import close_neo4j_driver, create_neo4j_driver
from knowledge_backend.boundary.vdb.milvus_client import close_milvus_client, create_milvus_client
from knowledge_backend.configs import Settings, get_settings
from knowledge_backend.core.chunk_storage import ChunkStorageCoordinator, create_chunk_storage

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached store clients and services."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._milvus_client: MilvusClient | None = None
        self._neo4j_driver: AsyncDriver | None = None
        self._chunk_storage: ChunkStorageCoordinator | None = None
        self._lock = asyncio.Lock()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    async def milvus_client(self) -> MilvusClient:
        """Get cached Milvus client, connecting on first use."""
        async with self._lock:
            if self._milvus_client is None:
                self._milvus_client = await create_milvus_client(
                    self.settings.milvus, self.settings.retry
                )
        return self._milvus_client

    async def neo4j_driver(self) -> AsyncDriver:
        """Get cached Neo4j driver, connecting on first use."""
        async with self._lock:
            if self._neo4j_driver is None:
                self._neo4j_driver = await create_neo4j_driver(
                    self.settings.neo4j, self.settings.retry
                )
        return self._neo4j_driver

    async def chunk_storage(self) -> ChunkStorageCoordinator:
        """Get cached storage coordinator."""
        if self._chunk_storage is None:
            milvus_client = await self.milvus_client()
            neo4j_driver = await self.neo4j_driver()
            self._chunk_storage = create_chunk_storage(
                milvus_client,
                neo4j_driver,
                self.settings.storage,
                database=self.settings.neo4j.database,
            )
        return self._chunk_storage

    async def close(self) -> None:
        """Close store connections and clear all cached instances."""
        await close_milvus_client(self._milvus_client)
        await close_neo4j_driver(self._neo4j_driver)
        self._milvus_client = None
        self._neo4j_driver = None
        self._chunk_storage = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


async def get_chunk_storage(
    cache: ServiceCache = Depends(get_service_cache),
) -> ChunkStorageCoordinator:
    """
    Get the chunk storage coordinator.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        ChunkStorageCoordinator: Coordinator over connected stores
    """
    return await cache.chunk_storage()


def get_answer_stream_service(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> AnswerStreamService:
    """
    Get answer stream service over the application's answer source.

    The answer source (retrieval plus generation) is installed on
    app.state.answer_source by the deployment.

    Args:
        request: Incoming request
        settings: Application settings (injected via Depends)

    Returns:
        AnswerStreamService: Service for this request

    Raises:
        HTTPException(503): No answer source is configured
    """
    answer_source = getattr(request.app.state, "answer_source", None)
    if answer_source is None:
        logger.error(f"{__name__}:get_answer_stream_service - No answer source configured")
        raise HTTPException(status_code=503, detail="Answer generation is not configured")
    return AnswerStreamService(answer_source, settings.streaming)
