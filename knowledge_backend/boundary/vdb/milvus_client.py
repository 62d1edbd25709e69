"""
Milvus client lifecycle.

Builds a pymilvus client from settings and verifies the server answers
before handing it out. Connection attempts are retried with backoff.

Dependencies: pymilvus, knowledge_backend.configs, knowledge_backend.core
System role: Vector store connection management
"""

import asyncio
import logging

from pymilvus import MilvusClient

from knowledge_backend.configs.retry import RetrySettings
from knowledge_backend.configs.vector_store import MilvusSettings
from knowledge_backend.core.exceptions import StoreConnectionError
from knowledge_backend.core.retry import with_retry

logger = logging.getLogger(__name__)


def _connect(settings: MilvusSettings) -> MilvusClient:
    kwargs = {"uri": settings.uri, "db_name": settings.db_name}
    if settings.token:
        kwargs["token"] = settings.token
    elif settings.user:
        kwargs["user"] = settings.user
        kwargs["password"] = settings.password or ""

    client = MilvusClient(**kwargs)
    client.get_server_version()
    return client


async def check_milvus_health(client: MilvusClient) -> str:
    """
    Ping the Milvus server.

    Args:
        client: pymilvus client

    Returns:
        str: Server version reported by Milvus
    """
    return await asyncio.to_thread(client.get_server_version)


async def create_milvus_client(
    settings: MilvusSettings | None = None,
    retry: RetrySettings | None = None,
) -> MilvusClient:
    """
    Connect to Milvus, retrying until the server responds.

    Args:
        settings: Connection settings
        retry: Backoff policy for connection attempts

    Returns:
        MilvusClient: Connected client

    Raises:
        StoreConnectionError: If every connection attempt fails
    """
    settings = settings or MilvusSettings()

    async def attempt() -> MilvusClient:
        return await asyncio.to_thread(_connect, settings)

    try:
        client = await with_retry(attempt, retry, description="Milvus connection")
    except Exception as e:
        raise StoreConnectionError(
            message="Failed to connect to Milvus",
            store="milvus",
            details={"uri": settings.uri, "error": str(e)},
        ) from e

    logger.info(f"{__name__}:create_milvus_client - Connected to Milvus at {settings.uri}")
    return client


async def close_milvus_client(client: MilvusClient | None) -> None:
    """Close a Milvus client if one was created."""
    if client is None:
        return
    await asyncio.to_thread(client.close)
    logger.info(f"{__name__}:close_milvus_client - Milvus client closed")
