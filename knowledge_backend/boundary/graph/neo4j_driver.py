"""
Neo4j driver lifecycle.

Creates the async driver from settings and verifies connectivity before
handing it out. Connection attempts are retried with backoff.

Dependencies: neo4j (async driver), knowledge_backend.configs, knowledge_backend.core
System role: Graph store connection management
"""

import logging

from neo4j import AsyncDriver, AsyncGraphDatabase

from knowledge_backend.configs.graph_store import Neo4jSettings
from knowledge_backend.configs.retry import RetrySettings
from knowledge_backend.core.exceptions import StoreConnectionError
from knowledge_backend.core.retry import with_retry

logger = logging.getLogger(__name__)


async def create_neo4j_driver(
    settings: Neo4jSettings | None = None,
    retry: RetrySettings | None = None,
) -> AsyncDriver:
    """
    Create a Neo4j driver and wait until the server is reachable.

    Args:
        settings: Connection settings
        retry: Backoff policy for connectivity checks

    Returns:
        AsyncDriver: Connected driver

    Raises:
        StoreConnectionError: If connectivity cannot be verified
    """
    settings = settings or Neo4jSettings()
    driver = AsyncGraphDatabase.driver(settings.uri, auth=(settings.user, settings.password))

    try:
        await with_retry(driver.verify_connectivity, retry, description="Neo4j connection")
    except Exception as e:
        await driver.close()
        raise StoreConnectionError(
            message="Failed to connect to Neo4j",
            store="neo4j",
            details={"uri": settings.uri, "error": str(e)},
        ) from e

    logger.info(f"{__name__}:create_neo4j_driver - Connected to Neo4j at {settings.uri}")
    return driver


async def close_neo4j_driver(driver: AsyncDriver | None) -> None:
    """Close a Neo4j driver if one was created."""
    if driver is None:
        return
    await driver.close()
    logger.info(f"{__name__}:close_neo4j_driver - Neo4j driver closed")
