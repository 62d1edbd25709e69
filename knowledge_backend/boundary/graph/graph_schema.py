"""
Neo4j uniqueness constraints for the knowledge graph.

Idempotent: every constraint is created with IF NOT EXISTS.

Dependencies: neo4j (async driver)
System role: Graph store schema bootstrap
"""

import logging

from neo4j import AsyncDriver
from neo4j.exceptions import DriverError, Neo4jError

from knowledge_backend.core.exceptions import GraphStoreError

logger = logging.getLogger(__name__)

CONSTRAINT_QUERIES = (
    "CREATE CONSTRAINT concept_name IF NOT EXISTS FOR (c:Concept) REQUIRE c.name IS UNIQUE",
    "CREATE CONSTRAINT document_url IF NOT EXISTS FOR (d:Document) REQUIRE d.url IS UNIQUE",
    "CREATE CONSTRAINT chunk_id IF NOT EXISTS FOR (c:Chunk) REQUIRE c.chunk_id IS UNIQUE",
    "CREATE CONSTRAINT chunk_hash IF NOT EXISTS FOR (c:Chunk) REQUIRE c.hash IS UNIQUE",
)


async def init_graph_constraints(driver: AsyncDriver, database: str | None = None) -> int:
    """
    Create the graph's uniqueness constraints.

    Args:
        driver: Neo4j async driver
        database: Target database, server default when None

    Returns:
        int: Number of constraint statements executed

    Raises:
        GraphStoreError: If a constraint statement fails
    """
    async with driver.session(database=database) as session:
        for query in CONSTRAINT_QUERIES:
            try:
                result = await session.run(query)
                await result.consume()
            except (Neo4jError, DriverError) as e:
                raise GraphStoreError(
                    message="Failed to create Neo4j constraint",
                    operation="init_schema",
                    details={"error": str(e), "query": query},
                ) from e

    logger.info(f"{__name__}:init_graph_constraints - Graph constraints ensured")
    return len(CONSTRAINT_QUERIES)
