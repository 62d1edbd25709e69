"""
Graph database boundary layer.

Neo4j driver lifecycle, uniqueness constraints, and the chunk writer.

Dependencies: neo4j
System role: Graph store adapter for chunk persistence
"""

from knowledge_backend.boundary.graph.chunk_graph_writer import Neo4jChunkWriter
from knowledge_backend.boundary.graph.graph_schema import init_graph_constraints
from knowledge_backend.boundary.graph.neo4j_driver import close_neo4j_driver, create_neo4j_driver

__all__ = [
    "Neo4jChunkWriter",
    "close_neo4j_driver",
    "create_neo4j_driver",
    "init_graph_constraints",
]
