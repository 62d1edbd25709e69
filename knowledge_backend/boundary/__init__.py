"""
Boundary layer for external system integrations.

Handles all interactions with the vector store (Milvus) and the graph
store (Neo4j). Provides writers and connection helpers for both.
"""
