"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from knowledge_backend.configs.graph_store import Neo4jSettings
from knowledge_backend.configs.retry import RetrySettings
from knowledge_backend.configs.settings import Settings, get_settings
from knowledge_backend.configs.storage import DEFAULT_COLLECTION_NAME, ChunkStorageSettings
from knowledge_backend.configs.streaming import StreamingSettings
from knowledge_backend.configs.vector_store import MilvusSettings

__all__ = [
    "ChunkStorageSettings",
    "DEFAULT_COLLECTION_NAME",
    "MilvusSettings",
    "Neo4jSettings",
    "RetrySettings",
    "Settings",
    "StreamingSettings",
    "get_settings",
]
