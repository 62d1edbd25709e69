"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from knowledge_backend.configs.base import BaseSettings
from knowledge_backend.configs.graph_store import Neo4jSettings
from knowledge_backend.configs.retry import RetrySettings
from knowledge_backend.configs.storage import ChunkStorageSettings
from knowledge_backend.configs.streaming import StreamingSettings
from knowledge_backend.configs.vector_store import MilvusSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    milvus: MilvusSettings = MilvusSettings()
    neo4j: Neo4jSettings = Neo4jSettings()
    storage: ChunkStorageSettings = ChunkStorageSettings()
    streaming: StreamingSettings = StreamingSettings()
    retry: RetrySettings = RetrySettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from knowledge_backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()
