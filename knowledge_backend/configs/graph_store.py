"""
Graph store configuration settings.

Manages Neo4j connection parameters for the async driver.

Dependencies: pydantic, pydantic_settings
System role: Graph database configuration for chunk relationships
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Neo4jSettings(BaseSettings):
    """Neo4j connection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NEO4J_",
        case_sensitive=False,
        extra="ignore",
    )

    uri: str = Field(default="bolt://localhost:7687", description="Neo4j bolt URI")
    user: str = Field(default="neo4j", description="Neo4j user")
    password: str = Field(default="neo4j", description="Neo4j password")
    database: str | None = Field(
        default=None,
        description="Target database (server default when unset)",
    )
