"""
Base configuration settings.

Service-wide options shared by the aggregated Settings: the .env source,
log level, schema bootstrap on startup, and allowed CORS origins.

Dependencies: pydantic_settings
System role: Foundation for the service configuration
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Service-wide settings read from the environment or .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level applied by configure_logging",
    )
    init_schema_on_startup: bool = Field(
        default=False,
        description="Create the Milvus collection and Neo4j constraints when the app starts",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API (JSON list in the environment)",
    )
