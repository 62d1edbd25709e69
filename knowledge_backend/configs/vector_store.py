"""
Vector store configuration settings.

Manages Milvus connection parameters and the HNSW index definition
used for the chunk collection.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for chunk storage
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MilvusSettings(BaseSettings):
    """Milvus connection and collection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MILVUS_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Milvus host")
    port: int = Field(default=19530, description="Milvus gRPC port")
    user: str | None = Field(default=None, description="Milvus user")
    password: str | None = Field(default=None, description="Milvus password")
    token: str | None = Field(default=None, description="Milvus/Zilliz API token")
    db_name: str = Field(default="default", description="Milvus database name")

    vector_dim: int = Field(default=1536, description="Embedding vector dimension", ge=1)
    index_name: str = Field(default="vector_hnsw", description="Vector index name")
    metric_type: str = Field(default="COSINE", description="Vector similarity metric")
    hnsw_m: int = Field(default=16, description="HNSW graph degree (M)")
    hnsw_ef_construction: int = Field(default=200, description="HNSW efConstruction")

    @property
    def uri(self) -> str:
        """
        Construct Milvus connection URI.

        Returns:
            str: pymilvus-compatible URI
        """
        return f"http://{self.host}:{self.port}"
