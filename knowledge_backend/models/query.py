"""
Query request schema.

Dependencies: pydantic
System role: Query API contract
"""

from pydantic import Field

from knowledge_backend.models.common import CamelModel


class QueryRequest(CamelModel):
    """Request schema for a streamed question."""

    query: str = Field(min_length=1, max_length=2000, description="User question")
    session_id: str | None = Field(default=None, description="Client session identifier")
    top_k: int = Field(default=5, ge=1, le=20, description="Chunks to ground the answer on")
    include_graph: bool = Field(default=True, description="Include graph traversal results")
    topic_filter: str | None = Field(default=None, description="Restrict retrieval to a topic tag")
