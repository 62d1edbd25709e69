"""
Citation domain model.

Represents a citation marker (e.g. "[1]") grounding part of an answer
in a specific stored chunk.

Dependencies: pydantic
System role: Citation data structure
"""

from pydantic import Field

from knowledge_backend.models.common import CamelModel


class Citation(CamelModel):
    """Citation model for source attribution."""

    id: str = Field(description='Citation marker as it appears in text, e.g. "[1]"')
    chunk_id: str = Field(description="Chunk identifier for tracing")
    document_title: str = Field(description="Source document title")
    document_url: str = Field(description="Source document URL")
    snippet: str = Field(default="", description="Excerpt of the cited chunk")
    relevance_score: float = Field(description="Relevance score (0.0-1.0)", ge=0.0, le=1.0)
