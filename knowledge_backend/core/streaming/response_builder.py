"""
Streamed response accumulator.

Collects the answer text, emitted citations, and final metadata of a
streamed response for persistence and audit once streaming ends.

Dependencies: knowledge_backend.models
System role: Post-stream response reconstruction
"""

from knowledge_backend.models.citation import Citation
from knowledge_backend.models.streaming import ResponseMetadata


class StreamResponseBuilder:
    """Collects streamed tokens and builds the complete response."""

    def __init__(self) -> None:
        self._tokens: list[str] = []
        self._citations: list[Citation] = []
        self._metadata: ResponseMetadata | None = None

    def add_token(self, content: str) -> None:
        """Append a token; no separator is inserted."""
        self._tokens.append(content)

    def add_citation(self, citation: Citation) -> None:
        """Record a citation. Duplicates are kept."""
        self._citations.append(citation)

    def set_metadata(self, metadata: ResponseMetadata) -> None:
        self._metadata = metadata

    def get_text(self) -> str:
        """Return the complete response text."""
        return "".join(self._tokens)

    def get_citations(self) -> list[Citation]:
        return list(self._citations)

    def get_metadata(self) -> ResponseMetadata | None:
        """Return the metadata, or None if not set yet."""
        return self._metadata

    def reset(self) -> None:
        self._tokens = []
        self._citations = []
        self._metadata = None
