"""
Shared test fixtures and configuration for entire test suite.

Provides: sample chunks and citations, Milvus client mocks, Neo4j driver/session mocks
Dependencies: pytest, unittest.mock
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from knowledge_backend.models.chunk import ChunkMetadata, EmbeddedChunk
from knowledge_backend.models.citation import Citation


def make_chunk(
    index: int,
    document_id: str = "doc-1",
    title: str = "Linear Algebra Notes",
    section_header: str | None = "Eigen Values",
    content: str | None = None,
) -> EmbeddedChunk:
    """Build an embedded chunk with deterministic content."""
    return EmbeddedChunk(
        id=f"{document_id}-chunk-{index}",
        content=content if content is not None else f"Chunk {index} discusses eigenvectors.",
        embedding=[0.1 * (index + 1), 0.2, 0.3],
        metadata=ChunkMetadata(
            document_id=document_id,
            document_title=title,
            document_url=f"https://example.org/{document_id}",
            section_header=section_header,
            chunk_index=index,
            total_chunks=3,
            token_count=12,
            has_code=index == 1,
        ),
    )


@pytest.fixture
def sample_chunks() -> list[EmbeddedChunk]:
    """Three chunks of one document, in document order."""
    return [make_chunk(i) for i in range(3)]


@pytest.fixture
def sample_citations() -> list[Citation]:
    """Citations [1] and [2] eligible for an answer."""
    return [
        Citation(
            id="[1]",
            chunk_id="doc-1-chunk-0",
            document_title="Linear Algebra Notes",
            document_url="https://example.org/doc-1",
            snippet="An eigenvector is...",
            relevance_score=0.91,
        ),
        Citation(
            id="[2]",
            chunk_id="doc-1-chunk-2",
            document_title="Linear Algebra Notes",
            document_url="https://example.org/doc-1",
            snippet="The characteristic polynomial...",
            relevance_score=0.74,
        ),
    ]


@pytest.fixture
def mock_milvus_client() -> MagicMock:
    """
    Create mock pymilvus MilvusClient.

    Returns:
        MagicMock: Client whose insert/flush/delete succeed
    """
    client = MagicMock()
    client.insert = MagicMock(return_value={"insert_count": 0})
    client.flush = MagicMock(return_value=None)
    client.delete = MagicMock(return_value={"delete_count": 0})
    client.get_server_version = MagicMock(return_value="v2.4.0")
    return client


@pytest.fixture
def mock_neo4j_session() -> MagicMock:
    """
    Create mock Neo4j async session.

    Returns:
        MagicMock: Session whose run() returns a consumable result
    """
    result = MagicMock()
    result.consume = AsyncMock(return_value=None)
    result.single = AsyncMock(return_value=None)

    session = MagicMock()
    session.run = AsyncMock(return_value=result)
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    session.result = result
    return session


@pytest.fixture
def mock_neo4j_driver(mock_neo4j_session: MagicMock) -> MagicMock:
    """
    Create mock Neo4j async driver.

    Returns:
        MagicMock: Driver whose session() yields mock_neo4j_session
    """
    driver = MagicMock()
    driver.session = MagicMock(return_value=mock_neo4j_session)
    driver.verify_connectivity = AsyncMock(return_value=None)
    driver.close = AsyncMock(return_value=None)
    return driver


@pytest.fixture
def chunk_factory():
    """Provide the make_chunk builder to tests."""
    return make_chunk
