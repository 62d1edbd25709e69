"""
Test suite for Neo4jChunkWriter.

Tests the two-phase write contract, batching, session release on every
exit path, concept links, deletion, and error translation. The Neo4j
driver and session are mocked.

System role: Verification of graph store write path
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from neo4j.exceptions import ServiceUnavailable

from knowledge_backend.boundary.graph.chunk_graph_writer import (
    DELETE_DOCUMENT_CHUNKS_QUERY,
    LINK_CODE_EXAMPLE_QUERY,
    LINK_CONCEPTS_QUERY,
    LINK_FORMULA_QUERY,
    LINK_SEQUENTIAL_QUERY,
    UPSERT_CHUNKS_QUERY,
    UPSERT_DOCUMENT_QUERY,
    Neo4jChunkWriter,
)
from knowledge_backend.configs.storage import ChunkStorageSettings
from knowledge_backend.core.chunk_identity import derive_chunk_key, derive_content_hash
from knowledge_backend.core.exceptions import GraphStoreError
from knowledge_backend.models.chunk import EmbeddedChunk

DOCUMENT_URL = "https://example.org/doc-1"


@pytest.fixture
def writer(mock_neo4j_driver: MagicMock) -> Neo4jChunkWriter:
    """Provide writer with a batch size of 2 and short previews."""
    return Neo4jChunkWriter(
        mock_neo4j_driver,
        ChunkStorageSettings(graph_batch_size=2, preview_chars=10),
        database="knowledge",
    )


def _queries(session: MagicMock) -> list[str]:
    return [c.args[0] for c in session.run.await_args_list]


class TestCreateChunkNodes:
    """Test suite for the combined two-phase write."""

    @pytest.mark.asyncio
    async def test_empty_input_should_open_no_session(
        self, writer: Neo4jChunkWriter, mock_neo4j_driver: MagicMock
    ) -> None:
        """Empty input returns 0 without a session."""
        assert await writer.create_chunk_nodes([], DOCUMENT_URL) == 0
        mock_neo4j_driver.session.assert_not_called()

    @pytest.mark.asyncio
    async def test_nodes_should_precede_links_on_one_session(
        self,
        writer: Neo4jChunkWriter,
        mock_neo4j_driver: MagicMock,
        mock_neo4j_session: MagicMock,
        chunk_factory,
    ) -> None:
        """Document, chunk batches, then NEXT_CHUNK batches, all on one session."""
        # Arrange
        chunks = [chunk_factory(i) for i in range(3)]

        # Act
        created = await writer.create_chunk_nodes(chunks, DOCUMENT_URL)

        # Assert
        assert created == 3
        mock_neo4j_driver.session.assert_called_once_with(database="knowledge")
        assert _queries(mock_neo4j_session) == [
            UPSERT_DOCUMENT_QUERY,
            UPSERT_CHUNKS_QUERY,
            UPSERT_CHUNKS_QUERY,
            LINK_SEQUENTIAL_QUERY,
        ]
        mock_neo4j_session.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_should_be_released_on_failure(
        self,
        writer: Neo4jChunkWriter,
        mock_neo4j_session: MagicMock,
        chunk_factory,
    ) -> None:
        """A failing statement raises GraphStoreError and still closes the session."""
        mock_neo4j_session.run.side_effect = ServiceUnavailable("gone")

        with pytest.raises(GraphStoreError) as exc_info:
            await writer.create_chunk_nodes([chunk_factory(0)], DOCUMENT_URL)

        assert exc_info.value.details["operation"] == "upsert_document"
        assert isinstance(exc_info.value.__cause__, ServiceUnavailable)
        mock_neo4j_session.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_progress_should_follow_chunk_batches(
        self, writer: Neo4jChunkWriter, chunk_factory
    ) -> None:
        """Progress is reported after each node batch."""
        progress: list[tuple[int, int]] = []

        await writer.create_chunk_nodes(
            [chunk_factory(i) for i in range(3)],
            DOCUMENT_URL,
            on_progress=lambda done, total: progress.append((done, total)),
        )

        assert progress == [(2, 3), (3, 3)]


class TestUpsertChunkNodes:
    """Test suite for phase 1."""

    @pytest.mark.asyncio
    async def test_document_should_use_first_chunk_title(
        self,
        writer: Neo4jChunkWriter,
        mock_neo4j_session: MagicMock,
        sample_chunks: list[EmbeddedChunk],
    ) -> None:
        """The Document node carries title and chunk count."""
        await writer.upsert_chunk_nodes(sample_chunks, DOCUMENT_URL)

        params = mock_neo4j_session.run.await_args_list[0].args[1]
        assert params == {"url": DOCUMENT_URL, "title": "Linear Algebra Notes", "chunkCount": 3}

    @pytest.mark.asyncio
    async def test_missing_title_should_fall_back_to_untitled(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock, chunk_factory
    ) -> None:
        await writer.upsert_chunk_nodes([chunk_factory(0, title="")], DOCUMENT_URL)

        params = mock_neo4j_session.run.await_args_list[0].args[1]
        assert params["title"] == "Untitled"

    @pytest.mark.asyncio
    async def test_chunk_rows_should_use_absolute_index_and_derived_keys(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock, chunk_factory
    ) -> None:
        """Rows in the second batch continue the ordinal of the first."""
        chunks = [chunk_factory(i, content="0123456789abcdef") for i in range(3)]

        await writer.upsert_chunk_nodes(chunks, DOCUMENT_URL)

        second_batch = mock_neo4j_session.run.await_args_list[2].args[1]
        row = second_batch["chunks"][0]
        assert second_batch["documentUrl"] == DOCUMENT_URL
        assert row["chunkIndex"] == 2
        assert row["chunkId"] == derive_chunk_key("doc-1-chunk-2")
        assert row["sourceId"] == "doc-1-chunk-2"
        assert row["hash"] == derive_content_hash("0123456789abcdef")
        assert row["preview"] == "0123456789"

    @pytest.mark.asyncio
    async def test_phase_one_should_not_link(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock, chunk_factory
    ) -> None:
        await writer.upsert_chunk_nodes([chunk_factory(i) for i in range(3)], DOCUMENT_URL)

        assert LINK_SEQUENTIAL_QUERY not in _queries(mock_neo4j_session)


class TestLinkSequentialChunks:
    """Test suite for phase 2."""

    @pytest.mark.asyncio
    async def test_single_chunk_should_create_no_edges(
        self, writer: Neo4jChunkWriter, mock_neo4j_driver: MagicMock, chunk_factory
    ) -> None:
        """One chunk has no successor: no session, no query."""
        assert await writer.link_sequential_chunks([chunk_factory(0)]) == 0
        mock_neo4j_driver.session.assert_not_called()

    @pytest.mark.asyncio
    async def test_pairs_should_follow_delivered_order(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock, chunk_factory
    ) -> None:
        """Four chunks give three pairs in two batches."""
        chunks = [chunk_factory(i) for i in range(4)]
        keys = [derive_chunk_key(c.id) for c in chunks]

        linked = await writer.link_sequential_chunks(chunks)

        assert linked == 3
        batches = [c.args[1]["pairs"] for c in mock_neo4j_session.run.await_args_list]
        assert batches == [
            [{"from": keys[0], "to": keys[1]}, {"from": keys[1], "to": keys[2]}],
            [{"from": keys[2], "to": keys[3]}],
        ]


class TestConceptLinks:
    """Test suite for concept relationships."""

    @pytest.mark.asyncio
    async def test_empty_concepts_should_be_noop(
        self, writer: Neo4jChunkWriter, mock_neo4j_driver: MagicMock
    ) -> None:
        await writer.link_chunk_to_concepts("doc-1-chunk-0", [])
        mock_neo4j_driver.session.assert_not_called()

    @pytest.mark.asyncio
    async def test_concepts_should_be_linked_by_derived_key(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock
    ) -> None:
        await writer.link_chunk_to_concepts("doc-1-chunk-0", ["eigenvector", "eigenvalue"])

        query, params = mock_neo4j_session.run.await_args.args
        assert query == LINK_CONCEPTS_QUERY
        assert params == {
            "chunkId": derive_chunk_key("doc-1-chunk-0"),
            "concepts": ["eigenvector", "eigenvalue"],
        }

    @pytest.mark.asyncio
    async def test_code_example_and_formula_links(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock
    ) -> None:
        await writer.link_code_example("doc-1-chunk-1", "matrix multiplication")
        await writer.link_formula("doc-1-chunk-2", "determinant")

        assert _queries(mock_neo4j_session) == [LINK_CODE_EXAMPLE_QUERY, LINK_FORMULA_QUERY]
        assert mock_neo4j_session.run.await_args.args[1]["concept"] == "determinant"


class TestDeleteByDocumentUrl:
    """Test suite for delete_by_document_url."""

    @pytest.mark.asyncio
    async def test_should_return_deleted_count(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock
    ) -> None:
        mock_neo4j_session.result.single = AsyncMock(return_value={"deleted": 4})

        deleted = await writer.delete_by_document_url(DOCUMENT_URL)

        assert deleted == 4
        assert mock_neo4j_session.run.await_args.args == (
            DELETE_DOCUMENT_CHUNKS_QUERY,
            {"documentUrl": DOCUMENT_URL},
        )

    @pytest.mark.asyncio
    async def test_no_record_should_return_zero(self, writer: Neo4jChunkWriter) -> None:
        assert await writer.delete_by_document_url(DOCUMENT_URL) == 0

    @pytest.mark.asyncio
    async def test_failure_should_raise_and_release_session(
        self, writer: Neo4jChunkWriter, mock_neo4j_session: MagicMock
    ) -> None:
        mock_neo4j_session.run.side_effect = ServiceUnavailable("gone")

        with pytest.raises(GraphStoreError):
            await writer.delete_by_document_url(DOCUMENT_URL)

        mock_neo4j_session.__aexit__.assert_awaited_once()
