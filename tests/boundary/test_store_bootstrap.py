"""
Test suite for store schema bootstrap and connection lifecycle.

Covers Milvus collection initialisation, Neo4j constraint creation, and
connection helpers with retry disabled.

System role: Verification of store bootstrap boundary
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from neo4j.exceptions import ServiceUnavailable
from pymilvus import MilvusException

from knowledge_backend.boundary.graph.graph_schema import CONSTRAINT_QUERIES, init_graph_constraints
from knowledge_backend.boundary.graph.neo4j_driver import close_neo4j_driver, create_neo4j_driver
from knowledge_backend.boundary.vdb.milvus_client import (
    check_milvus_health,
    close_milvus_client,
    create_milvus_client,
)
from knowledge_backend.boundary.vdb.milvus_schema import init_chunk_collection
from knowledge_backend.configs.graph_store import Neo4jSettings
from knowledge_backend.configs.retry import RetrySettings
from knowledge_backend.configs.storage import ChunkStorageSettings
from knowledge_backend.configs.vector_store import MilvusSettings
from knowledge_backend.core.exceptions import (
    GraphStoreError,
    StoreConnectionError,
    VectorStoreError,
)

NO_RETRY = RetrySettings(max_retries=0, initial_delay_s=0)


@pytest.fixture
def milvus_settings() -> MilvusSettings:
    return MilvusSettings(vector_dim=8, index_name="vector_hnsw")


@pytest.fixture
def storage_settings() -> ChunkStorageSettings:
    return ChunkStorageSettings(collection_name="test_chunks")


class TestInitChunkCollection:
    """Test suite for Milvus collection bootstrap."""

    @pytest.mark.asyncio
    async def test_creates_missing_collection(
        self,
        mock_milvus_client: MagicMock,
        milvus_settings: MilvusSettings,
        storage_settings: ChunkStorageSettings,
    ) -> None:
        mock_milvus_client.has_collection.return_value = False

        created = await init_chunk_collection(
            mock_milvus_client, milvus_settings, storage_settings
        )

        assert created is True
        kwargs = mock_milvus_client.create_collection.call_args.kwargs
        assert kwargs["collection_name"] == "test_chunks"
        mock_milvus_client.load_collection.assert_called_once_with(collection_name="test_chunks")

    @pytest.mark.asyncio
    async def test_existing_collection_gets_missing_index(
        self,
        mock_milvus_client: MagicMock,
        milvus_settings: MilvusSettings,
        storage_settings: ChunkStorageSettings,
    ) -> None:
        mock_milvus_client.has_collection.return_value = True
        mock_milvus_client.list_indexes.return_value = []

        created = await init_chunk_collection(
            mock_milvus_client, milvus_settings, storage_settings
        )

        assert created is False
        mock_milvus_client.create_collection.assert_not_called()
        mock_milvus_client.create_index.assert_called_once()
        mock_milvus_client.load_collection.assert_called_once()

    @pytest.mark.asyncio
    async def test_existing_index_is_left_alone(
        self,
        mock_milvus_client: MagicMock,
        milvus_settings: MilvusSettings,
        storage_settings: ChunkStorageSettings,
    ) -> None:
        mock_milvus_client.has_collection.return_value = True
        mock_milvus_client.list_indexes.return_value = ["vector_hnsw"]

        await init_chunk_collection(mock_milvus_client, milvus_settings, storage_settings)

        mock_milvus_client.create_index.assert_not_called()

    @pytest.mark.asyncio
    async def test_milvus_failure_is_wrapped(
        self,
        mock_milvus_client: MagicMock,
        milvus_settings: MilvusSettings,
        storage_settings: ChunkStorageSettings,
    ) -> None:
        mock_milvus_client.has_collection.side_effect = MilvusException(message="no server")

        with pytest.raises(VectorStoreError) as exc_info:
            await init_chunk_collection(mock_milvus_client, milvus_settings, storage_settings)

        assert exc_info.value.details["operation"] == "init_schema"


class TestInitGraphConstraints:
    """Test suite for Neo4j constraint bootstrap."""

    @pytest.mark.asyncio
    async def test_runs_every_constraint(
        self, mock_neo4j_driver: MagicMock, mock_neo4j_session: MagicMock
    ) -> None:
        count = await init_graph_constraints(mock_neo4j_driver)

        assert count == len(CONSTRAINT_QUERIES)
        queries = [call.args[0] for call in mock_neo4j_session.run.await_args_list]
        assert queries == list(CONSTRAINT_QUERIES)
        assert all("IF NOT EXISTS" in query for query in queries)

    @pytest.mark.asyncio
    async def test_driver_error_is_wrapped(
        self, mock_neo4j_driver: MagicMock, mock_neo4j_session: MagicMock
    ) -> None:
        mock_neo4j_session.run.side_effect = ServiceUnavailable("down")

        with pytest.raises(GraphStoreError) as exc_info:
            await init_graph_constraints(mock_neo4j_driver)

        assert exc_info.value.details["operation"] == "init_schema"


class TestMilvusClientLifecycle:
    """Test suite for Milvus connection helpers."""

    @pytest.mark.asyncio
    async def test_create_client_pings_server(self, mock_milvus_client: MagicMock) -> None:
        with patch(
            "knowledge_backend.boundary.vdb.milvus_client.MilvusClient",
            return_value=mock_milvus_client,
        ) as client_cls:
            client = await create_milvus_client(MilvusSettings(token="secret"), NO_RETRY)

        assert client is mock_milvus_client
        assert client_cls.call_args.kwargs["token"] == "secret"
        mock_milvus_client.get_server_version.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_client_failure_raises_connection_error(self) -> None:
        with patch(
            "knowledge_backend.boundary.vdb.milvus_client.MilvusClient",
            side_effect=ConnectionError("refused"),
        ):
            with pytest.raises(StoreConnectionError) as exc_info:
                await create_milvus_client(MilvusSettings(), NO_RETRY)

        assert exc_info.value.details["store"] == "milvus"

    @pytest.mark.asyncio
    async def test_health_returns_version(self, mock_milvus_client: MagicMock) -> None:
        assert await check_milvus_health(mock_milvus_client) == "v2.4.0"

    @pytest.mark.asyncio
    async def test_close_ignores_missing_client(self, mock_milvus_client: MagicMock) -> None:
        await close_milvus_client(None)
        await close_milvus_client(mock_milvus_client)

        mock_milvus_client.close.assert_called_once()


class TestNeo4jDriverLifecycle:
    """Test suite for Neo4j connection helpers."""

    @pytest.mark.asyncio
    async def test_create_driver_verifies_connectivity(self, mock_neo4j_driver: MagicMock) -> None:
        with patch(
            "knowledge_backend.boundary.graph.neo4j_driver.AsyncGraphDatabase.driver",
            return_value=mock_neo4j_driver,
        ):
            driver = await create_neo4j_driver(Neo4jSettings(), NO_RETRY)

        assert driver is mock_neo4j_driver
        mock_neo4j_driver.verify_connectivity.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_connectivity_closes_driver(self, mock_neo4j_driver: MagicMock) -> None:
        mock_neo4j_driver.verify_connectivity = AsyncMock(side_effect=ServiceUnavailable("down"))

        with patch(
            "knowledge_backend.boundary.graph.neo4j_driver.AsyncGraphDatabase.driver",
            return_value=mock_neo4j_driver,
        ):
            with pytest.raises(StoreConnectionError) as exc_info:
                await create_neo4j_driver(Neo4jSettings(), NO_RETRY)

        assert exc_info.value.details["store"] == "neo4j"
        mock_neo4j_driver.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_ignores_missing_driver(self, mock_neo4j_driver: MagicMock) -> None:
        await close_neo4j_driver(None)
        await close_neo4j_driver(mock_neo4j_driver)

        mock_neo4j_driver.close.assert_awaited_once()
