"""
Health check API endpoints.

Routes: GET /health, GET /health/vector-store, GET /health/graph-store

Dependencies: knowledge_backend.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from knowledge_backend.api.deps import ServiceCache, get_service_cache
from knowledge_backend.boundary.vdb.milvus_client import check_milvus_health

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


def _unhealthy(store: str, error: Exception) -> JSONResponse:
    logger.warning(
        f"{__name__}:health - {store} unreachable",
        extra={"error_type": type(error).__name__, "error_msg": str(error)},
    )
    body = HealthResponse(status="unhealthy", message=f"{store} unreachable: {error}")
    return JSONResponse(status_code=503, content=body.model_dump())


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/vector-store", response_model=HealthResponse)
async def health_check_vector_store(
    cache: ServiceCache = Depends(get_service_cache),
):
    """Vector store health check."""
    try:
        client = await cache.milvus_client()
        version = await check_milvus_health(client)
    except Exception as e:
        return _unhealthy("Milvus", e)
    return HealthResponse(status="healthy", message=f"Milvus {version} reachable")


@router.get("/graph-store", response_model=HealthResponse)
async def health_check_graph_store(
    cache: ServiceCache = Depends(get_service_cache),
):
    """Graph store health check."""
    try:
        driver = await cache.neo4j_driver()
        await driver.verify_connectivity()
    except Exception as e:
        return _unhealthy("Neo4j", e)
    return HealthResponse(status="healthy", message="Neo4j reachable")
