"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, uvicorn, knowledge_backend.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from knowledge_backend.api.deps.dependencies import get_service_cache
from knowledge_backend.boundary.graph.graph_schema import init_graph_constraints
from knowledge_backend.boundary.vdb.milvus_schema import init_chunk_collection
from knowledge_backend.configs import get_settings
from knowledge_backend.observability.logger import configure_logging
from knowledge_backend.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import documents_router, health_router, query_stream_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging, optionally bootstraps both store schemas, and
    closes store connections on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    cache = get_service_cache()
    if settings.init_schema_on_startup:
        logger.info(f"{__name__}:lifespan - Initializing store schemas")
        await init_chunk_collection(await cache.milvus_client(), settings.milvus, settings.storage)
        await init_graph_constraints(await cache.neo4j_driver(), settings.neo4j.database)

    yield

    await cache.close()
    logger.info(f"{__name__}:lifespan - Store connections closed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Knowledge Backend API",
        description="Dual-store chunk persistence and grounded answer streaming",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # CorrelationMiddleware must wrap RequestLoggingMiddleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(query_stream_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "knowledge_backend.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
