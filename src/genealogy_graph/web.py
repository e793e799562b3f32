"""
FastAPI web service for the relationship-graph engine.

Provides REST API endpoints for relationship calculation, chart data and
tree connectivity checks.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from genealogy_graph import __version__
from genealogy_graph.api import (
    quality_router,
    register_exception_handlers,
    set_service,
    visualizations_router,
)
from genealogy_graph.config import GraphConfig, configure_logging, create_store
from genealogy_graph.service import GraphService
from genealogy_graph.store import EntityStore, GrampsWebStore

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str


def create_app(config: GraphConfig | None = None, store: EntityStore | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Service configuration (default: from environment)
        store: Entity store to serve from (default: chosen from config)
    """
    config = config or GraphConfig.from_env()

    # =========================================================================
    # Application Lifespan
    # =========================================================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the entity store on startup and close it on shutdown."""
        configure_logging(config.log_level)

        entity_store = store or create_store(config)
        if isinstance(entity_store, GrampsWebStore):
            await entity_store.connect()
        set_service(GraphService(entity_store, config))
        logger.info("Serving from %s", type(entity_store).__name__)

        yield

        set_service(None)
        await entity_store.close()

    app = FastAPI(
        title="Genealogy Relationship Graph API",
        description="Relationship paths, kinship terms, chart trees and connectivity checks.",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(visualizations_router)
    app.include_router(quality_router)

    # =========================================================================
    # Health Endpoints
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Check API health status."""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(),
            version=__version__,
        )

    return app


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
