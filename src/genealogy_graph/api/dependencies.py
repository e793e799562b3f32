"""Shared router dependencies and error translation."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from genealogy_graph.core.errors import (
    PersonNotFoundError,
    StoreError,
    TraversalLimitExceeded,
)
from genealogy_graph.service import GraphService

logger = logging.getLogger(__name__)

# Set by the application lifespan (singleton)
_service: GraphService | None = None


def set_service(service: GraphService | None) -> None:
    """Install (or clear) the service used by all routers."""
    global _service
    _service = service


def get_service() -> GraphService:
    """Get the graph service, or 503 while the app is starting."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Graph service not initialized")
    return _service


async def _person_not_found(request: Request, exc: PersonNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc), "handle": exc.handle})


async def _traversal_limit(request: Request, exc: TraversalLimitExceeded) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc), "visited": exc.visited})


async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Entity store failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": f"Entity store unavailable: {exc}"})


def register_exception_handlers(app: FastAPI) -> None:
    """Map engine errors to HTTP responses."""
    app.add_exception_handler(PersonNotFoundError, _person_not_found)
    app.add_exception_handler(TraversalLimitExceeded, _traversal_limit)
    app.add_exception_handler(StoreError, _store_error)
