"""FastAPI router for tree quality checks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from genealogy_graph.api.dependencies import get_service
from genealogy_graph.core.models import DisconnectedReport
from genealogy_graph.service import GraphService


router = APIRouter(prefix="/quality", tags=["Quality"])


@router.get("/disconnected", response_model=DisconnectedReport)
async def find_disconnected(
    root: str | None = Query(None, description="Reference person (default: first person)"),
    service: GraphService = Depends(get_service),
) -> DisconnectedReport:
    """Find people and branches disconnected from the main tree."""
    return await service.find_disconnected(root)
