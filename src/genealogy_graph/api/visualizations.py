"""FastAPI router for relationship and chart visualizations.

Provides REST endpoints for:
- Calculating the relationship between two people
- Fan chart (ancestor) data
- Tree chart data (ancestors and descendants)
- Descendant tree data
- Force-directed graph data for the whole population
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from genealogy_graph.api.dependencies import get_service
from genealogy_graph.core.models import GraphData, RelationshipResult, TreeChart, TreeNode
from genealogy_graph.graph.paths import PathStrategy
from genealogy_graph.service import GraphService


router = APIRouter(prefix="/visualizations", tags=["Visualizations"])


class CalculateRelationshipRequest(BaseModel):
    """Two people to relate; the answer is what person 2 is to person 1."""
    model_config = ConfigDict(populate_by_name=True)

    person1_handle: str = Field(..., alias="person1Handle", min_length=1)
    person2_handle: str = Field(..., alias="person2Handle", min_length=1)
    strategy: PathStrategy | None = Field(None, description="Path search strategy")


@router.post("/calculate-relationship", response_model=RelationshipResult)
async def calculate_relationship(
    request: CalculateRelationshipRequest,
    service: GraphService = Depends(get_service),
) -> RelationshipResult:
    """Calculate the relationship between two people."""
    return await service.calculate_relationship(
        request.person1_handle,
        request.person2_handle,
        strategy=request.strategy,
    )


@router.get("/fan-chart/{handle}", response_model=TreeNode | None)
async def get_fan_chart(
    handle: str,
    generations: int | None = Query(None, ge=0, description="Generations to include"),
    service: GraphService = Depends(get_service),
) -> TreeNode | None:
    """Get fan chart (ancestor) data for a person."""
    return await service.get_fan_chart(handle, generations)


@router.get("/tree-chart/{handle}", response_model=TreeChart)
async def get_tree_chart(
    handle: str,
    service: GraphService = Depends(get_service),
) -> TreeChart:
    """Get tree chart data: ancestors and descendants of a person."""
    return await service.get_tree_chart(handle)


@router.get("/descendant-tree/{handle}", response_model=TreeNode | None)
async def get_descendant_tree(
    handle: str,
    generations: int | None = Query(None, ge=0, description="Generations to include"),
    service: GraphService = Depends(get_service),
) -> TreeNode | None:
    """Get descendant tree data for a person."""
    return await service.get_descendant_tree(handle, generations)


@router.get("/graph-data", response_model=GraphData)
async def get_graph_data(service: GraphService = Depends(get_service)) -> GraphData:
    """Get force-directed graph data for the whole family tree."""
    return await service.get_graph_data()
