"""HTTP routers for the relationship-graph service."""

from genealogy_graph.api.dependencies import (
    get_service,
    register_exception_handlers,
    set_service,
)
from genealogy_graph.api.quality import router as quality_router
from genealogy_graph.api.visualizations import router as visualizations_router

__all__ = [
    "get_service",
    "quality_router",
    "register_exception_handlers",
    "set_service",
    "visualizations_router",
]
