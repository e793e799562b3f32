"""
Relationship-graph service.

Entry point for the HTTP routers and the CLI. Each call reads one
snapshot from the entity store, indexes it, runs the engine under a fresh
traversal budget and returns typed results. No state survives between
calls, so concurrent requests never share mutable data.

Unknown person handles raise PersonNotFoundError before any traversal
starts; the graph code never invents placeholder people.

Traversals run in the default thread pool so a large population does not
block the event loop. Cancelling the awaiting task (a client disconnect)
cancels the budget, which stops the worker thread at its next node.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Callable

from genealogy_graph.config import GraphConfig
from genealogy_graph.core.errors import PersonNotFoundError
from genealogy_graph.core.models import (
    ClusterSummary,
    DisconnectedReport,
    GraphData,
    GraphLink,
    GraphNode,
    PathNode,
    Person,
    RelationshipResult,
    RelationshipType,
    TreeChart,
    TreeNode,
)
from genealogy_graph.graph import (
    ConnectivityAnalyzer,
    FamilyIndex,
    NeighborResolver,
    PathFinder,
    PathStrategy,
    RelationshipClassifier,
    TraversalBudget,
    TreeBuilder,
)
from genealogy_graph.store.base import EntityStore

logger = logging.getLogger(__name__)

NO_RELATIONSHIP = "No known relationship"


class GraphService:
    """Relationship, chart and connectivity queries over an entity store."""

    def __init__(self, store: EntityStore, config: GraphConfig | None = None):
        self.store = store
        self.config = config or GraphConfig()
        self.classifier = RelationshipClassifier()

    async def _snapshot(self) -> FamilyIndex:
        return await self.store.snapshot()

    @staticmethod
    def _require(index: FamilyIndex, handle: str) -> Person:
        person = index.get_person(handle)
        if person is None:
            raise PersonNotFoundError(handle)
        return person

    def _generations(self, requested: int | None, default: int) -> int:
        if requested is None:
            return default
        return max(0, min(requested, self.config.max_generations_limit))

    @staticmethod
    async def _traverse(budget: TraversalBudget, func: Callable[..., Any], *args) -> Any:
        """Run a traversal in the thread pool under `budget`."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(func, *args))
        except asyncio.CancelledError:
            budget.cancel()
            logger.info("Traversal cancelled after %d nodes", budget.visited)
            raise

    # =========================================
    # Relationships
    # =========================================

    async def calculate_relationship(
        self,
        person1_handle: str,
        person2_handle: str,
        strategy: PathStrategy | None = None,
        budget: TraversalBudget | None = None,
    ) -> RelationshipResult:
        """
        Shortest relationship path between two people, classified.

        The description is what person 2 is to person 1. Unconnected
        people get a result with an empty path and distance -1.
        """
        index = await self._snapshot()
        person1 = self._require(index, person1_handle)
        person2 = self._require(index, person2_handle)

        budget = budget or self.config.new_budget()
        finder = PathFinder(NeighborResolver(index), budget)
        steps = await self._traverse(
            budget, finder.find,
            person1_handle, person2_handle, strategy or self.config.path_strategy,
        )

        if not steps:
            logger.info("No relationship between %s and %s", person1_handle, person2_handle)
            return RelationshipResult(
                person1=PathNode.from_person(person1),
                person2=PathNode.from_person(person2),
                relationship=NO_RELATIONSHIP,
                path=[],
                distance=-1,
                relationship_type=RelationshipType.DISTANT,
            )

        path = [
            PathNode.from_person(index.get_person(step.handle), step.relation)
            for step in steps
        ]
        classification = self.classifier.classify(path)
        logger.info(
            "%s -> %s: %s (%d steps)",
            person1_handle, person2_handle, classification.description, len(path) - 1,
        )

        return RelationshipResult(
            person1=path[0],
            person2=path[-1],
            relationship=classification.description,
            common_ancestor=classification.common_ancestor,
            path=path,
            distance=len(path) - 1,
            relationship_type=classification.type,
            degree=classification.degree,
            removal=classification.removal,
        )

    # =========================================
    # Charts
    # =========================================

    async def get_fan_chart(self, handle: str, generations: int | None = None) -> TreeNode | None:
        """Ancestor tree for fan and pedigree charts."""
        index = await self._snapshot()
        self._require(index, handle)
        budget = self.config.new_budget()
        builder = TreeBuilder(index, budget)
        return await self._traverse(
            budget, builder.build_ancestor_tree,
            handle, self._generations(generations, self.config.fan_chart_generations),
        )

    async def get_tree_chart(self, handle: str) -> TreeChart:
        """A person with ancestors and descendants, a few generations each way."""
        index = await self._snapshot()
        person = self._require(index, handle)
        budget = self.config.new_budget()
        builder = TreeBuilder(index, budget)
        depth = self.config.tree_chart_generations
        ancestors = await self._traverse(budget, builder.build_ancestor_tree, handle, depth)
        descendants = await self._traverse(budget, builder.build_descendant_tree, handle, depth)
        return TreeChart(person=person, ancestors=ancestors, descendants=descendants)

    async def get_descendant_tree(
        self, handle: str, generations: int | None = None
    ) -> TreeNode | None:
        index = await self._snapshot()
        self._require(index, handle)
        budget = self.config.new_budget()
        builder = TreeBuilder(index, budget)
        return await self._traverse(
            budget, builder.build_descendant_tree,
            handle, self._generations(generations, self.config.descendant_generations),
        )

    async def get_graph_data(self) -> GraphData:
        """
        Whole-population graph for force-directed rendering.

        Links run parent -> child for every recorded parent and between the
        two parents of a family. Links to people missing from the snapshot
        are left out.
        """
        index = await self._snapshot()
        nodes = [
            GraphNode(
                id=p.handle,
                gramps_id=p.gramps_id,
                name=p.name,
                gender=p.gender,
                birth_year=p.birth_year,
                death_year=p.death_year,
            )
            for p in index.people
        ]

        links: list[GraphLink] = []
        for family in index.families:
            parents = [h for h in family.parent_handles if h in index]
            for child in family.child_handles:
                if child not in index:
                    continue
                for parent in parents:
                    links.append(GraphLink(source=parent, target=child, type="parent"))
            if len(parents) == 2:
                links.append(GraphLink(source=parents[0], target=parents[1], type="spouse"))

        return GraphData(
            nodes=nodes,
            links=links,
            stats={"totalPeople": len(nodes), "totalRelationships": len(links)},
        )

    # =========================================
    # Quality
    # =========================================

    async def find_disconnected(self, root: str | None = None) -> DisconnectedReport:
        """People unreachable from the root person, plus every connected cluster."""
        index = await self._snapshot()
        budget = self.config.new_budget()
        analyzer = ConnectivityAnalyzer(index, budget)
        branches, clusters = await self._traverse(budget, analyzer.analyze, root)
        return DisconnectedReport(
            count=len(branches),
            branches=branches,
            clusters=[
                ClusterSummary(root=c.root.handle, count=c.size, members=c.members)
                for c in clusters
            ],
        )
