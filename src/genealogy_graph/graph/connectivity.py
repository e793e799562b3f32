"""
Population connectivity.

Treats every Family as an undirected hyperedge joining all of its parents
and children, then runs breadth-first search over the whole snapshot.
Siblings of a family with no recorded parents are therefore connected to
each other.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from genealogy_graph.core.errors import PersonNotFoundError
from genealogy_graph.core.models import Person
from genealogy_graph.graph.index import FamilyIndex
from genealogy_graph.graph.limits import TraversalBudget

logger = logging.getLogger(__name__)


@dataclass
class Cluster:
    """One connected component of the population."""
    members: list[Person] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def root(self) -> Person:
        """First member in snapshot order."""
        return self.members[0]


class ConnectivityAnalyzer:
    """Find people and groups unreachable from the rest of the tree."""

    def __init__(self, index: FamilyIndex, budget: TraversalBudget | None = None):
        self.index = index
        self.budget = budget or TraversalBudget.unlimited()

    def find_disconnected_branches(self, root: str | None = None) -> list[Person]:
        """
        People not reachable from `root`.

        The root defaults to the first person in the snapshot. The result
        keeps snapshot order. An empty population yields an empty list.
        """
        people = self.index.people
        if not people:
            return []

        root = self._root(root)
        reachable = self._component(root)
        return self._outside(root, lambda handle: handle in reachable)

    def find_clusters(self) -> list[Cluster]:
        """
        Every connected component, largest first.

        Ties keep the order in which each cluster's first member appears in
        the snapshot.
        """
        clusters, _ = self._partition()
        return clusters

    def analyze(self, root: str | None = None) -> tuple[list[Person], list[Cluster]]:
        """
        Disconnected people and clusters from one pass over the population.

        Same results as `find_disconnected_branches(root)` followed by
        `find_clusters()`, but every person is charged to the budget once.
        """
        if not self.index.people:
            return [], []

        root = self._root(root)
        clusters, cluster_of = self._partition()
        root_cluster = cluster_of[root]
        return self._outside(root, lambda handle: cluster_of[handle] is root_cluster), clusters

    def _root(self, root: str | None) -> str:
        if root is None:
            return self.index.people[0].handle
        if root not in self.index:
            raise PersonNotFoundError(root)
        return root

    def _outside(self, root: str, connected) -> list[Person]:
        people = self.index.people
        disconnected = [p for p in people if not connected(p.handle)]
        logger.info(
            "%d of %d people are disconnected from %s",
            len(disconnected), len(people), root,
        )
        return disconnected

    def _partition(self) -> tuple[list[Cluster], dict[str, Cluster]]:
        cluster_of: dict[str, Cluster] = {}
        clusters: list[Cluster] = []

        for person in self.index.people:
            cluster = cluster_of.get(person.handle)
            if cluster is None:
                cluster = Cluster()
                clusters.append(cluster)
                for handle in self._component(person.handle):
                    cluster_of[handle] = cluster
            cluster.members.append(person)

        # list.sort is stable, so equal sizes keep first-appearance order
        clusters.sort(key=lambda c: c.size, reverse=True)
        logger.debug("Found %d clusters", len(clusters))
        return clusters, cluster_of

    def _component(self, root: str) -> set[str]:
        """Handles of everyone in the snapshot connected to `root`."""
        connected = {root}
        queue = deque([root])

        while queue:
            handle = queue.popleft()
            self.budget.charge()

            families = self.index.families_as_parent(handle) + self.index.families_as_child(handle)
            for family in families:
                for member in family.member_handles:
                    if member not in connected and member in self.index:
                        connected.add(member)
                        queue.append(member)

        return connected
