"""
Shortest relationship paths.

Every derived edge (parent, spouse, child) costs 1, so breadth-first
search finds a shortest path regardless of which relations it crosses.

Two searches are provided:
- shortest_path: single-source BFS from the start person only
- bidirectional_path: two-frontier BFS that meets in the middle, visiting
  far fewer people on large, bushy trees

Both return the path as a list of steps; the first step carries
Relation.SELF and every later step the relation of that person to the
previous one. An empty list means the two people are not connected.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum

from genealogy_graph.core.models import Relation
from genealogy_graph.graph.index import Neighbor, NeighborResolver
from genealogy_graph.graph.limits import TraversalBudget

logger = logging.getLogger(__name__)

PathStep = Neighbor

# handle -> (handle it was discovered from, relation of handle to that person)
_Parents = dict[str, "Neighbor | None"]


class PathStrategy(str, Enum):
    SINGLE = "single"
    BIDIRECTIONAL = "bidirectional"


class PathFinder:
    """Breadth-first relationship path search over a NeighborResolver."""

    def __init__(self, resolver: NeighborResolver, budget: TraversalBudget | None = None):
        self.resolver = resolver
        self.budget = budget or TraversalBudget.unlimited()

    def find(
        self,
        start: str,
        end: str,
        strategy: PathStrategy = PathStrategy.SINGLE,
    ) -> list[PathStep]:
        """Run the search selected by `strategy`."""
        if strategy == PathStrategy.BIDIRECTIONAL:
            return self.bidirectional_path(start, end)
        return self.shortest_path(start, end)

    def shortest_path(self, start: str, end: str) -> list[PathStep]:
        """
        Single-source BFS from `start`.

        The visited map doubles as the back-pointer table, so each person
        is enqueued at most once even when the family graph has cycles.
        """
        if start == end:
            return [PathStep(start, Relation.SELF)]

        parents: _Parents = {start: None}
        queue = deque([start])

        while queue:
            handle = queue.popleft()
            self.budget.charge()

            if handle == end:
                path = _unwind(parents, end)
                logger.debug(
                    "Path %s -> %s: %d steps, %d people visited",
                    start, end, len(path) - 1, len(parents),
                )
                return path

            for neighbor in self.resolver.get_neighbors(handle):
                if neighbor.handle not in parents:
                    parents[neighbor.handle] = PathStep(handle, neighbor.relation)
                    queue.append(neighbor.handle)

        logger.debug("No path %s -> %s after visiting %d people", start, end, len(parents))
        return []

    def bidirectional_path(self, start: str, end: str) -> list[PathStep]:
        """
        Two-frontier BFS from both ends.

        The smaller frontier is expanded one whole level at a time. The
        first person reached from both sides closes a shortest path: no
        person is ever in both visited maps before that, so every meeting
        found within one level has the same total length.
        """
        if start == end:
            return [PathStep(start, Relation.SELF)]

        forward: _Parents = {start: None}
        backward: _Parents = {end: None}
        forward_frontier = [start]
        backward_frontier = [end]

        while forward_frontier and backward_frontier:
            if len(forward_frontier) <= len(backward_frontier):
                forward_frontier, meeting = self._expand(forward_frontier, forward, backward)
            else:
                backward_frontier, meeting = self._expand(backward_frontier, backward, forward)

            if meeting is not None:
                path = _unwind(forward, meeting) + _unwind_backward(backward, meeting)
                logger.debug(
                    "Bidirectional path %s -> %s: %d steps, %d people visited",
                    start, end, len(path) - 1, len(forward) + len(backward),
                )
                return path

        return []

    def _expand(
        self, frontier: list[str], own: _Parents, other: _Parents
    ) -> tuple[list[str], str | None]:
        next_frontier: list[str] = []
        for handle in frontier:
            self.budget.charge()
            for neighbor in self.resolver.get_neighbors(handle):
                if neighbor.handle in own:
                    continue
                own[neighbor.handle] = PathStep(handle, neighbor.relation)
                if neighbor.handle in other:
                    return next_frontier, neighbor.handle
                next_frontier.append(neighbor.handle)
        return next_frontier, None


def _unwind(parents: _Parents, end: str) -> list[PathStep]:
    """Follow back-pointers from `end` to the search origin."""
    steps: list[PathStep] = []
    handle = end
    while (parent := parents[handle]) is not None:
        steps.append(PathStep(handle, parent.relation))
        handle = parent.handle
    steps.append(PathStep(handle, Relation.SELF))
    steps.reverse()
    return steps


def _unwind_backward(parents: _Parents, meeting: str) -> list[PathStep]:
    """
    Steps after `meeting` on the way to the backward origin.

    Backward pointers record how each person relates to the one that found
    it, i.e. the edge seen walking away from the target; walking towards
    the target needs the inverse relation.
    """
    steps: list[PathStep] = []
    handle = meeting
    while (parent := parents[handle]) is not None:
        steps.append(PathStep(parent.handle, parent.relation.inverse))
        handle = parent.handle
    return steps
