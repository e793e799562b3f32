"""
Resource bounds for graph traversals.

A TraversalBudget is created per request and charged once per node a
traversal visits. It stops pathological inputs (huge or highly cyclic
populations) with TraversalLimitExceeded instead of letting a request run
unbounded.
"""

from __future__ import annotations

import threading
import time

from genealogy_graph.core.errors import TraversalLimitExceeded


class TraversalBudget:
    """
    Node-count, deadline and cancellation guard.

    Args:
        max_nodes: Maximum nodes all traversals sharing this budget may
            visit (None = no cap)
        timeout: Seconds from creation until the deadline (None = no deadline)
    """

    def __init__(self, max_nodes: int | None = None, timeout: float | None = None):
        self.max_nodes = max_nodes
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self.visited = 0
        self._cancelled = threading.Event()

    @classmethod
    def unlimited(cls) -> TraversalBudget:
        return cls()

    def cancel(self) -> None:
        """Ask the running traversal to stop at its next node. Thread-safe."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def charge(self, nodes: int = 1) -> None:
        """Account for visited nodes; raise once any limit is crossed."""
        self.visited += nodes

        if self._cancelled.is_set():
            raise TraversalLimitExceeded("cancelled", self.visited)
        if self.max_nodes is not None and self.visited > self.max_nodes:
            raise TraversalLimitExceeded(
                f"node limit of {self.max_nodes} exceeded", self.visited
            )
        if self.deadline is not None and time.monotonic() > self.deadline:
            raise TraversalLimitExceeded("deadline exceeded", self.visited)
