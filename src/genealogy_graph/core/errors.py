"""Exception hierarchy for the relationship-graph engine."""

from __future__ import annotations


class GenealogyGraphError(Exception):
    """Base class for all engine errors."""


class PersonNotFoundError(GenealogyGraphError):
    """A requested person handle is not in the snapshot."""
    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"Person not found: {handle}")


class TraversalLimitExceeded(GenealogyGraphError):
    """A traversal hit its node budget, deadline or was cancelled."""
    def __init__(self, reason: str, visited: int = 0):
        self.reason = reason
        self.visited = visited
        super().__init__(f"Traversal stopped after {visited} nodes: {reason}")


class StoreError(GenealogyGraphError):
    """The entity store could not deliver a snapshot."""


class SnapshotFormatError(StoreError):
    """A snapshot file could not be read."""
