"""Core models, errors and ingestion for the relationship-graph engine."""

from genealogy_graph.core.errors import (
    GenealogyGraphError,
    PersonNotFoundError,
    SnapshotFormatError,
    StoreError,
    TraversalLimitExceeded,
)
from genealogy_graph.core.gedcom import GedcomReader
from genealogy_graph.core.models import (
    Family,
    Gender,
    PathNode,
    Person,
    Relation,
    RelationshipResult,
    RelationshipType,
    TreeNode,
)

__all__ = [
    "Family",
    "Gender",
    "PathNode",
    "Person",
    "Relation",
    "RelationshipResult",
    "RelationshipType",
    "TreeNode",
    "GedcomReader",
    "GenealogyGraphError",
    "PersonNotFoundError",
    "SnapshotFormatError",
    "StoreError",
    "TraversalLimitExceeded",
]
