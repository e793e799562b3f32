"""
Genealogy Relationship Graph

Relationship paths, kinship classification, chart trees and connectivity
analysis over Gramps-style Person and Family records.
"""

__version__ = "0.1.0"

from genealogy_graph.core.models import (
    Family,
    Gender,
    Person,
    RelationshipResult,
    RelationshipType,
    TreeNode,
)
from genealogy_graph.service import GraphService

__all__ = [
    "Family",
    "Gender",
    "Person",
    "RelationshipResult",
    "RelationshipType",
    "TreeNode",
    "GraphService",
]
