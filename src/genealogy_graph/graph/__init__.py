"""Relationship-graph engine: neighbors, paths, kinship, trees, connectivity."""

from genealogy_graph.graph.classifier import Classification, RelationshipClassifier
from genealogy_graph.graph.connectivity import Cluster, ConnectivityAnalyzer
from genealogy_graph.graph.index import FamilyIndex, Neighbor, NeighborResolver
from genealogy_graph.graph.limits import TraversalBudget
from genealogy_graph.graph.paths import PathFinder, PathStep, PathStrategy
from genealogy_graph.graph.trees import TreeBuilder

__all__ = [
    "Classification",
    "Cluster",
    "ConnectivityAnalyzer",
    "FamilyIndex",
    "Neighbor",
    "NeighborResolver",
    "PathFinder",
    "PathStep",
    "PathStrategy",
    "RelationshipClassifier",
    "TraversalBudget",
    "TreeBuilder",
]
