"""
Generation-bounded ancestor and descendant trees for chart rendering.

The generation ceiling is the termination guarantee: every recursive call
checks it before touching the index, so no family data, cyclic or not,
can take recursion past `max_generations` levels. A lineage set (the
people on the current root-to-node chain) additionally cuts branches where
somebody is recorded as their own ancestor. It does not stop pedigree
collapse, where the same ancestor legitimately appears on several
branches.
"""

from __future__ import annotations

import logging

from genealogy_graph.core.models import TreeNode
from genealogy_graph.graph.index import FamilyIndex
from genealogy_graph.graph.limits import TraversalBudget

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Build ancestor (pedigree/fan chart) and descendant trees."""

    def __init__(self, index: FamilyIndex, budget: TraversalBudget | None = None):
        self.index = index
        self.budget = budget or TraversalBudget.unlimited()

    def build_ancestor_tree(self, handle: str, max_generations: int) -> TreeNode | None:
        """
        Ancestors of `handle`, root at generation 0.

        Each node's children are its father and mother (when recorded),
        from the first family listing the person as a child. Nodes carry
        their Sosa/Ahnentafel number.
        """
        tree = self._ancestors(handle, 0, max_generations, 1, frozenset())
        if tree is not None:
            logger.debug("Ancestor tree for %s: %d generations", handle, tree.depth())
        return tree

    def build_descendant_tree(self, handle: str, max_generations: int) -> TreeNode | None:
        """
        Descendants of `handle`, root at generation 0.

        Each node's children are every child of every family in which the
        person is a parent, in family then child-list order.
        """
        tree = self._descendants(handle, 0, max_generations, frozenset())
        if tree is not None:
            logger.debug("Descendant tree for %s: %d generations", handle, tree.depth())
        return tree

    def _ancestors(
        self,
        handle: str,
        generation: int,
        max_generations: int,
        sosa: int,
        lineage: frozenset[str],
    ) -> TreeNode | None:
        if generation >= max_generations:
            return None
        if handle in lineage:
            logger.warning("Cycle in ancestry: %s is recorded as their own ancestor", handle)
            return None

        person = self.index.get_person(handle)
        if person is None:
            return None

        self.budget.charge()
        node = TreeNode.for_person(person, generation, sosa=sosa)

        families = self.index.families_as_child(handle)
        if families:
            family = families[0]
            lineage = lineage | {handle}
            for parent_handle, parent_sosa in (
                (family.father_handle, 2 * sosa),
                (family.mother_handle, 2 * sosa + 1),
            ):
                if not parent_handle:
                    continue
                parent = self._ancestors(
                    parent_handle, generation + 1, max_generations, parent_sosa, lineage
                )
                if parent is not None:
                    node.children.append(parent)

        return node

    def _descendants(
        self,
        handle: str,
        generation: int,
        max_generations: int,
        lineage: frozenset[str],
    ) -> TreeNode | None:
        if generation >= max_generations:
            return None
        if handle in lineage:
            logger.warning("Cycle in descent: %s is recorded as their own descendant", handle)
            return None

        person = self.index.get_person(handle)
        if person is None:
            return None

        self.budget.charge()
        node = TreeNode.for_person(person, generation)

        lineage = lineage | {handle}
        for family in self.index.families_as_parent(handle):
            for child_handle in family.child_handles:
                child = self._descendants(child_handle, generation + 1, max_generations, lineage)
                if child is not None:
                    node.children.append(child)

        return node
