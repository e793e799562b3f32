"""
Per-request adjacency index and neighbor derivation.

Family records are hyperedges. FamilyIndex inverts them once per request
into handle -> families-as-child and handle -> families-as-parent maps, so
every neighbor lookup afterwards is a dictionary access instead of a scan
over all families.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, NamedTuple

from genealogy_graph.core.models import Family, Person, Relation

logger = logging.getLogger(__name__)


class Neighbor(NamedTuple):
    """A person adjacent to another, and how."""
    handle: str
    relation: Relation


class FamilyIndex:
    """
    Handle-indexed, read-only view of one snapshot.

    People and families keep their snapshot order. Families referring to
    handles that are not in the snapshot are indexed as they are; lookups
    simply never find those people.
    """

    def __init__(self, people: Iterable[Person], families: Iterable[Family]):
        self._people: dict[str, Person] = {}
        for person in people:
            self._people.setdefault(person.handle, person)

        self._families: list[Family] = list(families)
        self._as_child: dict[str, list[Family]] = defaultdict(list)
        self._as_parent: dict[str, list[Family]] = defaultdict(list)

        for family in self._families:
            for handle in dict.fromkeys(family.parent_handles):
                self._as_parent[handle].append(family)
            seen: set[str] = set()
            for handle in family.child_handles:
                if handle not in seen:
                    seen.add(handle)
                    self._as_child[handle].append(family)

        logger.debug(
            "Indexed %d people and %d families", len(self._people), len(self._families)
        )

    def __contains__(self, handle: object) -> bool:
        return handle in self._people

    def __len__(self) -> int:
        return len(self._people)

    @property
    def people(self) -> list[Person]:
        """All people in snapshot order."""
        return list(self._people.values())

    @property
    def families(self) -> list[Family]:
        return list(self._families)

    def get_person(self, handle: str) -> Person | None:
        return self._people.get(handle)

    def families_as_child(self, handle: str) -> list[Family]:
        """Families listing the person as a child, in snapshot order."""
        return self._as_child.get(handle, [])

    def families_as_parent(self, handle: str) -> list[Family]:
        """Families listing the person as father or mother."""
        return self._as_parent.get(handle, [])


class NeighborResolver:
    """
    Derive parent, spouse and child neighbors from Family records.

    Order: parents (father before mother, per family), then for each
    family the person heads, the other parent followed by the children.
    Handles missing from the snapshot, self-loops and repeated
    (handle, relation) pairs are dropped.
    """

    def __init__(self, index: FamilyIndex):
        self.index = index

    def get_neighbors(self, handle: str) -> list[Neighbor]:
        neighbors: list[Neighbor] = []
        seen: set[Neighbor] = set()

        def add(other: str | None, relation: Relation) -> None:
            if not other or other == handle or other not in self.index:
                return
            neighbor = Neighbor(other, relation)
            if neighbor not in seen:
                seen.add(neighbor)
                neighbors.append(neighbor)

        for family in self.index.families_as_child(handle):
            add(family.father_handle, Relation.PARENT)
            add(family.mother_handle, Relation.PARENT)

        for family in self.index.families_as_parent(handle):
            if family.father_handle == handle:
                add(family.mother_handle, Relation.SPOUSE)
            if family.mother_handle == handle:
                add(family.father_handle, Relation.SPOUSE)
            for child in family.child_handles:
                add(child, Relation.CHILD)

        return neighbors
