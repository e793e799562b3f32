"""
Entity store interface.

The graph engine does not own data. Stores hand it typed Person and
Family snapshots; each request reads one snapshot and builds its own
FamilyIndex from it.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from genealogy_graph.core.models import Family, Person
from genealogy_graph.graph.index import FamilyIndex


class EntityStore(ABC):
    """
    Abstract source of Person and Family records.

    Implementations must return typed models; `get_person` returns None
    for unknown handles.
    """

    @abstractmethod
    async def get_person(self, handle: str) -> Person | None:
        """Get a person by handle."""
        pass

    @abstractmethod
    async def list_people(self) -> list[Person]:
        """All people, in a stable order."""
        pass

    @abstractmethod
    async def list_families(self) -> list[Family]:
        """All families, in a stable order."""
        pass

    async def families_by_child(self, handle: str) -> list[Family]:
        """Families listing `handle` as a child. Scans unless overridden."""
        return [f for f in await self.list_families() if handle in f.child_handles]

    async def families_by_parent(self, handle: str) -> list[Family]:
        """Families listing `handle` as father or mother. Scans unless overridden."""
        return [f for f in await self.list_families() if handle in f.parent_handles]

    async def snapshot(self) -> FamilyIndex:
        """Read people and families together and index them."""
        people, families = await asyncio.gather(self.list_people(), self.list_families())
        return FamilyIndex(people, families)

    async def close(self) -> None:
        """Release any connections held by the store."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
