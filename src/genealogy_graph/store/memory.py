"""
In-memory entity store.

Holds a fixed population, optionally loaded from a snapshot file:
- JSON: {"people": [...], "families": [...]}; child lists may be handle
  arrays, Gramps {"ref": handle} arrays or JSON strings of either
- GEDCOM (.ged / .gedcom)
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from genealogy_graph.core.errors import SnapshotFormatError
from genealogy_graph.core.gedcom import GedcomReader
from genealogy_graph.core.models import Family, Person
from genealogy_graph.store.base import EntityStore

logger = logging.getLogger(__name__)

GEDCOM_SUFFIXES = (".ged", ".gedcom")


class InMemoryStore(EntityStore):
    """Entity store over lists of records, with handle indexes."""

    def __init__(self, people: Iterable[Person] = (), families: Iterable[Family] = ()):
        self._people: dict[str, Person] = {p.handle: p for p in people}
        self._families: list[Family] = list(families)
        self._by_child: dict[str, list[Family]] = defaultdict(list)
        self._by_parent: dict[str, list[Family]] = defaultdict(list)
        for family in self._families:
            for handle in dict.fromkeys(family.child_handles):
                self._by_child[handle].append(family)
            for handle in dict.fromkeys(family.parent_handles):
                self._by_parent[handle].append(family)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemoryStore:
        """
        Build a store from raw snapshot data.

        A person or family record that fails validation is skipped with a
        warning; the rest of the snapshot still loads.
        """
        if not isinstance(data, dict):
            raise SnapshotFormatError("Snapshot must be an object with 'people' and 'families'")

        people = _validate_records(Person, data.get("people") or [], "person")
        families = _validate_records(Family, data.get("families") or [], "family")
        logger.info("Loaded snapshot: %d people, %d families", len(people), len(families))
        return cls(people, families)

    @classmethod
    def from_file(cls, path: str | Path) -> InMemoryStore:
        """Load a JSON or GEDCOM snapshot file."""
        path = Path(path)
        if not path.exists():
            raise SnapshotFormatError(f"Snapshot file not found: {path}")

        if path.suffix.lower() in GEDCOM_SUFFIXES:
            people, families = GedcomReader().load(path)
            logger.info(
                "Loaded GEDCOM %s: %d people, %d families", path.name, len(people), len(families)
            )
            return cls(people, families)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotFormatError(f"Cannot read snapshot {path}: {e}") from e
        return cls.from_dict(data)

    async def get_person(self, handle: str) -> Person | None:
        return self._people.get(handle)

    async def list_people(self) -> list[Person]:
        return list(self._people.values())

    async def list_families(self) -> list[Family]:
        return list(self._families)

    async def families_by_child(self, handle: str) -> list[Family]:
        return list(self._by_child.get(handle, []))

    async def families_by_parent(self, handle: str) -> list[Family]:
        return list(self._by_parent.get(handle, []))


def _validate_records(model, raw: Any, kind: str) -> list:
    if not isinstance(raw, list):
        raise SnapshotFormatError(f"Snapshot {kind} records must be a list")

    records = []
    for i, item in enumerate(raw):
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping invalid %s record #%d: %s", kind, i, e.errors()[0]["msg"])
    return records
