"""
Read-only GEDCOM 5.5.1 ingestion.

Turns INDI and FAM records into Person and Family snapshots:
- INDI: NAME, SEX, BIRT/DATE, DEAT/DATE
- FAM: HUSB, WIFE, CHIL (in file order)

Cross-reference IDs (@I12@) become both the handle and the Gramps ID
(I12). Everything else in the file is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, TextIO

from genealogy_graph.core.errors import SnapshotFormatError
from genealogy_graph.core.models import Family, Person

logger = logging.getLogger(__name__)

_MONTHS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12
}

_LINE_PATTERN = re.compile(r'^(\d+)\s+(?:(@[^@]+@)\s+)?(\S+)(?:\s+(.*))?$')
_NAME_PATTERN = re.compile(r'^([^/]*)\s*/([^/]*)/(.*)$')


@dataclass
class GedcomLine:
    """A single parsed GEDCOM line."""
    level: int
    tag: str
    value: str = ""
    xref: str | None = None  # @I123@ style ID

    @classmethod
    def parse(cls, line: str) -> GedcomLine | None:
        """Parse a GEDCOM line, or return None for blank/garbled lines."""
        line = line.strip()
        if not line:
            return None

        # Pattern: level [xref] tag [value]
        #   0 @I1@ INDI
        #   1 NAME John /Smith/
        #   2 DATE 15 JAN 1862
        match = _LINE_PATTERN.match(line)
        if not match:
            return None

        return cls(
            level=int(match.group(1)),
            tag=match.group(3),
            value=match.group(4) or "",
            xref=match.group(2),
        )


@dataclass
class GedcomRecord:
    """A complete GEDCOM record (level 0 + subordinates)."""
    id: str | None  # @I123@ style
    tag: str  # INDI, FAM, SOUR, etc.
    lines: list[GedcomLine] = field(default_factory=list)

    def values(self, tag: str) -> list[str]:
        """All level-1 values for a tag, in file order."""
        return [line.value for line in self.lines[1:] if line.level == 1 and line.tag == tag]

    def event_date(self, event_tag: str) -> str | None:
        """DATE value of the first level-1 event with the given tag."""
        in_event = False
        for line in self.lines[1:]:
            if line.level == 1:
                if in_event:
                    break
                in_event = line.tag == event_tag
            elif in_event and line.level == 2 and line.tag == "DATE":
                return line.value
        return None


def strip_xref(xref: str) -> str:
    """@I12@ -> I12"""
    return xref.strip().strip("@")


def gedcom_date_to_iso(value: str | None) -> str | None:
    """
    Convert an exact GEDCOM date to ISO precision-preserving form.

    "15 JAN 1862" -> "1862-01-15", "JAN 1862" -> "1862-01",
    "1862" -> "1862". Dates with modifiers (ABT, BEF, BET...AND) are
    returned unchanged; their year is still extractable.
    """
    if not value or not value.strip():
        return None

    parts = value.upper().split()
    if len(parts) == 1 and parts[0].isdigit():
        return parts[0]
    if len(parts) == 2 and parts[0] in _MONTHS and parts[1].isdigit():
        return f"{parts[1]}-{_MONTHS[parts[0]]:02d}"
    if len(parts) == 3 and parts[0].isdigit() and parts[1] in _MONTHS and parts[2].isdigit():
        return f"{parts[2]}-{_MONTHS[parts[1]]:02d}-{int(parts[0]):02d}"
    return value.strip()


class GedcomReader:
    """
    Parse a GEDCOM file into Person and Family snapshots.

    Unknown record types are skipped. References to individuals that are
    not defined in the file are kept; the graph engine treats them as
    absent.
    """

    def __init__(self):
        self.individuals: dict[str, GedcomRecord] = {}
        self.families: dict[str, GedcomRecord] = {}

    def load(self, path: str | Path) -> tuple[list[Person], list[Family]]:
        """Load a GEDCOM file and return (people, families)."""
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8-sig") as f:
                return self.read(f)
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotFormatError(f"Cannot read GEDCOM file {path}: {e}") from e

    def read(self, file: TextIO | Iterable[str]) -> tuple[list[Person], list[Family]]:
        """Parse GEDCOM lines and return (people, families) for this input only."""
        self.individuals = {}
        self.families = {}
        for record in self._records(file):
            if not record.id:
                continue
            if record.tag == "INDI":
                self.individuals[record.id] = record
            elif record.tag == "FAM":
                self.families[record.id] = record

        people = [self._person(xref, rec) for xref, rec in self.individuals.items()]
        families = [self._family(xref, rec) for xref, rec in self.families.items()]
        logger.debug("Read %d individuals and %d families", len(people), len(families))
        return people, families

    def _records(self, file: TextIO | Iterable[str]) -> Iterable[GedcomRecord]:
        current: GedcomRecord | None = None

        for line in file:
            parsed = GedcomLine.parse(line)
            if not parsed:
                continue

            if parsed.level == 0:
                if current:
                    yield current
                # "0 @I1@ INDI": the record type lands in the tag slot
                current = GedcomRecord(id=parsed.xref, tag=parsed.tag, lines=[parsed])
            elif current:
                current.lines.append(parsed)

        if current:
            yield current

    def _person(self, xref: str, record: GedcomRecord) -> Person:
        given = surname = None
        names = record.values("NAME")
        if names:
            match = _NAME_PATTERN.match(names[0])
            if match:
                given = match.group(1).strip() or None
                surname = match.group(2).strip() or None
            else:
                given = names[0].strip() or None

        sex = record.values("SEX")
        handle = strip_xref(xref)
        return Person(
            handle=handle,
            gramps_id=handle,
            given_name=given,
            surname=surname,
            gender=sex[0] if sex else "U",
            birth_date=gedcom_date_to_iso(record.event_date("BIRT")),
            death_date=gedcom_date_to_iso(record.event_date("DEAT")),
        )

    def _family(self, xref: str, record: GedcomRecord) -> Family:
        husband = record.values("HUSB")
        wife = record.values("WIFE")
        handle = strip_xref(xref)
        return Family(
            handle=handle,
            gramps_id=handle,
            father_handle=strip_xref(husband[0]) if husband else None,
            mother_handle=strip_xref(wife[0]) if wife else None,
            child_handles=[strip_xref(c) for c in record.values("CHIL")],
        )
