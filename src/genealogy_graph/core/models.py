"""
Core data models for the relationship-graph engine.

These models define the typed boundary between the entity store and the
graph code:
- Person and Family snapshots as read from a store
- Path and tree nodes returned to chart and relationship views
- Relationship results with kinship classification

The graph engine never sees untyped records. Every child-list encoding a
store may produce is normalised here, once, at ingestion.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

logger = logging.getLogger(__name__)

_YEAR_PATTERN = re.compile(r"\d{4}")


class Gender(str, Enum):
    """Gender of a person as used for kinship terms."""
    FEMALE = "female"
    MALE = "male"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> Gender:
        """
        Parse any known gender encoding.

        Accepts Gramps integers (0 female, 1 male, 2 unknown), GEDCOM
        letters (F, M, U) and the enum values. Anything else is UNKNOWN.
        """
        if isinstance(value, Gender):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return {0: cls.FEMALE, 1: cls.MALE}.get(value, cls.UNKNOWN)
        if isinstance(value, str):
            return {
                "f": cls.FEMALE,
                "female": cls.FEMALE,
                "m": cls.MALE,
                "male": cls.MALE,
            }.get(value.strip().lower(), cls.UNKNOWN)
        return cls.UNKNOWN


class Relation(str, Enum):
    """Label of the edge connecting a path node to its predecessor."""
    SELF = "self"
    PARENT = "parent"
    SPOUSE = "spouse"
    CHILD = "child"

    @property
    def inverse(self) -> Relation:
        """The same edge seen from the other end."""
        return {
            Relation.PARENT: Relation.CHILD,
            Relation.CHILD: Relation.PARENT,
        }.get(self, self)


class RelationshipType(str, Enum):
    """Coarse relationship category reported to the UI."""
    SELF = "self"
    PARENT = "parent"
    CHILD = "child"
    SIBLING = "sibling"
    SPOUSE = "spouse"
    COUSIN = "cousin"
    ANCESTOR = "ancestor"
    DESCENDANT = "descendant"
    IN_LAW = "in-law"
    DISTANT = "distant"


def extract_year(date_str: str | None) -> int | None:
    """Return the first four-digit year in a date string of any precision."""
    if not date_str:
        return None
    match = _YEAR_PATTERN.search(date_str)
    return int(match.group(0)) if match else None


def parse_child_refs(value: Any) -> list[str]:
    """
    Normalise a child list into a plain list of handles.

    Accepted encodings:
    - ["h1", "h2"]
    - [{"ref": "h1"}, {"ref": "h2"}]   (Gramps child_ref_list)
    - a JSON string holding either of the above

    Raises ValueError when the value cannot be read as a list at all.
    Individual entries without a usable handle are skipped.
    """
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        if not value.strip():
            return []
        value = json.loads(value)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"child list must be an array, got {type(value).__name__}")

    handles: list[str] = []
    for item in value:
        ref = (item.get("ref") or item.get("handle")) if isinstance(item, dict) else item
        if isinstance(ref, str) and ref.strip():
            handles.append(ref.strip())
    return handles


class Person(BaseModel):
    """
    Individual person as seen by the graph engine.

    Read-only snapshot: the store creates, mutates and deletes people.
    Dates keep their original precision ("1862", "1862-01-15", ...).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    handle: str = Field(min_length=1)
    gramps_id: str = Field(
        default="",
        validation_alias=AliasChoices("gramps_id", "grampsId"),
    )
    given_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("given_name", "first_name", "firstName"),
    )
    surname: str | None = None
    gender: Gender = Gender.UNKNOWN
    birth_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("birth_date", "birthDate"),
    )
    death_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("death_date", "deathDate"),
    )

    @field_validator("gender", mode="before")
    @classmethod
    def validate_gender(cls, v) -> Gender:
        return Gender.parse(v)

    @field_validator("gramps_id", mode="before")
    @classmethod
    def validate_gramps_id(cls, v):
        """Treat a missing Gramps ID as empty."""
        return v or ""

    @computed_field
    @property
    def name(self) -> str:
        """Display name: "Given Surname", or "Unknown" if both are blank."""
        full = f"{self.given_name or ''} {self.surname or ''}".strip()
        return full or "Unknown"

    @property
    def birth_year(self) -> int | None:
        return extract_year(self.birth_date)

    @property
    def death_year(self) -> int | None:
        return extract_year(self.death_date)


class Family(BaseModel):
    """
    Family record: the only relation primitive.

    A hyperedge linking up to two parents and an ordered list of children.
    Spouse and parent/child edges are both derived from it.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    handle: str = Field(min_length=1)
    gramps_id: str = Field(
        default="",
        validation_alias=AliasChoices("gramps_id", "grampsId"),
    )
    father_handle: str | None = Field(
        default=None,
        validation_alias=AliasChoices("father_handle", "fatherHandle"),
    )
    mother_handle: str | None = Field(
        default=None,
        validation_alias=AliasChoices("mother_handle", "motherHandle"),
    )
    child_handles: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "child_handles", "child_ref_list", "childRefList", "children"
        ),
    )

    @field_validator("gramps_id", mode="before")
    @classmethod
    def validate_gramps_id(cls, v):
        return v or ""

    @field_validator("father_handle", "mother_handle", mode="before")
    @classmethod
    def validate_parent_handles(cls, v):
        """Blank parent handles mean "no parent"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("child_handles", mode="before")
    @classmethod
    def validate_child_handles(cls, v, info) -> list[str]:
        """Normalise child references; a broken list fails this record only."""
        try:
            return parse_child_refs(v)
        except ValueError as e:
            logger.warning(
                "Ignoring unreadable child list on family %s: %s",
                info.data.get("handle", "?"),
                e,
            )
            return []

    @property
    def parent_handles(self) -> list[str]:
        """Father then mother, skipping absent parents."""
        return [h for h in (self.father_handle, self.mother_handle) if h]

    @property
    def member_handles(self) -> list[str]:
        """Every person this family links, parents first."""
        return self.parent_handles + list(self.child_handles)


class PathNode(BaseModel):
    """
    One person on a relationship path.

    `relationship` names the edge from the previous node to this one;
    the first node of every path carries "self".
    """
    handle: str
    gramps_id: str = ""
    name: str = "Unknown"
    gender: Gender = Gender.UNKNOWN
    relationship: Relation = Relation.SELF

    @classmethod
    def from_person(cls, person: Person, relationship: Relation = Relation.SELF) -> PathNode:
        return cls(
            handle=person.handle,
            gramps_id=person.gramps_id,
            name=person.name,
            gender=person.gender,
            relationship=relationship,
        )


class TreeNode(BaseModel):
    """
    Node of an ancestor, descendant or fan-chart tree.

    `children` holds the next generation outward from the root: parents
    (father first) on ancestor trees, children on descendant trees.
    """
    person: Person
    handle: str
    gramps_id: str = ""
    name: str = "Unknown"
    gender: Gender = Gender.UNKNOWN
    generation: int = Field(ge=0)
    sosa: int | None = None  # Ahnentafel number, ancestor trees only
    children: list[TreeNode] = Field(default_factory=list)

    @classmethod
    def for_person(cls, person: Person, generation: int, sosa: int | None = None) -> TreeNode:
        return cls(
            person=person,
            handle=person.handle,
            gramps_id=person.gramps_id,
            name=person.name,
            gender=person.gender,
            generation=generation,
            sosa=sosa,
        )

    def depth(self) -> int:
        """Number of generations in this subtree, the node itself included."""
        return 1 + max((child.depth() for child in self.children), default=0)

    def iter_nodes(self):
        """Yield every node of the subtree, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()


class RelationshipResult(BaseModel):
    """
    Result of a relationship calculation between two people.

    "No known relationship" is a regular result: an empty path,
    distance -1 and type "distant".
    """
    model_config = ConfigDict(populate_by_name=True)

    person1: PathNode
    person2: PathNode
    relationship: str
    common_ancestor: PathNode | None = Field(default=None, alias="commonAncestor")
    path: list[PathNode] = Field(default_factory=list)
    distance: int = -1
    relationship_type: RelationshipType = Field(
        default=RelationshipType.DISTANT, alias="relationshipType"
    )
    degree: int | None = None
    removal: int | None = None

    @property
    def is_related(self) -> bool:
        return self.distance >= 0


class TreeChart(BaseModel):
    """Mixed chart: a person with ancestors above and descendants below."""
    person: Person
    ancestors: TreeNode | None = None
    descendants: TreeNode | None = None


class GraphNode(BaseModel):
    """Force-directed graph vertex."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    gramps_id: str = Field(default="", alias="grampsId")
    name: str
    gender: Gender = Gender.UNKNOWN
    birth_year: int | None = Field(default=None, alias="birthYear")
    death_year: int | None = Field(default=None, alias="deathYear")


class GraphLink(BaseModel):
    """Force-directed graph edge: parent -> child, or between spouses."""
    source: str
    target: str
    type: Literal["parent", "spouse"]


class GraphData(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)
    stats: dict[str, int] = Field(default_factory=dict)


class ClusterSummary(BaseModel):
    """One connected group of people."""
    root: str  # handle of the first member in snapshot order
    count: int
    members: list[Person] = Field(default_factory=list)


class DisconnectedReport(BaseModel):
    """
    People outside the main tree.

    `branches` lists everyone not reachable from the root person;
    `clusters` breaks the whole population into connected groups,
    largest first.
    """
    count: int
    branches: list[Person] = Field(default_factory=list)
    clusters: list[ClusterSummary] = Field(default_factory=list)
