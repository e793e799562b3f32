"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from genealogy_graph.config import GraphConfig
from genealogy_graph.core.models import Family, Person
from genealogy_graph.graph.index import FamilyIndex, NeighborResolver
from genealogy_graph.service import GraphService
from genealogy_graph.store.memory import InMemoryStore


def person(handle: str, given: str, surname: str = "HERINCKX", gender: str = "unknown",
           birth: str | None = None, death: str | None = None) -> Person:
    """Shorthand person factory."""
    return Person(
        handle=handle,
        gramps_id=handle.upper(),
        given_name=given,
        surname=surname,
        gender=gender,
        birth_date=birth,
        death_date=death,
    )


# =============================================================================
# Sample Data Fixtures
# =============================================================================
#
#   gf + gm
#   |-- dad + mom
#   |   |-- me + wife
#   |   |   `-- son
#   |   |       `-- grandson
#   |   `-- sis
#   `-- aunt + uncle (married in)
#       `-- cousin
#           `-- cousin_kid
#
#   loner (no families)

@pytest.fixture
def family_people() -> list[Person]:
    """People of the sample three-branch family."""
    return [
        person("gf", "Jean Joseph", gender="male", birth="1840", death="1901-04-02"),
        person("gm", "Marie", "DE SMET", gender="female", birth="1845"),
        person("dad", "Victor", gender="male", birth="1870-05-01"),
        person("mom", "Anna", "PEETERS", gender="female"),
        person("aunt", "Rosa", gender="female"),
        person("uncle", "Karel", "JANSSENS", gender="male"),
        person("me", "Frank", gender="male", birth="1900"),
        person("sis", "Elise", gender="female"),
        person("wife", "Louise", "MAES", gender="female"),
        person("son", "Paul", gender="male"),
        person("grandson", "Luc", gender="male"),
        person("cousin", "Jan", "JANSSENS", gender="male"),
        person("cousin_kid", "Mia", "JANSSENS", gender="female"),
        person("loner", "Nobody", "NIEMAND"),
    ]


@pytest.fixture
def family_families() -> list[Family]:
    """Families of the sample three-branch family."""
    return [
        Family(handle="F_G", father_handle="gf", mother_handle="gm", child_handles=["dad", "aunt"]),
        Family(handle="F_P", father_handle="dad", mother_handle="mom", child_handles=["me", "sis"]),
        Family(handle="F_A", father_handle="uncle", mother_handle="aunt", child_handles=["cousin"]),
        Family(handle="F_M", father_handle="me", mother_handle="wife", child_handles=["son"]),
        Family(handle="F_S", father_handle="son", child_handles=["grandson"]),
        Family(handle="F_C", father_handle="cousin", child_handles=["cousin_kid"]),
    ]


@pytest.fixture
def index(family_people: list[Person], family_families: list[Family]) -> FamilyIndex:
    """Index over the sample family."""
    return FamilyIndex(family_people, family_families)


@pytest.fixture
def resolver(index: FamilyIndex) -> NeighborResolver:
    return NeighborResolver(index)


@pytest.fixture
def store(family_people: list[Person], family_families: list[Family]) -> InMemoryStore:
    """In-memory store over the sample family."""
    return InMemoryStore(family_people, family_families)


@pytest.fixture
def config() -> GraphConfig:
    return GraphConfig(max_nodes=10_000, timeout_seconds=None)


@pytest.fixture
def service(store: InMemoryStore, config: GraphConfig) -> GraphService:
    return GraphService(store, config)


# =============================================================================
# Edge-case Fixtures
# =============================================================================

@pytest.fixture
def one_parent_index() -> FamilyIndex:
    """F1 = {father: A, mother: none, children: [B, C]}, genders unknown."""
    return FamilyIndex(
        [person("A", "Adam", gender="male"), person("B", "Bo"), person("C", "Cy")],
        [Family(handle="F1", father_handle="A", child_handles=["B", "C"])],
    )


@pytest.fixture
def cyclic_index() -> FamilyIndex:
    """X is recorded as Y's father and Y as X's father."""
    return FamilyIndex(
        [person("X", "Xavier", gender="male"), person("Y", "Yves", gender="male")],
        [
            Family(handle="FX", father_handle="X", child_handles=["Y"]),
            Family(handle="FY", father_handle="Y", child_handles=["X"]),
        ],
    )


@pytest.fixture
def collapse_index() -> FamilyIndex:
    """
    Pedigree collapse: first cousins c1 and c2 marry and have kid.

    Great-grandparents ggf + ggm appear on both sides of kid's pedigree.
    """
    return FamilyIndex(
        [
            person("ggf", "Old", gender="male"),
            person("ggm", "Olga", gender="female"),
            person("p1", "Piet", gender="male"),
            person("p2", "Paula", gender="female"),
            person("c1", "Karl", gender="male"),
            person("c2", "Katrien", gender="female"),
            person("kid", "Kim"),
        ],
        [
            Family(handle="FG", father_handle="ggf", mother_handle="ggm", child_handles=["p1", "p2"]),
            Family(handle="F1", father_handle="p1", child_handles=["c1"]),
            Family(handle="F2", mother_handle="p2", child_handles=["c2"]),
            Family(handle="FK", father_handle="c1", mother_handle="c2", child_handles=["kid"]),
        ],
    )


# =============================================================================
# Snapshot File Fixtures
# =============================================================================

@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """JSON snapshot mixing both child-list encodings and a broken record."""
    data = {
        "people": [
            {"handle": "h1", "gramps_id": "I0001", "first_name": "Jean", "surname": "HERINCKX", "gender": 1},
            {"handle": "h2", "gramps_id": "I0002", "first_name": "Marie", "surname": "DE SMET", "gender": 0},
            {"handle": "h3", "gramps_id": "I0003", "first_name": "Victor", "surname": "HERINCKX", "gender": 1},
            {"handle": "h4", "gramps_id": "I0004", "first_name": "Frank", "surname": "HERINCKX", "gender": 2},
            {"handle": "h5", "gramps_id": "I0005", "first_name": "Lost", "surname": "SOUL"},
            {"gramps_id": "I9999"},
        ],
        "families": [
            {"handle": "f1", "father_handle": "h1", "mother_handle": "h2",
             "child_ref_list": [{"ref": "h3"}, {"ref": "h4"}]},
            {"handle": "f2", "father_handle": "h3", "child_handles": "[\"h_missing\"]"},
            {"handle": "f3", "father_handle": "h4", "child_handles": "not json"},
        ],
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def sample_gedcom_content() -> str:
    """Sample minimal GEDCOM file content."""
    return """0 HEAD
1 SOUR Genealogy Graph
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I001@ INDI
1 NAME Jean Joseph /HERINCKX/
1 SEX M
1 BIRT
2 DATE 15 MAR 1895
2 PLAC Tervuren, Brabant, Belgium
1 DEAT
2 DATE 22 AUG 1962
1 FAMS @F001@
0 @I002@ INDI
1 NAME Marie Catherine /DE SMET/
1 SEX F
1 BIRT
2 DATE ABT 1897
1 FAMS @F001@
0 @I003@ INDI
1 NAME Victor /HERINCKX/
1 SEX M
1 FAMC @F001@
0 @I004@ INDI
1 NAME Frank /HERINCKX/
1 FAMC @F001@
0 @F001@ FAM
1 HUSB @I001@
1 WIFE @I002@
1 CHIL @I003@
1 CHIL @I004@
1 MARR
2 DATE 12 JUN 1890
0 TRLR
"""


@pytest.fixture
def sample_gedcom_file(tmp_path: Path, sample_gedcom_content: str) -> Path:
    """Create a temporary GEDCOM file."""
    gedcom_path = tmp_path / "test_family.ged"
    gedcom_path.write_text(sample_gedcom_content)
    return gedcom_path
