"""Tests for core data models."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from genealogy_graph.core.models import (
    Family,
    Gender,
    PathNode,
    Person,
    Relation,
    RelationshipResult,
    TreeNode,
    extract_year,
    parse_child_refs,
)


class TestGender:
    """Tests for gender parsing."""

    @pytest.mark.parametrize("value,expected", [
        (0, Gender.FEMALE),
        (1, Gender.MALE),
        (2, Gender.UNKNOWN),
        ("F", Gender.FEMALE),
        ("m", Gender.MALE),
        ("U", Gender.UNKNOWN),
        ("female", Gender.FEMALE),
        (" Male ", Gender.MALE),
        (None, Gender.UNKNOWN),
        (True, Gender.UNKNOWN),
        ("x", Gender.UNKNOWN),
    ])
    def test_parse(self, value, expected):
        assert Gender.parse(value) == expected

    def test_gramps_integer_on_person(self):
        """Gramps integer genders are accepted on Person."""
        assert Person(handle="h", gender=0).gender == Gender.FEMALE
        assert Person(handle="h", gender=1).gender == Gender.MALE


class TestRelation:
    def test_inverse(self):
        assert Relation.PARENT.inverse == Relation.CHILD
        assert Relation.CHILD.inverse == Relation.PARENT
        assert Relation.SPOUSE.inverse == Relation.SPOUSE
        assert Relation.SELF.inverse == Relation.SELF


class TestChildRefs:
    """Tests for child list normalisation."""

    def test_plain_handles(self):
        assert parse_child_refs(["a", "b"]) == ["a", "b"]

    def test_gramps_ref_objects(self):
        assert parse_child_refs([{"ref": "a"}, {"ref": "b"}]) == ["a", "b"]

    def test_json_string(self):
        assert parse_child_refs('[{"ref": "a"}, "b"]') == ["a", "b"]

    def test_empty_values(self):
        assert parse_child_refs(None) == []
        assert parse_child_refs("") == []
        assert parse_child_refs([]) == []

    def test_entries_without_handle_skipped(self):
        assert parse_child_refs([{"ref": ""}, {"other": 1}, 5, "a"]) == ["a"]

    def test_non_list_rejected(self):
        with pytest.raises(ValueError):
            parse_child_refs('{"ref": "a"}')

    def test_invalid_json_rejected(self):
        with pytest.raises(ValueError):
            parse_child_refs("not json")


class TestPerson:
    """Tests for Person model."""

    def test_name(self):
        person = Person(handle="h", given_name="Jean", surname="HERINCKX")
        assert person.name == "Jean HERINCKX"

    def test_name_partial(self):
        assert Person(handle="h", surname="HERINCKX").name == "HERINCKX"
        assert Person(handle="h", given_name="Jean").name == "Jean"

    def test_name_unknown(self):
        assert Person(handle="h").name == "Unknown"
        assert Person(handle="h", given_name="", surname=" ").name == "Unknown"

    def test_aliases(self):
        person = Person.model_validate({
            "handle": "h",
            "grampsId": "I0001",
            "first_name": "Jean",
            "birthDate": "1862-01-15",
        })
        assert person.gramps_id == "I0001"
        assert person.given_name == "Jean"
        assert person.birth_year == 1862

    def test_years_any_precision(self):
        person = Person(handle="h", birth_date="1862", death_date="ABT 1930")
        assert person.birth_year == 1862
        assert person.death_year == 1930

    def test_missing_handle_rejected(self):
        with pytest.raises(ValidationError):
            Person(handle="")

    def test_frozen(self):
        person = Person(handle="h")
        with pytest.raises(ValidationError):
            person.surname = "X"

    def test_serialises_name(self):
        data = Person(handle="h", given_name="Jean").model_dump()
        assert data["name"] == "Jean"
        assert data["gender"] == Gender.UNKNOWN


class TestFamily:
    """Tests for Family model."""

    def test_child_ref_list_alias(self):
        family = Family.model_validate({
            "handle": "f",
            "father_handle": "a",
            "child_ref_list": [{"ref": "b"}, {"ref": "c"}],
        })
        assert family.child_handles == ["b", "c"]

    def test_malformed_child_list_is_empty(self, caplog):
        """A broken child list only costs this family its children."""
        with caplog.at_level(logging.WARNING):
            family = Family(handle="F_BROKEN", father_handle="a", child_handles="{{broken")
        assert family.child_handles == []
        assert family.father_handle == "a"
        assert "F_BROKEN" in caplog.text

    def test_blank_parent_is_none(self):
        family = Family(handle="f", father_handle="", mother_handle="m")
        assert family.father_handle is None
        assert family.parent_handles == ["m"]

    def test_member_handles(self):
        family = Family(handle="f", father_handle="a", mother_handle="b", child_handles=["c"])
        assert family.member_handles == ["a", "b", "c"]


class TestTreeNode:
    def test_depth_and_iteration(self):
        root = TreeNode.for_person(Person(handle="r"), 0)
        child = TreeNode.for_person(Person(handle="c"), 1)
        child.children.append(TreeNode.for_person(Person(handle="g"), 2))
        root.children.append(child)

        assert root.depth() == 3
        assert [n.handle for n in root.iter_nodes()] == ["r", "c", "g"]

    def test_negative_generation_rejected(self):
        with pytest.raises(ValidationError):
            TreeNode.for_person(Person(handle="r"), -1)


class TestRelationshipResult:
    def test_camel_case_aliases(self):
        node = PathNode(handle="a")
        result = RelationshipResult(person1=node, person2=node, relationship="Self", distance=0)
        data = result.model_dump(by_alias=True)
        assert "commonAncestor" in data
        assert "relationshipType" in data
        assert result.is_related

    def test_unrelated(self):
        node = PathNode(handle="a")
        result = RelationshipResult(person1=node, person2=node, relationship="No known relationship")
        assert result.distance == -1
        assert not result.is_related


def test_extract_year():
    assert extract_year("1862-01-15") == 1862
    assert extract_year("BET 1850 AND 1860") == 1850
    assert extract_year("unknown") is None
    assert extract_year(None) is None
