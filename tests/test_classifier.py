"""Tests for kinship classification."""

from __future__ import annotations

import pytest

from genealogy_graph.core.models import Gender, PathNode, Relation, RelationshipType
from genealogy_graph.graph.classifier import (
    RelationshipClassifier,
    ancestor_term,
    collateral_term,
    descendant_term,
    ordinal,
)

P, C, S = Relation.PARENT, Relation.CHILD, Relation.SPOUSE


def make_path(relations: list[Relation], gender: Gender = Gender.UNKNOWN) -> list[PathNode]:
    """Path of anonymous people; only the target carries a gender."""
    path = [PathNode(handle="p0")]
    for i, relation in enumerate(relations, 1):
        path.append(PathNode(handle=f"p{i}", relationship=relation))
    path[-1] = path[-1].model_copy(update={"gender": gender})
    return path


@pytest.fixture
def classifier() -> RelationshipClassifier:
    return RelationshipClassifier()


class TestOrdinal:
    @pytest.mark.parametrize("n,expected", [
        (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
        (11, "11th"), (12, "12th"), (13, "13th"),
        (21, "21st"), (22, "22nd"), (23, "23rd"), (101, "101st"), (111, "111th"),
    ])
    def test_ordinal(self, n, expected):
        assert ordinal(n) == expected


class TestTerms:
    """Tests for the term builders."""

    def test_ancestors(self):
        assert ancestor_term(1, Gender.FEMALE) == "Mother"
        assert ancestor_term(2, Gender.MALE) == "Grandfather"
        assert ancestor_term(3, Gender.FEMALE) == "Great-Grandmother"
        assert ancestor_term(5, Gender.UNKNOWN) == "Great-Great-Great-Grandparent"

    def test_descendants(self):
        assert descendant_term(1, Gender.MALE) == "Son"
        assert descendant_term(2, Gender.FEMALE) == "Granddaughter"
        assert descendant_term(4, Gender.MALE) == "Great-Great-Grandson"

    def test_aunts_and_nieces(self):
        assert collateral_term(2, 1, Gender.FEMALE) == "Aunt"
        assert collateral_term(3, 1, Gender.MALE) == "Great-Uncle"
        assert collateral_term(1, 2, Gender.FEMALE) == "Niece"
        assert collateral_term(1, 4, Gender.UNKNOWN) == "Great-Great-Niece/Nephew"

    def test_cousins(self):
        assert collateral_term(2, 2, Gender.MALE) == "1st cousin"
        assert collateral_term(3, 3, Gender.MALE) == "2nd cousin"
        assert collateral_term(2, 3, Gender.MALE) == "1st cousin, 1 time removed"
        assert collateral_term(4, 2, Gender.MALE) == "1st cousin, 2 times removed"
        assert collateral_term(13, 13, Gender.MALE) == "12th cousin"


class TestClassify:
    """Tests for RelationshipClassifier.classify."""

    def test_empty_path(self, classifier: RelationshipClassifier):
        result = classifier.classify([])
        assert result.description == "No known relationship"
        assert result.type == RelationshipType.DISTANT

    def test_self(self, classifier: RelationshipClassifier):
        result = classifier.classify(make_path([]))
        assert result.description == "Self"
        assert result.type == RelationshipType.SELF

    @pytest.mark.parametrize("relation,gender,term,kind", [
        (P, Gender.MALE, "Father", RelationshipType.PARENT),
        (P, Gender.FEMALE, "Mother", RelationshipType.PARENT),
        (P, Gender.UNKNOWN, "Parent", RelationshipType.PARENT),
        (C, Gender.FEMALE, "Daughter", RelationshipType.CHILD),
        (C, Gender.UNKNOWN, "Child", RelationshipType.CHILD),
        (S, Gender.MALE, "Husband", RelationshipType.SPOUSE),
        (S, Gender.UNKNOWN, "Spouse", RelationshipType.SPOUSE),
    ])
    def test_direct(self, classifier, relation, gender, term, kind):
        result = classifier.classify(make_path([relation], gender))
        assert result.description == term
        assert result.type == kind

    def test_direct_common_ancestor(self, classifier: RelationshipClassifier):
        to_parent = make_path([P])
        assert classifier.classify(to_parent).common_ancestor == to_parent[1]
        to_child = make_path([C])
        assert classifier.classify(to_child).common_ancestor == to_child[0]
        assert classifier.classify(make_path([S])).common_ancestor is None

    def test_sibling(self, classifier: RelationshipClassifier):
        path = make_path([P, C], Gender.FEMALE)
        result = classifier.classify(path)
        assert result.description == "Sister"
        assert result.type == RelationshipType.SIBLING
        assert result.common_ancestor == path[1]
        assert (result.degree, result.removal) == (0, 0)

    def test_unknown_gender_sibling(self, classifier: RelationshipClassifier):
        assert classifier.classify(make_path([P, C])).description == "Sibling"

    def test_ancestor(self, classifier: RelationshipClassifier):
        path = make_path([P, P, P], Gender.MALE)
        result = classifier.classify(path)
        assert result.description == "Great-Grandfather"
        assert result.type == RelationshipType.ANCESTOR
        assert result.common_ancestor == path[3]
        assert result.degree is None

    def test_descendant(self, classifier: RelationshipClassifier):
        path = make_path([C, C], Gender.FEMALE)
        result = classifier.classify(path)
        assert result.description == "Granddaughter"
        assert result.type == RelationshipType.DESCENDANT
        assert result.common_ancestor == path[0]

    def test_aunt_is_cousin_type(self, classifier: RelationshipClassifier):
        path = make_path([P, P, C], Gender.FEMALE)
        result = classifier.classify(path)
        assert result.description == "Aunt"
        assert result.type == RelationshipType.COUSIN
        assert result.common_ancestor == path[2]
        assert (result.degree, result.removal) == (0, 1)

    def test_nephew(self, classifier: RelationshipClassifier):
        result = classifier.classify(make_path([P, C, C], Gender.MALE))
        assert result.description == "Nephew"
        assert (result.degree, result.removal) == (0, 1)

    def test_second_cousin_removed(self, classifier: RelationshipClassifier):
        path = make_path([P, P, P, C, C, C, C])
        result = classifier.classify(path)
        assert result.description == "2nd cousin, 1 time removed"
        assert result.type == RelationshipType.COUSIN
        assert result.common_ancestor == path[3]
        assert (result.degree, result.removal) == (2, 1)

    @pytest.mark.parametrize("relations", [
        [S, P],
        [P, S],
        [C, P],
        [P, C, P],
        [S, C, C],
    ])
    def test_non_monotonic_is_distant(self, classifier, relations):
        result = classifier.classify(make_path(relations))
        assert result.description == "Distant relative"
        assert result.type == RelationshipType.DISTANT
        assert result.common_ancestor is None


class TestDecompose:
    def test_monotonic(self):
        assert RelationshipClassifier.decompose(make_path([P, P, C])) == (2, 1)
        assert RelationshipClassifier.decompose(make_path([C, C])) == (0, 2)
        assert RelationshipClassifier.decompose(make_path([P])) == (1, 0)

    def test_non_monotonic(self):
        assert RelationshipClassifier.decompose(make_path([P, C, P])) is None
        assert RelationshipClassifier.decompose(make_path([S])) is None
