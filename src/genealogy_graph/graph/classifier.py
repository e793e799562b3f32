"""
Kinship classification of relationship paths.

A path is read from the first person's point of view: the display term
describes what the last person is to the first one ("Mother",
"2nd cousin, 1 time removed", ...).

Paths longer than one edge are decomposed into a run of parent edges
(steps up to the common ancestor) followed by a run of child edges (steps
down from it). Paths of any other shape, such as those crossing a spouse
edge (in-laws, step-relatives), are reported as "Distant relative".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from genealogy_graph.core.models import Gender, PathNode, Relation, RelationshipType

# (male, female, neutral)
_TERMS: dict[str, tuple[str, str, str]] = {
    "parent": ("Father", "Mother", "Parent"),
    "child": ("Son", "Daughter", "Child"),
    "spouse": ("Husband", "Wife", "Spouse"),
    "sibling": ("Brother", "Sister", "Sibling"),
    "grandparent": ("Grandfather", "Grandmother", "Grandparent"),
    "grandchild": ("Grandson", "Granddaughter", "Grandchild"),
    "aunt_uncle": ("Uncle", "Aunt", "Aunt/Uncle"),
    "niece_nephew": ("Nephew", "Niece", "Niece/Nephew"),
}

GREAT = "Great-"


def gendered_term(kind: str, gender: Gender) -> str:
    """Look up a kinship term for the target person's gender."""
    male, female, neutral = _TERMS[kind]
    if gender == Gender.MALE:
        return male
    if gender == Gender.FEMALE:
        return female
    return neutral


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 22 -> '22nd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def ancestor_term(generations: int, gender: Gender) -> str:
    if generations == 1:
        return gendered_term("parent", gender)
    return GREAT * (generations - 2) + gendered_term("grandparent", gender)


def descendant_term(generations: int, gender: Gender) -> str:
    if generations == 1:
        return gendered_term("child", gender)
    return GREAT * (generations - 2) + gendered_term("grandchild", gender)


def collateral_term(steps_up: int, steps_down: int, gender: Gender) -> str:
    """Aunt/uncle, niece/nephew and cousin terms (steps_up, steps_down > 0)."""
    degree = min(steps_up, steps_down) - 1
    removal = abs(steps_up - steps_down)

    if degree == 0:
        if removal == 0:
            return gendered_term("sibling", gender)
        prefix = GREAT * (removal - 1)
        if steps_up > steps_down:
            return prefix + gendered_term("aunt_uncle", gender)
        return prefix + gendered_term("niece_nephew", gender)

    term = f"{ordinal(degree)} cousin"
    if removal == 0:
        return term
    return f"{term}, {removal} time{'s' if removal > 1 else ''} removed"


@dataclass
class Classification:
    """Outcome of classifying one path."""
    description: str
    type: RelationshipType
    common_ancestor: PathNode | None = None
    degree: int | None = None
    removal: int | None = None


class RelationshipClassifier:
    """Turn a relationship path into a kinship term."""

    def classify(self, path: Sequence[PathNode]) -> Classification:
        if not path:
            return Classification("No known relationship", RelationshipType.DISTANT)

        if len(path) == 1:
            return Classification("Self", RelationshipType.SELF)

        target = path[-1]

        if len(path) == 2:
            if target.relationship == Relation.PARENT:
                return Classification(
                    gendered_term("parent", target.gender),
                    RelationshipType.PARENT,
                    common_ancestor=target,
                )
            if target.relationship == Relation.CHILD:
                return Classification(
                    gendered_term("child", target.gender),
                    RelationshipType.CHILD,
                    common_ancestor=path[0],
                )
            if target.relationship == Relation.SPOUSE:
                return Classification(
                    gendered_term("spouse", target.gender), RelationshipType.SPOUSE
                )
            return self._distant()

        decomposed = self.decompose(path)
        if decomposed is None:
            return self._distant()

        steps_up, steps_down = decomposed
        top = path[steps_up]

        if steps_up == 1 and steps_down == 1:
            return Classification(
                gendered_term("sibling", target.gender),
                RelationshipType.SIBLING,
                common_ancestor=top,
                degree=0,
                removal=0,
            )

        if steps_down == 0:
            return Classification(
                ancestor_term(steps_up, target.gender),
                RelationshipType.ANCESTOR,
                common_ancestor=top,
            )

        if steps_up == 0:
            return Classification(
                descendant_term(steps_down, target.gender),
                RelationshipType.DESCENDANT,
                common_ancestor=top,
            )

        return Classification(
            collateral_term(steps_up, steps_down, target.gender),
            RelationshipType.COUSIN,
            common_ancestor=top,
            degree=min(steps_up, steps_down) - 1,
            removal=abs(steps_up - steps_down),
        )

    @staticmethod
    def decompose(path: Sequence[PathNode]) -> tuple[int, int] | None:
        """
        Split a path into (steps_up, steps_down).

        Returns None unless the path is all parent edges followed by all
        child edges.
        """
        relations = [node.relationship for node in path[1:]]
        steps_up = 0
        while steps_up < len(relations) and relations[steps_up] == Relation.PARENT:
            steps_up += 1
        rest = relations[steps_up:]
        if any(relation != Relation.CHILD for relation in rest):
            return None
        return steps_up, len(rest)

    @staticmethod
    def _distant() -> Classification:
        return Classification("Distant relative", RelationshipType.DISTANT)
