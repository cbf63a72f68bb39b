"""Layout types shared across the layout passes and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field

from pedigree_layout.model.pedigree import Person


@dataclass
class LayoutNode:
    """A positioned person. x is the horizontal centre of the symbol."""

    person: Person
    x: float
    y: float
    generation: int
    order: int
    width: float = 50
    height: float = 50

    @property
    def person_id(self) -> str:
        return self.person.id

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2


@dataclass
class FamilyUnit:
    """One or two parents and their direct children.

    Rebuilt on every layout pass; never persisted.
    """

    id: str
    parents: list[str]
    children: list[str] = field(default_factory=list)
    relationship_id: str | None = None
    generation: int = 0
    children_width: float = 0.0  # children side by side at sibling spacing

    @property
    def is_synthesized(self) -> bool:
        return self.relationship_id is None


# Prefix for units that have no relationship record behind them
SYNTHETIC_UNIT_PREFIX = "__unit_"
