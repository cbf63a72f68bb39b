"""Pedigree editing with automatic relayout.

Structural edits (adding or deleting a person or relationship) recompute the
whole layout and merge generation/x/y back onto the persons. Attribute edits
keep the current layout. Dragging a person writes its coordinates directly
and bypasses the layout engine until `recalculate_layout` is called.

Callers that edit from several threads must serialize calls; the editor holds
no locks.
"""

from __future__ import annotations

import logging
from dataclasses import fields

from pedigree_layout.layout.engine import PedigreeLayout, apply_layout
from pedigree_layout.layout.types import LayoutNode
from pedigree_layout.model.pedigree import Pedigree, Person, Relationship

logger = logging.getLogger(__name__)

_STRUCTURAL_PERSON_FIELDS = {"father_id", "mother_id", "spouse_ids", "children_ids"}
_PERSON_FIELDS = {f.name for f in fields(Person)} - {"id"}
_RELATIONSHIP_FIELDS = {f.name for f in fields(Relationship)} - {"id", "person1_id", "person2_id"}


class PedigreeEditor:
    def __init__(self, pedigree: Pedigree, engine: PedigreeLayout | None = None) -> None:
        self.pedigree = pedigree
        self.engine = engine or PedigreeLayout()
        self.nodes: dict[str, LayoutNode] = {}
        self.recalculate_layout()

    def recalculate_layout(self) -> dict[str, LayoutNode]:
        self.nodes = self.engine.layout(self.pedigree)
        apply_layout(self.pedigree, self.nodes)
        return self.nodes

    def _person(self, person_id: str) -> Person:
        try:
            return self.pedigree.persons[person_id]
        except KeyError:
            raise KeyError(f"Unknown person '{person_id}'") from None

    def _relationship(self, relationship_id: str) -> Relationship:
        try:
            return self.pedigree.relationships[relationship_id]
        except KeyError:
            raise KeyError(f"Unknown relationship '{relationship_id}'") from None

    # ─── Persons ─────────────────────────────────────────────────────────────

    def add_person(self, person: Person) -> None:
        if person.id in self.pedigree.persons:
            raise ValueError(f"Person '{person.id}' already exists")
        self.pedigree.persons[person.id] = person
        for parent_id in (person.father_id, person.mother_id):
            parent = self.pedigree.get_person(parent_id)
            if parent is not None:
                parent.add_child(person.id)
        self.pedigree.touch()
        self.recalculate_layout()

    def update_person(self, person_id: str, **changes: object) -> Person:
        person = self._person(person_id)
        for name, value in changes.items():
            if name not in _PERSON_FIELDS:
                raise ValueError(f"Cannot update person field '{name}'")
            setattr(person, name, value)
        self.pedigree.touch()
        if _STRUCTURAL_PERSON_FIELDS & set(changes):
            self.recalculate_layout()
        return person

    def delete_person(self, person_id: str) -> None:
        self._person(person_id)
        del self.pedigree.persons[person_id]
        for other in self.pedigree.persons.values():
            other.spouse_ids = [s for s in other.spouse_ids if s != person_id]
            other.children_ids = [c for c in other.children_ids if c != person_id]
            if other.father_id == person_id:
                other.father_id = None
            if other.mother_id == person_id:
                other.mother_id = None
        for rel in list(self.pedigree.relationships.values()):
            if rel.involves(person_id):
                del self.pedigree.relationships[rel.id]
            else:
                rel.children_ids = [c for c in rel.children_ids if c != person_id]
        self.pedigree.touch()
        self.recalculate_layout()

    def move_person(self, person_id: str, x: float, y: float) -> None:
        """Drag relocation: write coordinates directly, no relayout."""
        person = self._person(person_id)
        person.x = x
        person.y = y
        node = self.nodes.get(person_id)
        if node is not None:
            node.x = x
            node.y = y

    # ─── Relationships ───────────────────────────────────────────────────────

    def add_relationship(self, relationship: Relationship) -> None:
        if relationship.id in self.pedigree.relationships:
            raise ValueError(f"Relationship '{relationship.id}' already exists")
        person1 = self._person(relationship.person1_id)
        person2 = self._person(relationship.person2_id)
        self.pedigree.relationships[relationship.id] = relationship
        person1.add_spouse(person2.id)
        person2.add_spouse(person1.id)
        for child_id in relationship.children_ids:
            child = self.pedigree.get_person(child_id)
            if child is None:
                logger.debug("Relationship %s lists unknown child %s", relationship.id, child_id)
                continue
            person1.add_child(child_id)
            person2.add_child(child_id)
        self.pedigree.touch()
        self.recalculate_layout()

    def update_relationship(self, relationship_id: str, **changes: object) -> Relationship:
        rel = self._relationship(relationship_id)
        for name, value in changes.items():
            if name not in _RELATIONSHIP_FIELDS:
                raise ValueError(f"Cannot update relationship field '{name}'")
            setattr(rel, name, value)
        self.pedigree.touch()
        if "children_ids" in changes:
            self.recalculate_layout()
        return rel

    def delete_relationship(self, relationship_id: str) -> None:
        rel = self._relationship(relationship_id)
        del self.pedigree.relationships[relationship_id]
        if self.pedigree.relationship_between(rel.person1_id, rel.person2_id) is None:
            for a, b in (rel.key, rel.key[::-1]):
                person = self.pedigree.get_person(a)
                if person is not None:
                    person.spouse_ids = [s for s in person.spouse_ids if s != b]
        self.pedigree.touch()
        self.recalculate_layout()
