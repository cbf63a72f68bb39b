"""Pedigree records: persons, relationships, and the pedigree that owns them.

These are the mutable system-of-record types edited by the application. The
layout engine never edits them; it reads a `PedigreeGraph` snapshot instead.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from pedigree_layout.types import ChildlessReason, PartnershipStatus, Phenotype, RelationshipType, Sex, TwinType


@dataclass
class PersonStatus:
    deceased: bool = False
    proband: bool = False
    adopted_in: bool = False  # adopted into the family
    adopted_out: bool = False  # adopted out of the family

    @property
    def is_adopted(self) -> bool:
        return self.adopted_in or self.adopted_out


@dataclass
class Person:
    id: str
    family_id: str = ""
    sex: Sex = field(default_factory=Sex.default)
    phenotypes: list[Phenotype] = field(default_factory=lambda: [Phenotype.Unknown])
    father_id: str | None = None
    mother_id: str | None = None
    spouse_ids: list[str] = field(default_factory=list)
    children_ids: list[str] = field(default_factory=list)
    label: str | None = None
    status: PersonStatus = field(default_factory=PersonStatus)
    twin_type: TwinType | None = None
    twin_group_id: str | None = None  # persons sharing an id are twins of one birth

    # Derived by layout; only written when a caller merges a layout back.
    generation: int | None = None
    x: float | None = None
    y: float | None = None

    @property
    def display_label(self) -> str:
        return self.label or self.id

    @property
    def is_founder(self) -> bool:
        return self.father_id is None and self.mother_id is None

    @property
    def is_affected(self) -> bool:
        return Phenotype.Affected in self.phenotypes

    def add_spouse(self, spouse_id: str) -> None:
        if spouse_id != self.id and spouse_id not in self.spouse_ids:
            self.spouse_ids.append(spouse_id)

    def add_child(self, child_id: str) -> None:
        if child_id not in self.children_ids:
            self.children_ids.append(child_id)


@dataclass
class Relationship:
    id: str
    person1_id: str
    person2_id: str
    type: RelationshipType = RelationshipType.Spouse
    children_ids: list[str] = field(default_factory=list)
    partnership_status: PartnershipStatus | None = None
    consanguinity_degree: int | None = None  # 1 = first cousins
    childless_reason: ChildlessReason | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.person1_id, self.person2_id)

    @property
    def is_consanguineous(self) -> bool:
        return self.type == RelationshipType.Consanguineous

    def involves(self, person_id: str) -> bool:
        return person_id in (self.person1_id, self.person2_id)

    def partner_of(self, person_id: str) -> str | None:
        if person_id == self.person1_id:
            return self.person2_id
        if person_id == self.person2_id:
            return self.person1_id
        return None


@dataclass
class Pedigree:
    """A family: persons and relationships keyed by id, in insertion order."""

    family_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str | None = None
    persons: dict[str, Person] = field(default_factory=dict)
    relationships: dict[str, Relationship] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    modified_at: datetime = field(default_factory=datetime.now)

    def get_person(self, person_id: str | None) -> Person | None:
        if person_id is None:
            return None
        return self.persons.get(person_id)

    def relationship_between(self, a: str, b: str) -> Relationship | None:
        for rel in self.relationships.values():
            if {rel.person1_id, rel.person2_id} == {a, b}:
                return rel
        return None

    def relationships_of(self, person_id: str) -> list[Relationship]:
        return [rel for rel in self.relationships.values() if rel.involves(person_id)]

    def founders(self) -> list[Person]:
        return [p for p in self.persons.values() if p.is_founder]

    def touch(self) -> None:
        self.modified_at = datetime.now()


def create_person(person_id: str, family_id: str = "", sex: Sex = Sex.Unknown) -> Person:
    return Person(id=person_id, family_id=family_id, sex=sex)


def create_relationship(
    person1_id: str,
    person2_id: str,
    type: RelationshipType = RelationshipType.Spouse,
    relationship_id: str | None = None,
) -> Relationship:
    return Relationship(
        id=relationship_id or str(uuid.uuid4()),
        person1_id=person1_id,
        person2_id=person2_id,
        type=type,
    )


def create_pedigree(family_id: str) -> Pedigree:
    return Pedigree(family_id=family_id)
