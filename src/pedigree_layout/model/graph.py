"""Pedigree graph: a read-only topology snapshot for layout and rendering.

This module owns the graph view consumed by every downstream phase. It
flattens the three places a parent/child link can be recorded (father/mother
ids, a person's children list, a relationship's children list) into one
networkx DiGraph, and spouse ids plus relationships into one undirected
partner Graph. References to persons that are not in the pedigree are
skipped, so the rest of the pipeline never sees a dangling id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import networkx as nx

from pedigree_layout.model.pedigree import Pedigree, Person
from pedigree_layout.types import PartnershipStatus, Sex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Union:
    """A relationship as seen by layout: its present partners and children."""

    id: str
    partners: tuple[str, ...]
    children: tuple[str, ...]
    consanguineous: bool = False
    status: PartnershipStatus | None = None


class PedigreeGraph:
    """Immutable snapshot of pedigree topology (ids and links only).

    The snapshot keeps references to the Person records it was built from so
    layout nodes can point back at them, but it never writes to them.
    """

    def __init__(
        self,
        persons: dict[str, Person],
        lineage: nx.DiGraph,
        partners: nx.Graph,
        parents: dict[str, tuple[str | None, str | None]],
        unions: list[Union],
    ) -> None:
        self._persons = persons
        self.lineage = nx.freeze(lineage)
        self.partners = nx.freeze(partners)
        self._parents = parents
        self.unions: tuple[Union, ...] = tuple(unions)

    @classmethod
    def from_pedigree(cls, pedigree: Pedigree) -> PedigreeGraph:
        """Build a snapshot from a Pedigree, skipping unresolvable references."""
        persons = dict(pedigree.persons)
        lineage: nx.DiGraph = nx.DiGraph()
        partners: nx.Graph = nx.Graph()
        parents: dict[str, tuple[str | None, str | None]] = {}

        for pid in persons:
            lineage.add_node(pid)
            partners.add_node(pid)

        for pid, person in persons.items():
            father = _resolve(persons, person.father_id, pid, "father")
            mother = _resolve(persons, person.mother_id, pid, "mother")
            parents[pid] = (father, mother)
            for parent in (father, mother):
                if parent is not None:
                    lineage.add_edge(parent, pid)

        for pid, person in persons.items():
            for child_id in person.children_ids:
                if _resolve(persons, child_id, pid, "child") is not None:
                    lineage.add_edge(pid, child_id)
            for spouse_id in person.spouse_ids:
                if spouse_id == pid:
                    logger.debug("Person %s lists itself as a spouse; ignored", pid)
                    continue
                if _resolve(persons, spouse_id, pid, "spouse") is not None:
                    partners.add_edge(pid, spouse_id)

        unions: list[Union] = []
        for rel in pedigree.relationships.values():
            present = tuple(
                p
                for p in dict.fromkeys((rel.person1_id, rel.person2_id))
                if _resolve(persons, p, rel.id, "partner") is not None
            )
            if not present:
                continue
            if len(present) == 2:
                partners.add_edge(*present)
            children = tuple(
                c for c in dict.fromkeys(rel.children_ids) if _resolve(persons, c, rel.id, "child") is not None
            )
            for parent in present:
                for child_id in children:
                    if parent != child_id:
                        lineage.add_edge(parent, child_id)
            unions.append(
                Union(
                    id=rel.id,
                    partners=present,
                    children=children,
                    consanguineous=rel.is_consanguineous,
                    status=rel.partnership_status,
                )
            )

        return cls(persons=persons, lineage=lineage, partners=partners, parents=parents, unions=unions)

    # ─── Queries ─────────────────────────────────────────────────────────────

    @property
    def person_ids(self) -> list[str]:
        return list(self._persons)

    def has_person(self, person_id: str | None) -> bool:
        return person_id is not None and person_id in self._persons

    def person(self, person_id: str) -> Person:
        return self._persons[person_id]

    def sex(self, person_id: str) -> Sex:
        return self._persons[person_id].sex

    def parents(self, person_id: str) -> tuple[str | None, str | None]:
        """Resolved (father, mother); an unresolvable parent is None."""
        return self._parents.get(person_id, (None, None))

    def parent_ids(self, person_id: str) -> list[str]:
        """Every present parent, including ones only known from children lists."""
        if person_id not in self.lineage:
            return []
        return [p for p in self.lineage.predecessors(person_id) if p != person_id]

    def children(self, person_id: str) -> list[str]:
        if person_id not in self.lineage:
            return []
        return [c for c in self.lineage.successors(person_id) if c != person_id]

    def spouses(self, person_id: str) -> list[str]:
        if person_id not in self.partners:
            return []
        return list(self.partners.neighbors(person_id))

    def are_partners(self, a: str, b: str) -> bool:
        return self.partners.has_edge(a, b)

    def are_siblings(self, a: str, b: str) -> bool:
        if a == b:
            return False
        return bool(set(self.parent_ids(a)) & set(self.parent_ids(b)))

    def union_between(self, a: str, b: str) -> Union | None:
        for union in self.unions:
            if set(union.partners) == {a, b}:
                return union
        return None

    def node_count(self) -> int:
        return len(self._persons)

    def edge_count(self) -> int:
        return self.lineage.number_of_edges()

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self.lineage)


def _resolve(persons: dict[str, Person], ref: str | None, owner: str, role: str) -> str | None:
    if ref is None:
        return None
    if ref not in persons:
        logger.debug("Skipping dangling %s reference %r on %s", role, ref, owner)
        return None
    return ref
