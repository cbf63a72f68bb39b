"""Family units and left-to-right ordering within each generation.

Ordering rules, in priority order:
  1. A person with several partners sits between them: [A, shared, B, C...].
  2. Partners are adjacent.
  3. Children of one family unit stay contiguous, in the order their
     parents appear in the generation above. A child who married into
     another family is pushed to the edge of the sibship so the in-law
     does not split it.
"""

from __future__ import annotations

import logging
from collections import Counter

from pedigree_layout.config import LayoutOptions
from pedigree_layout.layout.generations import GenerationAssignment
from pedigree_layout.layout.types import SYNTHETIC_UNIT_PREFIX, FamilyUnit
from pedigree_layout.model.graph import PedigreeGraph

logger = logging.getLogger(__name__)


# ─── Family Units ────────────────────────────────────────────────────────────


def _span(count: int, node_width: float, spacing: float) -> float:
    if count <= 0:
        return 0.0
    return count * node_width + (count - 1) * spacing


def _make_unit(
    unit_id: str,
    parents: list[str],
    children: list[str],
    relationship_id: str | None,
    generations: dict[str, int],
    options: LayoutOptions,
) -> FamilyUnit:
    children_width = _span(len(children), options.node_width, options.sibling_spacing)
    return FamilyUnit(
        id=unit_id,
        parents=parents,
        children=children,
        relationship_id=relationship_id,
        generation=generations.get(parents[0], 0),
        children_width=children_width,
    )


def build_family_units(
    graph: PedigreeGraph,
    generations: dict[str, int],
    options: LayoutOptions | None = None,
) -> list[FamilyUnit]:
    """Build one unit per relationship, then synthesize units for unclaimed children.

    A child belongs to at most one unit. Relationship units claim their
    declared children plus any person whose present parents are exactly the
    two partners. Children still unclaimed are grouped by their present
    parents (single-parent or legacy data with no relationship record).
    """
    options = options or LayoutOptions()
    units: list[FamilyUnit] = []
    claimed: set[str] = set()

    for union in graph.unions:
        parents = list(union.partners)
        children: list[str] = [c for c in union.children if c not in claimed]
        if len(parents) == 2:
            pair = set(parents)
            for child_id in graph.children(parents[0]):
                if child_id not in claimed and child_id not in children and set(graph.parent_ids(child_id)) == pair:
                    children.append(child_id)
        claimed.update(children)
        units.append(_make_unit(union.id, parents, children, union.id, generations, options))

    order = {pid: i for i, pid in enumerate(graph.person_ids)}
    pending: dict[tuple[str, ...], list[str]] = {}
    for pid in graph.person_ids:
        for child_id in graph.children(pid):
            if child_id in claimed:
                continue
            key = tuple(sorted(graph.parent_ids(child_id), key=order.__getitem__))
            if len(key) > 2:
                logger.debug("Person %s has %d parents; using the first two", child_id, len(key))
                key = key[:2]
            pending.setdefault(key, []).append(child_id)
            claimed.add(child_id)

    for key, children in pending.items():
        unit_id = SYNTHETIC_UNIT_PREFIX + "+".join(key)
        units.append(_make_unit(unit_id, list(key), children, None, generations, options))

    return units


def shared_persons(graph: PedigreeGraph, units: list[FamilyUnit]) -> list[str]:
    """Persons who are a parent in more than one unit or have several partners."""
    unit_count: Counter[str] = Counter(p for unit in units for p in unit.parents)
    return [pid for pid in graph.person_ids if unit_count[pid] > 1 or len(graph.spouses(pid)) > 1]


def partner_order(person_id: str, graph: PedigreeGraph, units: list[FamilyUnit]) -> list[str]:
    """Partners of a person: those from family units first, then spouse links."""
    partners: list[str] = []
    for unit in units:
        if person_id in unit.parents:
            for other in unit.parents:
                if other != person_id and other not in partners:
                    partners.append(other)
    for spouse_id in graph.spouses(person_id):
        if spouse_id not in partners:
            partners.append(spouse_id)
    return partners


# ─── Generation Ordering ─────────────────────────────────────────────────────


def _sibship_order(
    children: list[str],
    members: set[str],
    seen: set[str],
    graph: PedigreeGraph,
) -> tuple[list[str], str | None]:
    """Order one sibship so in-laws do not split it.

    Children married to someone already sequenced go first (their partner's
    group sits on the left); children married elsewhere go last. Returns
    (ordered_children, lead) where lead, if any, is a married child moved to
    the front whose partners go on its left.
    """
    sibship = set(children)
    earlier = [c for c in children if any(s in seen for s in graph.spouses(c))]
    later = [
        c
        for c in children
        if c not in earlier and any(s in members and s not in sibship for s in graph.spouses(c))
    ]
    single = [c for c in children if c not in earlier and c not in later]
    if not earlier and len(later) > 1:
        return later[:1] + single + later[1:], later[0]
    return earlier + single + later, None


def _candidate_sequence(
    members: list[str],
    previous_row: list[str] | None,
    graph: PedigreeGraph,
    units: list[FamilyUnit],
) -> tuple[list[str], set[str]]:
    member_set = set(members)
    sequence: list[str] = []
    seen: set[str] = set()
    leads: set[str] = set()

    if previous_row:
        prev_pos = {pid: i for i, pid in enumerate(previous_row)}
        parent_units = [u for u in units if any(p in prev_pos for p in u.parents)]
        parent_units.sort(key=lambda u: min(prev_pos[p] for p in u.parents if p in prev_pos))
        for unit in parent_units:
            children = [c for c in unit.children if c in member_set and c not in seen]
            ordered, lead = _sibship_order(children, member_set, seen, graph)
            if lead is not None:
                leads.add(lead)
            sequence.extend(ordered)
            seen.update(ordered)

    sequence.extend(pid for pid in members if pid not in seen)
    return sequence, leads


def _group_generation(
    candidates: list[str],
    leads: set[str],
    shared: set[str],
    graph: PedigreeGraph,
    units: list[FamilyUnit],
) -> list[str]:
    rank = {pid: i for i, pid in enumerate(candidates)}
    placed: dict[str, int] = {}
    groups: list[list[str]] = []

    def claim(group: list[str]) -> None:
        index = len(groups)
        groups.append(group)
        for pid in group:
            placed[pid] = index

    for pid in candidates:
        if pid not in shared:
            continue
        free = [p for p in partner_order(pid, graph, units) if p in rank and p not in placed]
        if pid in placed:
            group = groups[placed[pid]]
            if group[0] == pid:
                group[:0] = free
            else:
                group.extend(free)
            for p in free:
                placed[p] = placed[pid]
            continue
        claim(free[:1] + [pid] + free[1:])

    for pid in candidates:
        if pid in placed:
            continue
        spouses = [s for s in graph.spouses(pid) if s in rank and s not in placed]
        claim(spouses + [pid] if pid in leads else [pid] + spouses)

    groups.sort(key=lambda g: min(rank[m] for m in g))
    return [pid for group in groups for pid in group]


def order_generations(
    graph: PedigreeGraph,
    assignment: GenerationAssignment,
    units: list[FamilyUnit],
) -> list[list[str]]:
    """Return the left-to-right person order of every generation, top row first."""
    by_generation: list[list[str]] = [[] for _ in range(assignment.generation_count)]
    for pid in graph.person_ids:
        by_generation[assignment.generations[pid]].append(pid)

    shared = set(shared_persons(graph, units))
    rows: list[list[str]] = []
    for gen, members in enumerate(by_generation):
        previous = rows[gen - 1] if gen > 0 else None
        candidates, leads = _candidate_sequence(members, previous, graph, units)
        rows.append(_group_generation(candidates, leads, shared, graph, units))
    return rows
