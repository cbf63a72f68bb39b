"""Position assignment and centering.

Phases:
  1. Initial placement, top row first, left to right
  2. Parent centering, bottom row to top
  3. Child centering, top row to bottom

Positions are symbol centres kept in a plain {person_id: x} dict; rows are
the per-generation orders from the ordering phase and are never reordered.
Centering shifts go through `safe_offset`, and every row a centering pass
touches is swept with `resolve_collisions` before and after.
"""

from __future__ import annotations

import logging

from pedigree_layout.config import LayoutOptions
from pedigree_layout.layout.collisions import SpacingRules, resolve_collisions, safe_offset
from pedigree_layout.layout.types import FamilyUnit
from pedigree_layout.model.graph import PedigreeGraph

logger = logging.getLogger(__name__)


def row_y(generation: int, options: LayoutOptions) -> float:
    return generation * options.row_height


def parents_center(person_id: str, graph: PedigreeGraph, xs: dict[str, float]) -> float | None:
    """Mean x of the person's parents that already have a position."""
    placed = [xs[p] for p in graph.parent_ids(person_id) if p in xs]
    if not placed:
        return None
    return sum(placed) / len(placed)


def _generation_index(rows: list[list[str]]) -> dict[str, int]:
    return {pid: gen for gen, row in enumerate(rows) for pid in row}


# ─── Initial Placement ───────────────────────────────────────────────────────


def _preferred_x(
    person_id: str,
    previous: str | None,
    graph: PedigreeGraph,
    unit_of_child: dict[str, FamilyUnit],
    xs: dict[str, float],
    options: LayoutOptions,
) -> float | None:
    center = parents_center(person_id, graph, xs)
    if center is None:
        return None
    unit = unit_of_child.get(person_id)
    if unit is None or (previous is not None and previous in unit.children):
        return center
    # First of its sibship: start far enough left that the sibship centres on the parents
    return center - (unit.children_width - options.node_width) / 2


def assign_initial_positions(
    rows: list[list[str]],
    graph: PedigreeGraph,
    units: list[FamilyUnit],
    rules: SpacingRules,
    options: LayoutOptions,
) -> dict[str, float]:
    """Place every row left to right, never left of the running cursor."""
    unit_of_child: dict[str, FamilyUnit] = {c: unit for unit in units for c in unit.children}
    xs: dict[str, float] = {}

    for gen, row in enumerate(rows):
        previous: str | None = None
        for pid in row:
            min_x = 0.0 if previous is None else xs[previous] + rules.gap(previous, pid)
            x = min_x
            if gen > 0:
                candidate = _preferred_x(pid, previous, graph, unit_of_child, xs, options)
                if candidate is not None and candidate >= min_x:
                    x = candidate
            xs[pid] = x
            previous = pid

    return xs


# ─── Centering Passes ────────────────────────────────────────────────────────


def _midpoint(ids: list[str], xs: dict[str, float]) -> float:
    values = [xs[i] for i in ids]
    return (min(values) + max(values)) / 2


def center_parents(
    rows: list[list[str]],
    xs: dict[str, float],
    units: list[FamilyUnit],
    rules: SpacingRules,
    options: LayoutOptions,
) -> int:
    """Move each unit's parents, jointly, toward the midpoint of their children.

    Walks from the second-to-last row up to the top. Returns how many units moved.
    """
    gen_of = _generation_index(rows)
    moved = 0
    for gen in range(len(rows) - 2, -1, -1):
        row = rows[gen]
        resolve_collisions(row, xs, rules)
        for unit in units:
            parents = [p for p in unit.parents if gen_of.get(p) == gen]
            children = [c for c in unit.children if gen_of.get(c) == gen + 1]
            if not parents or not children:
                continue
            shift = _midpoint(children, xs) - _midpoint(parents, xs)
            offset = safe_offset(row, xs, set(parents), shift, rules, options.safe_offset_step)
            if offset == 0.0:
                continue
            for pid in parents:
                xs[pid] += offset
            moved += 1
        resolve_collisions(row, xs, rules)
    logger.debug("Parent centering moved %d unit(s)", moved)
    return moved


def center_children(
    rows: list[list[str]],
    xs: dict[str, float],
    graph: PedigreeGraph,
    units: list[FamilyUnit],
    rules: SpacingRules,
    options: LayoutOptions,
) -> int:
    """Move each sibship toward the midpoint of its parents, top row to bottom.

    In-laws without parents of their own travel with the sibling they married.
    Returns how many sibships moved.
    """
    gen_of = _generation_index(rows)
    moved = 0
    for gen in range(1, len(rows)):
        row = rows[gen]
        resolve_collisions(row, xs, rules)
        for unit in units:
            children = [c for c in unit.children if gen_of.get(c) == gen]
            parents = [p for p in unit.parents if gen_of.get(p, gen) < gen]
            if not children or not parents:
                continue
            moving = set(children)
            for child_id in children:
                for spouse_id in graph.spouses(child_id):
                    if gen_of.get(spouse_id) == gen and not graph.parent_ids(spouse_id):
                        moving.add(spouse_id)
            shift = _midpoint(parents, xs) - _midpoint(children, xs)
            offset = safe_offset(row, xs, moving, shift, rules, options.safe_offset_step)
            if offset == 0.0:
                continue
            for pid in moving:
                xs[pid] += offset
            moved += 1
        resolve_collisions(row, xs, rules)
    logger.debug("Child centering moved %d sibship(s)", moved)
    return moved
