"""Collision detection and resolution within one generation row.

Two neighbours collide when their centres are closer than the node width plus
the spacing their relation calls for. Resolution pushes the right-hand node
and everything after it right by the exact deficit, so one left-to-right
sweep leaves the row clean.
"""

from __future__ import annotations

from dataclasses import dataclass

from pedigree_layout.config import LayoutOptions
from pedigree_layout.model.graph import PedigreeGraph

# Float slack when comparing a gap with its required minimum
COLLISION_TOLERANCE: float = 1e-6


@dataclass
class Collision:
    left: str
    right: str
    deficit: float


class SpacingRules:
    """Required centre-to-centre distance between two neighbours."""

    def __init__(self, graph: PedigreeGraph, options: LayoutOptions) -> None:
        self.graph = graph
        self.options = options

    def spacing(self, a: str, b: str) -> float:
        if self.graph.are_partners(a, b):
            return self.options.spouse_spacing
        if self.graph.are_siblings(a, b):
            return self.options.sibling_spacing
        return self.options.horizontal_spacing

    def gap(self, a: str, b: str) -> float:
        return self.options.node_width + self.spacing(a, b)


def sorted_row(row: list[str], xs: dict[str, float]) -> list[str]:
    """Row members left to right; ties keep row order."""
    return sorted(row, key=xs.__getitem__)


def find_collisions(row: list[str], xs: dict[str, float], rules: SpacingRules) -> list[Collision]:
    ordered = sorted_row(row, xs)
    found: list[Collision] = []
    for left, right in zip(ordered, ordered[1:]):
        deficit = rules.gap(left, right) - (xs[right] - xs[left])
        if deficit > COLLISION_TOLERANCE:
            found.append(Collision(left=left, right=right, deficit=deficit))
    return found


def has_collisions(row: list[str], xs: dict[str, float], rules: SpacingRules) -> bool:
    return bool(find_collisions(row, xs, rules))


def resolve_collisions(row: list[str], xs: dict[str, float], rules: SpacingRules) -> int:
    """Push overlapping nodes right, cascading. Returns the number of shifts made."""
    ordered = sorted_row(row, xs)
    shifts = 0
    for i in range(1, len(ordered)):
        left, right = ordered[i - 1], ordered[i]
        deficit = rules.gap(left, right) - (xs[right] - xs[left])
        if deficit <= COLLISION_TOLERANCE:
            continue
        for pid in ordered[i:]:
            xs[pid] += deficit
        shifts += 1
    return shifts


def safe_offset(
    row: list[str],
    xs: dict[str, float],
    moving: set[str],
    shift: float,
    rules: SpacingRules,
    step: float,
) -> float:
    """Largest tried part of `shift` that can be applied to `moving` without a collision.

    Tries step, 2*step, ... and finally the full shift, stopping at the first
    magnitude that collides. This is a coarse linear search, so the result can
    fall short of the ideal by up to one step.
    """
    magnitude = abs(shift)
    if magnitude <= COLLISION_TOLERANCE or not moving:
        return 0.0
    direction = 1.0 if shift > 0 else -1.0

    candidates: list[float] = []
    candidate = step
    while candidate < magnitude:
        candidates.append(candidate)
        candidate += step
    candidates.append(magnitude)

    best = 0.0
    for candidate in candidates:
        delta = direction * candidate
        trial = {pid: xs[pid] + delta if pid in moving else xs[pid] for pid in row}
        if has_collisions(row, trial, rules):
            break
        best = candidate
    return direction * best
