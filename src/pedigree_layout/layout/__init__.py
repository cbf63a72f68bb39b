"""Layout engine public API."""

from __future__ import annotations

from pedigree_layout.layout.collisions import (
    COLLISION_TOLERANCE,
    Collision,
    SpacingRules,
    find_collisions,
    has_collisions,
    resolve_collisions,
    safe_offset,
)
from pedigree_layout.layout.engine import PedigreeLayout, apply_layout, center_globally, full_layout, settle_collisions
from pedigree_layout.layout.generations import (
    GenerationAssignment,
    assign_generations,
    break_cycles,
    greedy_fas_ordering,
    spouse_groups,
)
from pedigree_layout.layout.ordering import build_family_units, order_generations, partner_order, shared_persons
from pedigree_layout.layout.positions import assign_initial_positions, center_children, center_parents, parents_center
from pedigree_layout.layout.types import SYNTHETIC_UNIT_PREFIX, FamilyUnit, LayoutNode

__all__ = [
    "COLLISION_TOLERANCE",
    "SYNTHETIC_UNIT_PREFIX",
    "Collision",
    "FamilyUnit",
    "GenerationAssignment",
    "LayoutNode",
    "PedigreeLayout",
    "SpacingRules",
    "apply_layout",
    "assign_generations",
    "assign_initial_positions",
    "break_cycles",
    "build_family_units",
    "center_children",
    "center_globally",
    "center_parents",
    "find_collisions",
    "full_layout",
    "greedy_fas_ordering",
    "has_collisions",
    "order_generations",
    "parents_center",
    "partner_order",
    "resolve_collisions",
    "safe_offset",
    "settle_collisions",
    "shared_persons",
    "spouse_groups",
]
