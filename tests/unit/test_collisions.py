"""Tests for layout/collisions.py: spacing rules, detection, resolution, safe offsets."""

from __future__ import annotations

import pytest

from pedigree_layout.config import LayoutOptions
from pedigree_layout.layout.collisions import (
    Collision,
    SpacingRules,
    find_collisions,
    has_collisions,
    resolve_collisions,
    safe_offset,
)
from pedigree_layout.model.graph import PedigreeGraph
from pedigree_layout.model.pedigree import create_pedigree, create_person, create_relationship

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_rules(*couples: tuple[str, str], siblings: tuple[str, ...] = ()) -> SpacingRules:
    """Persons A..E; the given couples are partners and `siblings` share parent P."""
    ped = create_pedigree("FAM")
    for pid in ("P", "A", "B", "C", "D", "E"):
        ped.persons[pid] = create_person(pid, "FAM")
    for pid in siblings:
        ped.persons[pid].father_id = "P"
    for a, b in couples:
        rel = create_relationship(a, b, relationship_id=f"{a}+{b}")
        ped.relationships[rel.id] = rel
    return SpacingRules(PedigreeGraph.from_pedigree(ped), LayoutOptions())


# ─── Spacing Rules ────────────────────────────────────────────────────────────


class TestSpacingRules:
    def test_partner_gap(self):
        assert make_rules(("A", "B")).gap("A", "B") == 110

    def test_sibling_gap(self):
        assert make_rules(siblings=("A", "B")).gap("A", "B") == 90

    def test_unrelated_gap(self):
        assert make_rules().gap("A", "B") == 80

    def test_partners_win_over_siblings(self):
        assert make_rules(("A", "B"), siblings=("A", "B")).spacing("A", "B") == 60


# ─── Detection ────────────────────────────────────────────────────────────────


class TestFindCollisions:
    def test_clean_row(self):
        rules = make_rules()
        assert find_collisions(["A", "B"], {"A": 0.0, "B": 80.0}, rules) == []
        assert not has_collisions(["A", "B"], {"A": 0.0, "B": 80.0}, rules)

    def test_partner_deficit(self):
        found = find_collisions(["A", "B"], {"A": 0.0, "B": 100.0}, make_rules(("A", "B")))
        assert found == [Collision(left="A", right="B", deficit=pytest.approx(10.0))]

    def test_uses_x_order_not_row_order(self):
        rules = make_rules()
        found = find_collisions(["A", "B"], {"A": 100.0, "B": 50.0}, rules)
        assert [(c.left, c.right) for c in found] == [("B", "A")]

    def test_tolerance(self):
        rules = make_rules()
        assert find_collisions(["A", "B"], {"A": 0.0, "B": 80.0 - 1e-9}, rules) == []


# ─── Resolution ───────────────────────────────────────────────────────────────


class TestResolveCollisions:
    def test_cascades_right(self):
        xs = {"A": 0.0, "B": 50.0, "C": 100.0}
        shifts = resolve_collisions(["A", "B", "C"], xs, make_rules())
        assert shifts == 2
        assert xs == pytest.approx({"A": 0.0, "B": 80.0, "C": 160.0})

    def test_single_sweep_leaves_row_clean(self):
        rules = make_rules(("A", "B"), siblings=("C", "D"))
        xs = {"A": 0.0, "B": 10.0, "C": 20.0, "D": 30.0, "E": 40.0}
        row = list(xs)
        resolve_collisions(row, xs, rules)
        assert not has_collisions(row, xs, rules)

    def test_clean_row_untouched(self):
        xs = {"A": 0.0, "B": 200.0}
        assert resolve_collisions(["A", "B"], xs, make_rules()) == 0
        assert xs == {"A": 0.0, "B": 200.0}


# ─── Safe Offset ──────────────────────────────────────────────────────────────


class TestSafeOffset:
    def test_stops_before_collision(self):
        xs = {"A": 0.0, "B": 100.0}
        offset = safe_offset(["A", "B"], xs, {"A"}, 50.0, make_rules(), 5)
        assert offset == pytest.approx(20.0)
        assert xs == {"A": 0.0, "B": 100.0}

    def test_full_shift_when_clear(self):
        xs = {"A": 0.0, "B": 100.0}
        assert safe_offset(["A", "B"], xs, {"A"}, -30.0, make_rules(), 5) == pytest.approx(-30.0)

    def test_shift_not_multiple_of_step(self):
        xs = {"A": 0.0, "B": 100.0}
        assert safe_offset(["A", "B"], xs, {"A"}, -12.0, make_rules(), 5) == pytest.approx(-12.0)

    def test_zero_shift(self):
        assert safe_offset(["A"], {"A": 0.0}, {"A"}, 0.0, make_rules(), 5) == 0.0

    def test_nothing_moving(self):
        assert safe_offset(["A"], {"A": 0.0}, set(), 40.0, make_rules(), 5) == 0.0

    def test_group_moves_together(self):
        xs = {"A": 0.0, "B": 110.0, "C": 300.0}
        offset = safe_offset(["A", "B", "C"], xs, {"A", "B"}, 200.0, make_rules(("A", "B")), 5)
        # B may approach C until their 80-unit gap is reached
        assert offset == pytest.approx(110.0)
