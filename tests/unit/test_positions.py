"""Tests for layout/positions.py: initial placement and the centering passes."""

from __future__ import annotations

import pytest

from pedigree_layout.config import LayoutOptions
from pedigree_layout.layout.collisions import SpacingRules, has_collisions
from pedigree_layout.layout.generations import GenerationAssignment
from pedigree_layout.layout.ordering import build_family_units, order_generations
from pedigree_layout.layout.positions import (
    assign_initial_positions,
    center_children,
    center_parents,
    parents_center,
    row_y,
)
from pedigree_layout.model.graph import PedigreeGraph
from pedigree_layout.model.pedigree import Pedigree, create_pedigree, create_person, create_relationship

# ─── Helpers ──────────────────────────────────────────────────────────────────


def family(*children: str) -> Pedigree:
    """A+B with the given children."""
    ped = create_pedigree("FAM")
    for pid in ("A", "B"):
        ped.persons[pid] = create_person(pid, "FAM")
    for pid in children:
        person = create_person(pid, "FAM")
        person.father_id = "A"
        person.mother_id = "B"
        ped.persons[pid] = person
    rel = create_relationship("A", "B", relationship_id="A+B")
    rel.children_ids = list(children)
    ped.relationships[rel.id] = rel
    return ped


def prepare(ped: Pedigree):
    """Run the phases that precede positioning."""
    options = LayoutOptions()
    graph = PedigreeGraph.from_pedigree(ped)
    assignment = GenerationAssignment.assign(graph)
    units = build_family_units(graph, assignment.generations, options)
    rows = order_generations(graph, assignment, units)
    return graph, units, rows, SpacingRules(graph, options), options


# ─── Tests ────────────────────────────────────────────────────────────────────


class TestRowY:
    def test_row_height(self):
        assert row_y(0, LayoutOptions()) == 0
        assert row_y(2, LayoutOptions()) == 300


class TestParentsCenter:
    def test_mean_of_placed_parents(self):
        graph, *_ = prepare(family("C"))
        assert parents_center("C", graph, {"A": 0.0, "B": 110.0}) == pytest.approx(55.0)

    def test_one_parent_placed(self):
        graph, *_ = prepare(family("C"))
        assert parents_center("C", graph, {"A": 20.0}) == pytest.approx(20.0)

    def test_founder_has_no_center(self):
        graph, *_ = prepare(family("C"))
        assert parents_center("A", graph, {"A": 0.0, "B": 110.0}) is None


class TestInitialPositions:
    def test_sibship_starts_left_of_parents_center(self):
        graph, units, rows, rules, options = prepare(family("C", "D"))
        xs = assign_initial_positions(rows, graph, units, rules, options)
        assert xs == pytest.approx({"A": 0.0, "B": 110.0, "C": 10.0, "D": 100.0})

    def test_never_left_of_cursor(self):
        graph, units, rows, rules, options = prepare(family("C", "D", "E"))
        xs = assign_initial_positions(rows, graph, units, rules, options)
        assert xs["C"] == pytest.approx(0.0)
        assert xs["D"] == pytest.approx(90.0)
        assert xs["E"] == pytest.approx(180.0)

    def test_sibship_offset_follows_unit_width(self):
        graph, units, rows, rules, options = prepare(family("C", "D"))
        units[0].children_width = options.node_width
        xs = assign_initial_positions(rows, graph, units, rules, options)
        assert xs["C"] == pytest.approx(55.0)
        assert xs["D"] == pytest.approx(145.0)

    def test_rows_start_clean(self):
        graph, units, rows, rules, options = prepare(family("C", "D", "E"))
        xs = assign_initial_positions(rows, graph, units, rules, options)
        for row in rows:
            assert not has_collisions(row, xs, rules)


class TestCentering:
    def test_parents_follow_wide_sibship(self):
        graph, units, rows, rules, options = prepare(family("C", "D", "E"))
        xs = assign_initial_positions(rows, graph, units, rules, options)
        moved = center_parents(rows, xs, units, rules, options)
        assert moved == 1
        assert xs["A"] == pytest.approx(35.0)
        assert xs["B"] == pytest.approx(145.0)

    def test_already_centred_parents_stay(self):
        graph, units, rows, rules, options = prepare(family("C", "D"))
        xs = assign_initial_positions(rows, graph, units, rules, options)
        assert center_parents(rows, xs, units, rules, options) == 0
        assert xs["A"] == pytest.approx(0.0)

    def test_children_move_under_parents(self):
        graph, units, rows, rules, options = prepare(family("C", "D"))
        xs = {"A": 200.0, "B": 310.0, "C": 10.0, "D": 100.0}
        moved = center_children(rows, xs, graph, units, rules, options)
        assert moved == 1
        assert (xs["C"] + xs["D"]) / 2 == pytest.approx(255.0)
        assert xs["D"] - xs["C"] == pytest.approx(90.0)

    def test_single_generation_is_noop(self):
        ped = create_pedigree("FAM")
        ped.persons["A"] = create_person("A", "FAM")
        graph, units, rows, rules, options = prepare(ped)
        xs = assign_initial_positions(rows, graph, units, rules, options)
        assert center_parents(rows, xs, units, rules, options) == 0
        assert center_children(rows, xs, graph, units, rules, options) == 0
