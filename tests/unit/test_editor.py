"""Tests for editor.py: editing operations with automatic relayout."""

from __future__ import annotations

import pytest

from pedigree_layout.editor import PedigreeEditor
from pedigree_layout.model.pedigree import Pedigree, PersonStatus, create_person, create_relationship
from pedigree_layout.parsers import parse_ped
from pedigree_layout.types import PartnershipStatus, Sex

SAMPLE = """\
F A 0 0 1 1
F B 0 0 2 1
F C A B 1 1
"""


def make_editor() -> PedigreeEditor:
    ped, _ = parse_ped(SAMPLE)
    return PedigreeEditor(ped)


def layout_snapshot(ped: Pedigree) -> dict[str, tuple]:
    return {pid: (p.x, p.y, p.generation) for pid, p in ped.persons.items()}


class TestInitialLayout:
    def test_positions_merged_on_construction(self):
        editor = make_editor()
        assert set(editor.nodes) == {"A", "B", "C"}
        c = editor.pedigree.persons["C"]
        assert c.generation == 1
        assert c.x == editor.nodes["C"].x


class TestPersons:
    def test_add_person_relayouts(self):
        editor = make_editor()
        child = create_person("D", "F", Sex.Female)
        child.father_id = "A"
        child.mother_id = "B"
        editor.add_person(child)
        assert "D" in editor.nodes
        assert editor.pedigree.persons["D"].generation == 1
        assert "D" in editor.pedigree.persons["A"].children_ids
        assert "D" in editor.pedigree.persons["B"].children_ids

    def test_add_duplicate_rejected(self):
        editor = make_editor()
        with pytest.raises(ValueError, match="already exists"):
            editor.add_person(create_person("A"))

    def test_attribute_update_keeps_layout(self):
        editor = make_editor()
        before = editor.nodes
        editor.update_person("C", label="Carl")
        assert editor.nodes is before
        assert editor.pedigree.persons["C"].display_label == "Carl"

    def test_structural_update_relayouts(self):
        editor = make_editor()
        editor.add_person(create_person("X", "F", Sex.Male))
        assert editor.pedigree.persons["X"].generation == 0
        editor.update_person("X", father_id="C")
        assert editor.pedigree.persons["X"].generation == 2

    def test_update_unknown_field(self):
        editor = make_editor()
        with pytest.raises(ValueError):
            editor.update_person("C", favourite_colour="red")
        with pytest.raises(ValueError):
            editor.update_person("C", id="Z")

    def test_update_unknown_person(self):
        with pytest.raises(KeyError):
            make_editor().update_person("nobody", label="x")

    def test_delete_person_cleans_references(self):
        editor = make_editor()
        editor.delete_person("B")
        ped = editor.pedigree
        assert "B" not in ped.persons
        assert ped.persons["C"].mother_id is None
        assert ped.persons["A"].spouse_ids == []
        assert ped.relationships == {}
        assert set(editor.nodes) == {"A", "C"}

    def test_delete_unknown_person(self):
        with pytest.raises(KeyError):
            make_editor().delete_person("nobody")

    def test_move_bypasses_layout(self):
        editor = make_editor()
        before = editor.nodes
        editor.move_person("C", 500.0, 20.0)
        assert editor.nodes is before
        assert editor.nodes["C"].x == 500.0
        person = editor.pedigree.persons["C"]
        assert (person.x, person.y) == (500.0, 20.0)

    def test_recalculate_after_move(self):
        editor = make_editor()
        original = layout_snapshot(editor.pedigree)
        editor.move_person("C", 500.0, 20.0)
        editor.recalculate_layout()
        assert layout_snapshot(editor.pedigree) == original


class TestRelationships:
    def test_add_relationship(self):
        editor = make_editor()
        editor.add_person(create_person("X", "F", Sex.Female))
        rel = create_relationship("C", "X", relationship_id="C+X")
        editor.add_relationship(rel)
        ped = editor.pedigree
        assert "X" in ped.persons["C"].spouse_ids
        assert "C" in ped.persons["X"].spouse_ids
        assert ped.persons["X"].generation == ped.persons["C"].generation == 1

    def test_add_relationship_links_children(self):
        editor = make_editor()
        editor.add_person(create_person("X", "F", Sex.Female))
        editor.add_person(create_person("K", "F"))
        rel = create_relationship("C", "X", relationship_id="C+X")
        rel.children_ids = ["K"]
        editor.add_relationship(rel)
        assert "K" in editor.pedigree.persons["C"].children_ids
        assert editor.pedigree.persons["K"].generation == 2

    def test_add_relationship_unknown_person(self):
        editor = make_editor()
        with pytest.raises(KeyError):
            editor.add_relationship(create_relationship("C", "nobody"))
        assert len(editor.pedigree.relationships) == 1

    def test_update_relationship_children(self):
        editor = make_editor()
        editor.add_person(create_person("K", "F"))
        editor.update_relationship("A+B", children_ids=["C", "K"])
        assert editor.pedigree.persons["K"].generation == 1

    def test_update_relationship_rejects_partners(self):
        with pytest.raises(ValueError):
            make_editor().update_relationship("A+B", person1_id="C")

    def test_delete_relationship_removes_spouse_link(self):
        editor = make_editor()
        editor.delete_relationship("A+B")
        ped = editor.pedigree
        assert ped.relationships == {}
        assert ped.persons["A"].spouse_ids == []
        assert ped.persons["B"].spouse_ids == []
        # parent links survive
        assert ped.persons["C"].generation == 1

    def test_delete_unknown_relationship(self):
        with pytest.raises(KeyError):
            make_editor().delete_relationship("nope")


class TestFieldValidation:
    @pytest.mark.parametrize("name", ["display_label", "is_founder", "is_affected"])
    def test_person_properties_rejected(self, name):
        with pytest.raises(ValueError, match=name):
            make_editor().update_person("C", **{name: True})

    def test_person_status_update_keeps_layout(self):
        editor = make_editor()
        before = editor.nodes
        editor.update_person("C", status=PersonStatus(deceased=True))
        assert editor.nodes is before
        assert editor.pedigree.persons["C"].status.deceased

    @pytest.mark.parametrize("name", ["key", "is_consanguineous"])
    def test_relationship_properties_rejected(self, name):
        with pytest.raises(ValueError, match=name):
            make_editor().update_relationship("A+B", **{name: True})

    def test_partnership_status_update(self):
        editor = make_editor()
        rel = editor.update_relationship("A+B", partnership_status=PartnershipStatus.Divorced)
        assert rel.partnership_status == PartnershipStatus.Divorced
