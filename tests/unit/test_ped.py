"""Tests for parsers/ped.py and parsers/ped_writer.py: PED reading and writing."""

from __future__ import annotations

from datetime import datetime

import pytest

from pedigree_layout import layout_ped, render_ped
from pedigree_layout.parsers import PedFormatError, PedParser, formats, parse, parse_ped, write_ped
from pedigree_layout.types import Phenotype, Sex

SAMPLE = """\
# family  id  father  mother  sex  phenotype
FAM1 A 0 0 1 1
FAM1 B 0 0 2 1
FAM1 C A B 1 2
FAM1 D A B 2 0
"""


class TestPedParser:
    def test_records(self):
        result = PedParser().parse(SAMPLE)
        assert result.ok
        assert [r.individual_id for r in result.records] == ["A", "B", "C", "D"]
        c = result.records[2]
        assert (c.paternal_id, c.maternal_id) == ("A", "B")
        assert c.sex == Sex.Male
        assert c.phenotype == Phenotype.Affected

    def test_codes(self):
        result = PedParser().parse("F X 0 0 9 -9\nF Y 0 0 2 1\n")
        assert result.records[0].sex == Sex.Unknown
        assert result.records[0].phenotype == Phenotype.Unknown
        assert result.records[0].raw_phenotype == "-9"
        assert result.records[1].phenotype == Phenotype.Unaffected

    def test_blank_lines_and_comments_skipped(self):
        result = PedParser().parse("\n# header\n\nF A 0 0 1 1\n")
        assert len(result.records) == 1

    def test_extra_columns_ignored(self):
        result = PedParser().parse("F A 0 0 1 1 extra stuff\n")
        assert result.ok
        assert result.records[0].individual_id == "A"

    def test_tabs_and_spaces(self):
        result = PedParser().parse("F\tA\t0  0\t1 1\n")
        assert result.records[0].sex == Sex.Male

    def test_short_line_reported_with_line_number(self):
        result = PedParser().parse("F A 0 0 1 1\nF B 0\n")
        assert not result.ok
        assert len(result.records) == 1
        err = result.errors[0]
        assert err.line == 2
        assert str(err).startswith("line 2:")
        assert err.raw_line == "F B 0"

    def test_missing_parent_warning(self):
        result = PedParser().parse("F C Z 0 1 1\n")
        assert any("Father Z of C not found" in w for w in result.warnings)

    def test_duplicate_warning(self):
        result = PedParser().parse("F A 0 0 1 1\nF A 0 0 1 1\n")
        assert any("Duplicate individual ID: A" in w for w in result.warnings)


class TestRecordsToPedigree:
    def test_persons_and_links(self):
        ped, _ = parse_ped(SAMPLE)
        assert ped.family_id == "FAM1"
        assert list(ped.persons) == ["A", "B", "C", "D"]
        assert ped.persons["C"].father_id == "A"
        assert ped.persons["A"].children_ids == ["C", "D"]
        assert ped.persons["C"].is_affected

    def test_relationship_per_couple(self):
        ped, _ = parse_ped(SAMPLE)
        assert list(ped.relationships) == ["A+B"]
        rel = ped.relationships["A+B"]
        assert rel.children_ids == ["C", "D"]
        assert ped.persons["A"].spouse_ids == ["B"]
        assert ped.persons["B"].spouse_ids == ["A"]

    def test_duplicate_keeps_first(self):
        ped, _ = parse_ped("F A 0 0 1 1\nF A 0 0 2 2\n")
        assert ped.persons["A"].sex == Sex.Male

    def test_duplicate_does_not_relink_parents(self):
        src = "F A 0 0 1 1\nF B 0 0 2 1\nF X 0 0 1 1\nF Y 0 0 2 1\nF C A B 1 1\nF C X Y 2 2\n"
        ped, result = parse_ped(src)
        c = ped.persons["C"]
        assert (c.father_id, c.mother_id) == ("A", "B")
        assert c.sex == Sex.Male
        assert ped.persons["A"].children_ids == ["C"]
        assert ped.persons["X"].children_ids == []
        assert ped.persons["Y"].children_ids == []
        assert list(ped.relationships) == ["A+B"]
        assert any("Duplicate individual ID: C" in w for w in result.warnings)

    def test_dangling_parent_kept_on_person(self):
        ped, _ = parse_ped("F C Z 0 1 1\n")
        assert ped.persons["C"].father_id == "Z"
        assert ped.relationships == {}

    def test_empty_input(self):
        ped, result = parse_ped("")
        assert ped.family_id == "unknown"
        assert ped.persons == {}
        assert result.ok


class TestParsePed:
    def test_lenient_skips_bad_lines(self):
        ped, result = parse_ped("F A 0 0 1 1\nbad\n")
        assert list(ped.persons) == ["A"]
        assert len(result.errors) == 1

    def test_strict_raises(self):
        with pytest.raises(PedFormatError, match="line 2"):
            parse_ped("F A 0 0 1 1\nbad\n", strict=True)

    def test_strict_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_ped("bad\n", strict=True)

    def test_registry(self):
        ped, _ = parse(SAMPLE)
        assert len(ped.persons) == 4

    def test_registry_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported"):
            parse(SAMPLE, format="gedcom")

    def test_registry_formats(self):
        assert formats() == ["ped"]

    def test_registry_format_name_case_insensitive(self):
        ped, _ = parse(SAMPLE, format="PED")
        assert list(ped.persons) == ["A", "B", "C", "D"]

    def test_registry_strict(self):
        with pytest.raises(PedFormatError, match="1 malformed"):
            parse("F A 0 0 1 1\nbad\n", strict=True)

    def test_registry_lenient(self):
        ped, result = parse("F A 0 0 1 1\nbad\n")
        assert list(ped.persons) == ["A"]
        assert not result.ok

    def test_public_api_uses_registry(self):
        assert set(layout_ped(SAMPLE, format="ped")) == {"A", "B", "C", "D"}
        with pytest.raises(ValueError, match="Unsupported"):
            layout_ped(SAMPLE, format="gedcom")
        with pytest.raises(ValueError, match="Unsupported"):
            render_ped(SAMPLE, format="gedcom")


class TestWritePed:
    def test_header(self):
        ped, _ = parse_ped(SAMPLE)
        out = write_ped(ped, generated_at=datetime(2024, 1, 2, 3, 4, 5))
        lines = out.splitlines()
        assert lines[0] == "# Pedigree: FAM1"
        assert lines[1] == "# Generated: 2024-01-02T03:04:05"
        assert lines[2].startswith("# Format:")

    def test_body(self):
        ped, _ = parse_ped(SAMPLE)
        lines = write_ped(ped, header=False).splitlines()
        assert lines == [
            "FAM1\tA\t0\t0\t1\t1",
            "FAM1\tB\t0\t0\t2\t1",
            "FAM1\tC\tA\tB\t1\t2",
            "FAM1\tD\tA\tB\t2\t-9",
        ]

    def test_generation_order(self):
        ped, _ = parse_ped("F Z A 0 1 1\nF A 0 0 1 1\n")
        lines = write_ped(ped, header=False).splitlines()
        assert [line.split("\t")[1] for line in lines] == ["A", "Z"]

    def test_labels_replace_ids(self):
        ped, _ = parse_ped(SAMPLE)
        ped.persons["A"].label = "Grandpa"
        lines = write_ped(ped, header=False).splitlines()
        assert lines[0].split("\t")[1] == "Grandpa"
        assert lines[2].split("\t")[2] == "Grandpa"

    def test_carrier_written_as_unaffected(self):
        ped, _ = parse_ped("F A 0 0 1 1\n")
        ped.persons["A"].phenotypes = [Phenotype.Carrier]
        assert write_ped(ped, header=False).strip().endswith("\t1")

    def test_reads_back(self):
        ped, _ = parse_ped(SAMPLE)
        again, result = parse_ped(write_ped(ped))
        assert result.ok
        assert {pid: (p.father_id, p.mother_id, p.sex) for pid, p in again.persons.items()} == {
            pid: (p.father_id, p.mother_id, p.sex) for pid, p in ped.persons.items()
        }
