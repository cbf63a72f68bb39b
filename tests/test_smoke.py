"""Smoke tests: imports work, CLI --help works."""

from click.testing import CliRunner

from pedigree_layout.__main__ import main


def test_import():
    import pedigree_layout

    assert pedigree_layout.layout_ped is not None
    assert pedigree_layout.PedigreeLayout is not None


def test_editor_import():
    from pedigree_layout.editor import PedigreeEditor

    assert PedigreeEditor is not None


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "PED pedigree" in result.output
