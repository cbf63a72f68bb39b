"""Base parser protocol."""

from __future__ import annotations

from typing import Protocol

from pedigree_layout.model.pedigree import Pedigree
from pedigree_layout.parsers.ped import PedParseResult


class PedigreeParser(Protocol):
    """Protocol that all pedigree file parsers must implement."""

    def parse_to_pedigree(self, src: str) -> tuple[Pedigree, PedParseResult]:
        """Parse source text into a Pedigree plus diagnostics."""
        ...
