"""Parser registry: pick a pedigree file parser by format name."""

from __future__ import annotations

from pedigree_layout.model.pedigree import Pedigree
from pedigree_layout.parsers.base import PedigreeParser
from pedigree_layout.parsers.ped import (
    PedFormatError,
    PedParseError,
    PedParser,
    PedParseResult,
    PedRecord,
    parse_ped,
)
from pedigree_layout.parsers.ped_writer import write_ped

_PARSERS: dict[str, type[PedigreeParser]] = {
    "ped": PedParser,
}


def formats() -> list[str]:
    return sorted(_PARSERS)


def parse(src: str, format: str = "ped", strict: bool = False) -> tuple[Pedigree, PedParseResult]:
    """Parse pedigree text in the named format.

    Raises:
        ValueError: If the format is not registered.
        PedFormatError: In strict mode, if any line is malformed.
    """
    parser_cls = _PARSERS.get(format.lower())
    if parser_cls is None:
        raise ValueError(f"Unsupported pedigree format: {format}")
    pedigree, result = parser_cls().parse_to_pedigree(src)
    if strict:
        result.raise_for_errors()
    return pedigree, result


__all__ = [
    "PedFormatError",
    "PedParseError",
    "PedParseResult",
    "PedParser",
    "PedRecord",
    "formats",
    "parse",
    "parse_ped",
    "write_ped",
]
