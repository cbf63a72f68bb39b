"""pedigree-layout: generation-based layout of family pedigree charts."""

from __future__ import annotations

from pedigree_layout.config import LayoutOptions, RenderConfig
from pedigree_layout.layout import LayoutNode, PedigreeLayout, apply_layout, full_layout
from pedigree_layout.model import Pedigree, PedigreeGraph, Person, Relationship
from pedigree_layout.parsers import PedFormatError, parse, parse_ped, write_ped
from pedigree_layout.renderers.ascii import AsciiRenderer


def layout_ped(
    src: str,
    options: LayoutOptions | None = None,
    strict: bool = False,
    format: str = "ped",
) -> dict[str, LayoutNode]:
    """Parse pedigree text (PED by default) and lay it out.

    Args:
        src: PED file contents.
        options: Layout geometry; defaults to LayoutOptions().
        strict: Raise on malformed lines instead of skipping them.
        format: Registered input format name.

    Returns:
        Mapping of person id to positioned LayoutNode (empty for empty input).

    Raises:
        PedFormatError: In strict mode, if any line is malformed.
        ValueError: If the format is not registered.
    """
    pedigree, _ = parse(src, format, strict=strict)
    return full_layout(pedigree, options)


def render_ped(
    src: str,
    unicode: bool = True,
    options: LayoutOptions | None = None,
    show_generations: bool = True,
    format: str = "ped",
) -> str:
    """Parse pedigree text (PED by default) and render it as an ASCII/Unicode chart.

    Returns:
        The rendered chart, or an empty string if the pedigree is empty.
    """
    pedigree, _ = parse(src, format)
    graph = PedigreeGraph.from_pedigree(pedigree)
    nodes = PedigreeLayout(options).layout(graph)
    renderer = AsciiRenderer(RenderConfig(unicode=unicode, show_generations=show_generations))
    return renderer.render(graph, nodes)


__all__ = [
    "AsciiRenderer",
    "LayoutNode",
    "LayoutOptions",
    "Pedigree",
    "PedigreeGraph",
    "PedigreeLayout",
    "PedFormatError",
    "Person",
    "Relationship",
    "RenderConfig",
    "apply_layout",
    "full_layout",
    "layout_ped",
    "parse",
    "parse_ped",
    "render_ped",
    "write_ped",
]
