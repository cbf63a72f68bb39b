"""CLI entry point for pedigree-layout."""

import json
import logging
import sys
from dataclasses import asdict

import click

from pedigree_layout.config import LayoutOptions, RenderConfig
from pedigree_layout.layout.engine import PedigreeLayout
from pedigree_layout.layout.types import LayoutNode
from pedigree_layout.model.graph import PedigreeGraph
from pedigree_layout.parsers import PedFormatError, formats, parse
from pedigree_layout.renderers.ascii import AsciiRenderer
from pedigree_layout.renderers.base import Renderer
from pedigree_layout.renderers.connections import build_connections


def _to_json(graph: PedigreeGraph, nodes: dict[str, LayoutNode], options: LayoutOptions) -> str:
    connections = build_connections(graph, nodes)
    payload = {
        "options": options.as_dict(),
        "nodes": [
            {
                "id": pid,
                "label": node.person.display_label,
                "sex": node.person.sex.name,
                "status": asdict(node.person.status),
                "twin_group": node.person.twin_group_id,
                "generation": node.generation,
                "order": node.order,
                "x": node.x,
                "y": node.y,
            }
            for pid, node in nodes.items()
        ],
        "lines": [
            {
                "kind": seg.kind.name,
                "owner": seg.owner,
                "x1": seg.x1,
                "y1": seg.y1,
                "x2": seg.x2,
                "y2": seg.y2,
            }
            for seg in connections.segments
        ],
    }
    return json.dumps(payload, indent=2) + "\n"


def _write(output: str | None, text: str) -> None:
    if output:
        try:
            with open(output, "w") as f:
                f.write(text)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(text, nl=False)


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--ascii", "-a", "use_ascii", is_flag=True, help="Use plain ASCII instead of Unicode")
@click.option("--json", "as_json", is_flag=True, help="Emit node positions and connection lines as JSON")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option(
    "--format",
    "input_format",
    type=click.Choice(formats(), case_sensitive=False),
    default="ped",
    show_default=True,
    help="Input file format",
)
@click.option("--strict", is_flag=True, help="Fail on malformed PED lines instead of skipping them")
@click.option("--no-generations", "hide_generations", is_flag=True, help="Do not number generations in the margin")
@click.option("--node-width", type=float, default=None, help="Symbol width in layout units")
@click.option("--node-height", type=float, default=None, help="Symbol height in layout units")
@click.option("--horizontal-spacing", type=float, default=None, help="Gap between unrelated neighbours")
@click.option("--vertical-spacing", type=float, default=None, help="Gap between generations")
@click.option("--sibling-spacing", type=float, default=None, help="Gap between siblings")
@click.option("--spouse-spacing", type=float, default=None, help="Gap between partners")
@click.option("--verbose", "-v", is_flag=True, help="Log layout diagnostics to stderr")
def main(
    input: str | None,
    use_ascii: bool,
    as_json: bool,
    output: str | None,
    input_format: str,
    strict: bool,
    hide_generations: bool,
    verbose: bool,
    **geometry: float | None,
) -> None:
    """Lay out a PED pedigree and draw it as an ASCII/Unicode chart."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        pedigree, result = parse(text, input_format, strict=strict)
    except PedFormatError as e:
        click.echo(f"parse error:\n{e}", err=True)
        sys.exit(1)
    for err in result.errors:
        click.echo(f"warning: skipped {err}", err=True)

    overrides = {name: value for name, value in geometry.items() if value is not None}
    try:
        engine = PedigreeLayout(**overrides)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    graph = PedigreeGraph.from_pedigree(pedigree)
    nodes = engine.layout(graph)

    if as_json:
        _write(output, _to_json(graph, nodes, engine.get_options()))
        return

    renderer: Renderer = AsciiRenderer(RenderConfig(unicode=not use_ascii, show_generations=not hide_generations))
    _write(output, renderer.render(graph, nodes))


if __name__ == "__main__":
    main()
