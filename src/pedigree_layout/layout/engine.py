"""Pedigree layout engine.

Phases:
  1. Topology snapshot
  2. Generation assignment
  3. Family-unit construction
  4. Ordering within generations
  5. Initial positions
  6. Parent centering, then child centering
  7. Per-generation collision resolution (bounded)
  8. Global centering
"""

from __future__ import annotations

import logging
from dataclasses import replace

from pedigree_layout.config import LayoutOptions
from pedigree_layout.layout.collisions import SpacingRules, has_collisions, resolve_collisions
from pedigree_layout.layout.generations import GenerationAssignment
from pedigree_layout.layout.ordering import build_family_units, order_generations
from pedigree_layout.layout.positions import assign_initial_positions, center_children, center_parents, row_y
from pedigree_layout.layout.types import LayoutNode
from pedigree_layout.model.graph import PedigreeGraph
from pedigree_layout.model.pedigree import Pedigree

logger = logging.getLogger(__name__)


def settle_collisions(rows: list[list[str]], xs: dict[str, float], rules: SpacingRules, max_passes: int) -> bool:
    """Resolve every row until clean or `max_passes` sweeps; returns False if any row stayed dirty."""
    clean = True
    for gen, row in enumerate(rows):
        passes = 0
        while has_collisions(row, xs, rules):
            if passes >= max_passes:
                logger.warning("Generation %d still overlaps after %d collision passes; accepting layout", gen, passes)
                clean = False
                break
            resolve_collisions(row, xs, rules)
            passes += 1
    return clean


def center_globally(xs: dict[str, float], options: LayoutOptions) -> float:
    """Translate positions so the bounding box is centred on x=0. Returns the offset applied."""
    if not xs:
        return 0.0
    half = options.node_width / 2
    left = min(xs.values()) - half
    right = max(xs.values()) + half
    offset = -(left + right) / 2
    for pid in xs:
        xs[pid] += offset
    return offset


class PedigreeLayout:
    """Generation-based pedigree layout."""

    def __init__(self, options: LayoutOptions | None = None, **overrides: float) -> None:
        base = options or LayoutOptions()
        self._options = base.merged(**overrides) if overrides else replace(base)

    def set_options(self, **partial: float) -> None:
        self._options = self._options.merged(**partial)

    def get_options(self) -> LayoutOptions:
        return replace(self._options)

    def layout(self, pedigree: Pedigree | PedigreeGraph) -> dict[str, LayoutNode]:
        """Compute a fresh node map. The input pedigree is never modified."""
        graph = pedigree if isinstance(pedigree, PedigreeGraph) else PedigreeGraph.from_pedigree(pedigree)
        if graph.node_count() == 0:
            return {}

        opts = self._options
        assignment = GenerationAssignment.assign(graph, opts.max_relaxation_passes)
        units = build_family_units(graph, assignment.generations, opts)
        rows = order_generations(graph, assignment, units)
        rules = SpacingRules(graph, opts)

        xs = assign_initial_positions(rows, graph, units, rules, opts)
        center_parents(rows, xs, units, rules, opts)
        center_children(rows, xs, graph, units, rules, opts)
        settle_collisions(rows, xs, rules, opts.max_collision_passes)
        center_globally(xs, opts)

        nodes: dict[str, LayoutNode] = {}
        for gen, row in enumerate(rows):
            y = opts.top_margin + row_y(gen, opts)
            for order, pid in enumerate(row):
                nodes[pid] = LayoutNode(
                    person=graph.person(pid),
                    x=xs[pid],
                    y=y,
                    generation=gen,
                    order=order,
                    width=opts.node_width,
                    height=opts.node_height,
                )
        logger.debug("Laid out %d person(s) in %d generation(s)", len(nodes), len(rows))
        return nodes


def full_layout(pedigree: Pedigree | PedigreeGraph, options: LayoutOptions | None = None) -> dict[str, LayoutNode]:
    """Run the layout pipeline once with the given (or default) options."""
    return PedigreeLayout(options).layout(pedigree)


def apply_layout(pedigree: Pedigree, nodes: dict[str, LayoutNode]) -> None:
    """Merge generation, x and y from a layout back onto the pedigree's persons."""
    for pid, node in nodes.items():
        person = pedigree.persons.get(pid)
        if person is None:
            continue
        person.generation = node.generation
        person.x = node.x
        person.y = node.y
