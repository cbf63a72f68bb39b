"""Generation assignment.

Every person gets an integer row such that children sit at least one row
below each parent and partners share a row. Partners are first merged into
spouse groups, so equality holds structurally; parent→child links become
edges between groups. Corrupt data (a person who is their own ancestor, or
who is partnered with an ancestor) shows up as a cycle in that group graph;
cycles are broken with a greedy feedback-arc-set ordering and the offending
links are ignored. The remaining DAG is relaxed to its least fixed point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import networkx as nx

from pedigree_layout.model.graph import PedigreeGraph

logger = logging.getLogger(__name__)

DEFAULT_MAX_PASSES: int = 1000


# ─── Cycle Breaking (Greedy-FAS) ─────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Compute a node ordering using the greedy-FAS heuristic.

    Candidates are always visited in the graph's node order so that the same
    input breaks the same links.
    """
    nodes: list[str] = list(graph.nodes)
    active: set[str] = set(nodes)
    out_deg: dict[str, int] = {}
    in_deg: dict[str, int] = {}
    for node in nodes:
        succs = [s for s in graph.successors(node) if s != node]
        preds = [p for p in graph.predecessors(node) if p != node]
        out_deg[node] = len(succs)
        in_deg[node] = len(preds)

    s1: list[str] = []
    s2: list[str] = []

    def drop(node: str) -> None:
        active.remove(node)
        for succ in graph.successors(node):
            if succ in active:
                in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            if pred in active:
                out_deg[pred] -= 1

    while active:
        changed = True
        while changed:
            changed = False
            sinks = [n for n in nodes if n in active and out_deg[n] == 0]
            for sink in sinks:
                changed = True
                drop(sink)
                s2.append(sink)

        changed = True
        while changed:
            changed = False
            sources = [n for n in nodes if n in active and in_deg[n] == 0]
            for source in sources:
                changed = True
                drop(source)
                s1.append(source)

        if active:
            best = max((n for n in nodes if n in active), key=lambda n: out_deg[n] - in_deg[n])
            drop(best)
            s1.append(best)

    s2.reverse()
    s1.extend(s2)
    return s1


def break_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Drop the links that close a cycle. Returns (dag, dropped_edges).

    Self-loops are always dropped.
    """
    if graph.number_of_nodes() == 0:
        return nx.DiGraph(), set()

    ordering = greedy_fas_ordering(graph)
    position: dict[str, int] = {node: pos for pos, node in enumerate(ordering)}

    dropped: set[tuple[str, str]] = set()
    dag: nx.DiGraph = nx.DiGraph()
    dag.add_nodes_from(graph.nodes)
    for src, tgt in graph.edges():
        if src == tgt or position[src] > position[tgt]:
            dropped.add((src, tgt))
        else:
            dag.add_edge(src, tgt)
    return dag, dropped


# ─── Spouse Groups ───────────────────────────────────────────────────────────


def spouse_groups(graph: PedigreeGraph) -> dict[str, str]:
    """Map each person to the representative of their spouse group.

    The representative is the group member that comes first in person order.
    """
    order = {pid: i for i, pid in enumerate(graph.person_ids)}
    representative: dict[str, str] = {}
    for component in nx.connected_components(graph.partners):
        rep = min(component, key=order.__getitem__)
        for pid in component:
            representative[pid] = rep
    for pid in graph.person_ids:
        representative.setdefault(pid, pid)
    return representative


# ─── Generation Assignment ───────────────────────────────────────────────────


@dataclass
class GenerationAssignment:
    generations: dict[str, int]
    generation_count: int
    dropped_links: set[tuple[str, str]] = field(default_factory=set)
    converged: bool = True

    def members(self, generation: int) -> list[str]:
        return [pid for pid, g in self.generations.items() if g == generation]

    @classmethod
    def assign(cls, graph: PedigreeGraph, max_passes: int = DEFAULT_MAX_PASSES) -> GenerationAssignment:
        if graph.node_count() == 0:
            return cls(generations={}, generation_count=0)

        rep = spouse_groups(graph)
        groups: nx.DiGraph = nx.DiGraph()
        for pid in graph.person_ids:
            groups.add_node(rep[pid])
        links: dict[tuple[str, str], tuple[str, str]] = {}
        for parent, child in graph.lineage.edges():
            key = (rep[parent], rep[child])
            groups.add_edge(*key)
            links.setdefault(key, (parent, child))

        dag, dropped = break_cycles(groups)
        dropped_links = {links[key] for key in dropped}
        for parent, child in sorted(dropped_links):
            logger.warning("Ignoring parent link %s -> %s: it closes a cycle in the pedigree", parent, child)

        levels: dict[str, int] = {node: 0 for node in dag.nodes}
        converged = False
        for pass_no in range(max_passes):
            changed = False
            for src, tgt in dag.edges():
                if levels[tgt] < levels[src] + 1:
                    levels[tgt] = levels[src] + 1
                    changed = True
            if not changed:
                converged = True
                logger.debug("Generation relaxation converged after %d pass(es)", pass_no + 1)
                break
        if not converged:
            logger.warning("Generation relaxation stopped at the %d-pass cap; keeping current values", max_passes)

        lowest = min(levels.values())
        generations = {pid: levels[rep[pid]] - lowest for pid in graph.person_ids}
        generation_count = max(generations.values()) + 1
        return cls(
            generations=generations,
            generation_count=generation_count,
            dropped_links=dropped_links,
            converged=converged,
        )


def assign_generations(graph: PedigreeGraph, max_passes: int = DEFAULT_MAX_PASSES) -> dict[str, int]:
    """Return the generation index of every person, normalized to start at 0."""
    return GenerationAssignment.assign(graph, max_passes).generations
