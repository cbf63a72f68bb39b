"""Connection geometry between positioned persons.

Phases:
  1. Spouse lines, one per partner pair, left symbol edge to right symbol edge
  2. Partnership marks: one slash through a separated couple's line, two
     through a divorced couple's
  3. Descent lines, one per family unit: a drop from the parents' midpoint
     (or the bottom of a single parent) to a sibling bar, then one vertical
     per child down to the top of its symbol. Twins instead hang from an apex
     on the bar: one shared point for monozygotic twins, spread points for
     dizygotic ones

All coordinates are layout coordinates; (x, y) of a node is the symbol centre.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from pedigree_layout.layout.ordering import build_family_units
from pedigree_layout.layout.types import LayoutNode
from pedigree_layout.model.graph import PedigreeGraph
from pedigree_layout.types import PartnershipStatus, TwinType

# Half-extent of a separation/divorce slash, and the gap between a divorce's two slashes
PARTNERSHIP_MARK_SIZE: float = 8
DIVORCE_MARK_GAP: float = 4
# Horizontal distance between neighbouring apexes of dizygotic twins
TWIN_APEX_SPREAD: float = 10


class LineKind(Enum):
    Spouse = auto()
    Consanguineous = auto()
    Separation = auto()
    Divorce = auto()
    Descent = auto()
    Sibship = auto()
    Child = auto()
    Twin = auto()


@dataclass(frozen=True)
class Segment:
    kind: LineKind
    x1: float
    y1: float
    x2: float
    y2: float
    owner: str


@dataclass
class SpouseLine:
    left: str
    right: str
    relationship_id: str | None = None
    consanguineous: bool = False
    status: PartnershipStatus | None = None


@dataclass
class TwinGroup:
    """Children of one birth, left to right, hanging from apexes on the sibling bar."""

    group_id: str
    members: list[str]
    twin_type: TwinType
    apexes: list[float] = field(default_factory=list)


@dataclass
class DescentLine:
    """Parents of one family unit joined to their placed children."""

    unit_id: str
    parents: list[str]
    children: list[str]
    origin_x: float
    origin_y: float
    bar_y: float
    twins: list[TwinGroup] = field(default_factory=list)

    @property
    def twin_ids(self) -> set[str]:
        return {pid for group in self.twins for pid in group.members}


@dataclass
class Connections:
    spouses: list[SpouseLine] = field(default_factory=list)
    descents: list[DescentLine] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)


def _half(node: LayoutNode, symbol_size: float | None) -> float:
    return (symbol_size if symbol_size is not None else node.height) / 2


def _half_width(node: LayoutNode, symbol_size: float | None) -> float:
    return (symbol_size if symbol_size is not None else node.width) / 2


def spouse_lines(graph: PedigreeGraph, nodes: dict[str, LayoutNode]) -> list[SpouseLine]:
    lines: list[SpouseLine] = []
    for a, b in graph.partners.edges():
        if a not in nodes or b not in nodes:
            continue
        left, right = (a, b) if nodes[a].x <= nodes[b].x else (b, a)
        union = graph.union_between(a, b)
        lines.append(
            SpouseLine(
                left=left,
                right=right,
                relationship_id=union.id if union else None,
                consanguineous=union.consanguineous if union else False,
                status=union.status if union else None,
            )
        )
    return lines


def twin_groups(children: list[str], nodes: dict[str, LayoutNode]) -> list[TwinGroup]:
    """Group placed children by twin group id; a group needs two members in one generation.

    A group whose zygosity is not recorded is drawn as dizygotic.
    """
    by_group: dict[str, list[str]] = {}
    for child_id in children:
        group_id = nodes[child_id].person.twin_group_id
        if group_id is not None:
            by_group.setdefault(group_id, []).append(child_id)

    groups: list[TwinGroup] = []
    for group_id, members in by_group.items():
        if len(members) < 2 or len({nodes[m].generation for m in members}) > 1:
            continue
        members = sorted(members, key=lambda m: nodes[m].x)
        twin_type = next(
            (nodes[m].person.twin_type for m in members if nodes[m].person.twin_type is not None),
            TwinType.Dizygotic,
        )
        mid = (nodes[members[0]].x + nodes[members[-1]].x) / 2
        if twin_type == TwinType.Monozygotic:
            apexes = [mid] * len(members)
        else:
            apexes = [mid + (i - (len(members) - 1) / 2) * TWIN_APEX_SPREAD for i in range(len(members))]
        groups.append(TwinGroup(group_id=group_id, members=members, twin_type=twin_type, apexes=apexes))
    return groups


def descent_lines(
    graph: PedigreeGraph, nodes: dict[str, LayoutNode], symbol_size: float | None = None
) -> list[DescentLine]:
    generations = {pid: node.generation for pid, node in nodes.items()}
    lines: list[DescentLine] = []
    for unit in build_family_units(graph, generations):
        parents = [p for p in unit.parents if p in nodes]
        children = [c for c in unit.children if c in nodes]
        if not parents or not children:
            continue

        if len(parents) == 2:
            origin_x = (nodes[parents[0]].x + nodes[parents[1]].x) / 2
            origin_y = (nodes[parents[0]].y + nodes[parents[1]].y) / 2
        else:
            only = nodes[parents[0]]
            origin_x = only.x
            origin_y = only.y + _half(only, symbol_size)

        parent_bottom = max(nodes[p].y + _half(nodes[p], symbol_size) for p in parents)
        child_top = min(nodes[c].y - _half(nodes[c], symbol_size) for c in children)
        lines.append(
            DescentLine(
                unit_id=unit.id,
                parents=parents,
                children=children,
                origin_x=origin_x,
                origin_y=origin_y,
                bar_y=parent_bottom + (child_top - parent_bottom) / 2,
                twins=twin_groups(children, nodes),
            )
        )
    return lines


def partnership_marks(line: SpouseLine, nodes: dict[str, LayoutNode], owner: str) -> list[Segment]:
    """Slashes across the middle of a spouse line: one if separated, two if divorced."""
    if line.status == PartnershipStatus.Separated:
        kind, offsets = LineKind.Separation, [0.0]
    elif line.status == PartnershipStatus.Divorced:
        kind, offsets = LineKind.Divorce, [-DIVORCE_MARK_GAP, DIVORCE_MARK_GAP]
    else:
        return []
    left, right = nodes[line.left], nodes[line.right]
    mid = (left.x + right.x) / 2
    y = (left.y + right.y) / 2
    size = PARTNERSHIP_MARK_SIZE
    return [Segment(kind, mid + dx - size, y + size, mid + dx + size, y - size, owner) for dx in offsets]


def build_connections(
    graph: PedigreeGraph, nodes: dict[str, LayoutNode], symbol_size: float | None = None
) -> Connections:
    """Compute every connection line for a finished layout.

    `symbol_size` overrides the per-node width and height when locating symbol edges.
    """
    result = Connections(spouses=spouse_lines(graph, nodes), descents=descent_lines(graph, nodes, symbol_size))

    for line in result.spouses:
        left, right = nodes[line.left], nodes[line.right]
        kind = LineKind.Consanguineous if line.consanguineous else LineKind.Spouse
        owner = line.relationship_id or f"{line.left}+{line.right}"
        result.segments.append(
            Segment(
                kind,
                left.x + _half_width(left, symbol_size),
                left.y,
                right.x - _half_width(right, symbol_size),
                right.y,
                owner,
            )
        )
        result.segments.extend(partnership_marks(line, nodes, owner))

    for line in result.descents:
        result.segments.append(
            Segment(LineKind.Descent, line.origin_x, line.origin_y, line.origin_x, line.bar_y, line.unit_id)
        )
        twin_ids = line.twin_ids
        xs = [nodes[c].x for c in line.children if c not in twin_ids] + [line.origin_x]
        xs += [apex for group in line.twins for apex in group.apexes]
        result.segments.append(Segment(LineKind.Sibship, min(xs), line.bar_y, max(xs), line.bar_y, line.unit_id))
        for child_id in line.children:
            if child_id in twin_ids:
                continue
            child = nodes[child_id]
            top = child.y - _half(child, symbol_size)
            result.segments.append(Segment(LineKind.Child, child.x, line.bar_y, child.x, top, child_id))
        for group in line.twins:
            for child_id, apex in zip(group.members, group.apexes):
                child = nodes[child_id]
                top = child.y - _half(child, symbol_size)
                result.segments.append(Segment(LineKind.Twin, apex, line.bar_y, child.x, top, child_id))

    return result
