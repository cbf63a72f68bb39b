"""ASCII/Unicode text renderer for laid-out pedigrees."""

from __future__ import annotations

import logging

from pedigree_layout.config import RenderConfig
from pedigree_layout.layout.types import LayoutNode
from pedigree_layout.model.graph import PedigreeGraph
from pedigree_layout.renderers.canvas import Canvas, Rect
from pedigree_layout.renderers.charset import Arms, CharSet, LineChars, SymbolChars
from pedigree_layout.renderers.connections import DescentLine, SpouseLine, TwinGroup, descent_lines, spouse_lines
from pedigree_layout.types import PartnershipStatus, TwinType

logger = logging.getLogger(__name__)

SYMBOL_ROWS = 3
ROW_PITCH = 7  # symbol rows plus four connector rows
BAR_OFFSET = 5  # sibling bar, measured from the top of the parents' symbols
MARGIN_COLS = 6
AFFECTED_MARK = "*"
PROBAND_MARK = {CharSet.Unicode: "↗", CharSet.Ascii: ">"}
# slashes drawn through the spouse line
PARTNERSHIP_MARKS = {PartnershipStatus.Separated: 1, PartnershipStatus.Divorced: 2}

_ROMAN = [
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]


def roman(n: int) -> str:
    """Roman numeral for a positive integer (generation 0 is I)."""
    out = []
    for value, numeral in _ROMAN:
        while n >= value:
            out.append(numeral)
            n -= value
    return "".join(out)


# ─── Column Mapping ──────────────────────────────────────────────────────────


class _Grid:
    """Maps layout centres to canvas columns and generations to canvas rows."""

    def __init__(self, nodes: dict[str, LayoutNode], box_width: int, margin: int) -> None:
        self.box_width = box_width
        self.margin = margin
        self.min_x = min(n.x for n in nodes.values())

        rows: dict[int, list[float]] = {}
        for n in nodes.values():
            rows.setdefault(n.generation, []).append(n.x)
        gaps = [
            b - a
            for xs in rows.values()
            for a, b in zip(sorted(xs), sorted(xs)[1:])
            if b - a > 0
        ]
        min_gap = min(gaps) if gaps else max(n.width for n in nodes.values())
        # at least two blank columns between adjacent symbols after rounding
        self.scale = (box_width + 3) / min_gap

    def col(self, x: float) -> int:
        return self.margin + self.box_width // 2 + round((x - self.min_x) * self.scale)

    @staticmethod
    def top(generation: int) -> int:
        return generation * ROW_PITCH


# ─── Painting ────────────────────────────────────────────────────────────────


def _paint_spouse_line(canvas: Canvas, grid: _Grid, line: SpouseLine, nodes: dict[str, LayoutNode]) -> None:
    lc = LineChars.for_charset(canvas.charset)
    left, right = nodes[line.left], nodes[line.right]
    row = grid.top(left.generation) + 1
    half = grid.box_width // 2
    c = lc.double if line.consanguineous else lc.horizontal
    canvas.hline(row, grid.col(left.x) + half + 1, grid.col(right.x) - half - 1, c)


def _paint_partnership_marks(canvas: Canvas, grid: _Grid, line: SpouseLine, nodes: dict[str, LayoutNode]) -> None:
    """Slash the spouse line next to its midpoint, keeping clear of any descent tee."""
    count = PARTNERSHIP_MARKS.get(line.status, 0)
    if not count:
        return
    lc = LineChars.for_charset(canvas.charset)
    left, right = nodes[line.left], nodes[line.right]
    row = grid.top(left.generation) + 1
    half = grid.box_width // 2
    a, b = grid.col(left.x), grid.col(right.x)
    mid = (a + b) // 2
    free = [c for c in range(a + half + 1, b - half) if canvas.get(c, row) in (lc.horizontal, lc.double)]
    for col in sorted(free, key=lambda c: (abs(c - mid), c))[:count]:
        canvas.set(col, row, lc.rising)


def _paint_symbol(canvas: Canvas, grid: _Grid, node: LayoutNode, label: str) -> None:
    lc = LineChars.for_charset(canvas.charset)
    center = grid.col(node.x)
    rect = Rect(center - grid.box_width // 2, grid.top(node.generation), grid.box_width, SYMBOL_ROWS)
    canvas.draw_symbol(rect, SymbolChars.for_sex(node.person.sex, canvas.charset))
    inner_w = grid.box_width - 2
    pad = max(0, inner_w - len(label)) // 2
    canvas.write_str(rect.x + 1 + pad, rect.y + 1, label[:inner_w])

    status = node.person.status
    if status.deceased:
        canvas.set(rect.right() - 1, rect.y, lc.rising)
        canvas.set(rect.x, rect.bottom() - 1, lc.rising)
    if status.proband:
        canvas.set(rect.x - 1, rect.bottom() - 1, PROBAND_MARK[canvas.charset])


def _paint_twins(canvas: Canvas, grid: _Grid, group: TwinGroup, nodes: dict[str, LayoutNode], bar_row: int) -> None:
    """Twins lean in toward their apex on the row under the bar; identical twins get a crossbar."""
    lc = LineChars.for_charset(canvas.charset)
    row = bar_row + 1
    apex = grid.col(sum(group.apexes) / len(group.apexes))
    cols = [grid.col(nodes[m].x) for m in group.members]
    if group.twin_type == TwinType.Monozygotic:
        for col in range(cols[0] + 1, cols[-1]):
            canvas.add_arms(col, row, Arms(up=col == apex, left=True, right=True))

    for member, col in zip(group.members, cols):
        child_top = grid.top(nodes[member].generation)
        if child_top <= row:
            logger.debug("Twin %s is not below its parents; connector skipped", member)
            continue
        if col < apex:
            canvas.set(col, row, lc.rising)
        elif col > apex:
            canvas.set(col, row, lc.falling)
        else:
            canvas.add_arms(col, row, Arms(up=True, down=True))
        if child_top - 1 > row:
            canvas.vline(col, row + 1, child_top - 1)
        canvas.add_arms(col, child_top, Arms(up=True))


def _paint_descent(canvas: Canvas, grid: _Grid, line: DescentLine, nodes: dict[str, LayoutNode]) -> None:
    lc = LineChars.for_charset(canvas.charset)
    parent_gen = max(nodes[p].generation for p in line.parents)
    top = grid.top(parent_gen)
    bar_row = top + BAR_OFFSET

    if len(line.parents) == 2:
        a, b = (grid.col(nodes[p].x) for p in line.parents)
        origin = (a + b) // 2
        spouse_row = top + 1
        if canvas.get(origin, spouse_row) == lc.double:
            canvas.set(origin, spouse_row, lc.double_tee)
        else:
            canvas.add_arms(origin, spouse_row, Arms(down=True))
        canvas.vline(origin, top + 2, bar_row - 1)
    else:
        origin = grid.col(nodes[line.parents[0]].x)
        canvas.add_arms(origin, top + SYMBOL_ROWS - 1, Arms(down=True))
        canvas.vline(origin, top + SYMBOL_ROWS, bar_row - 1)

    twin_ids = line.twin_ids
    child_cols = {grid.col(nodes[c].x) for c in line.children if c not in twin_ids}
    twin_cols = {grid.col(nodes[c].x) for c in twin_ids}
    drops = set(child_cols)
    for group in line.twins:
        if group.twin_type == TwinType.Monozygotic:
            drops.add(grid.col(sum(group.apexes) / len(group.apexes)))
    span = child_cols | twin_cols | drops | {origin}
    lo, hi = min(span), max(span)
    for col in range(lo, hi + 1):
        canvas.add_arms(
            col,
            bar_row,
            Arms(up=col == origin, down=col in drops, left=col > lo, right=col < hi),
        )

    for child_id in line.children:
        if child_id in twin_ids:
            continue
        child = nodes[child_id]
        child_top = grid.top(child.generation)
        if child_top <= bar_row:
            logger.debug("Child %s is not below its parents; descent line skipped", child_id)
            continue
        col = grid.col(child.x)
        if child_top - 1 > bar_row:
            canvas.vline(col, bar_row + 1, child_top - 1)
        canvas.add_arms(col, child_top, Arms(up=True))

    for group in line.twins:
        _paint_twins(canvas, grid, group, nodes, bar_row)


# ─── Public Renderer ─────────────────────────────────────────────────────────


class AsciiRenderer:
    """ASCII/Unicode text renderer."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()

    def label(self, node: LayoutNode) -> str:
        text = node.person.display_label
        if self.config.mark_affected and node.person.is_affected:
            text += AFFECTED_MARK
        return text

    def render(self, graph: PedigreeGraph, nodes: dict[str, LayoutNode]) -> str:
        if not nodes:
            return ""
        cs = CharSet.Unicode if self.config.unicode else CharSet.Ascii

        labels = {pid: self.label(node) for pid, node in nodes.items()}
        box_width = max(len(text) for text in labels.values()) + 4
        if box_width % 2 == 0:
            box_width += 1
        margin = MARGIN_COLS if self.config.show_generations else 0
        if any(n.person.status.proband for n in nodes.values()):
            margin = max(margin, 1)  # room for the proband arrow
        grid = _Grid(nodes, box_width, margin)

        max_gen = max(n.generation for n in nodes.values())
        width = max(grid.col(n.x) for n in nodes.values()) + box_width // 2 + 2
        height = grid.top(max_gen) + SYMBOL_ROWS
        canvas = Canvas(width, height, cs)

        couples = spouse_lines(graph, nodes)
        for line in couples:
            _paint_spouse_line(canvas, grid, line, nodes)

        for pid, node in nodes.items():
            _paint_symbol(canvas, grid, node, labels[pid])

        for line in descent_lines(graph, nodes):
            _paint_descent(canvas, grid, line, nodes)

        for line in couples:
            _paint_partnership_marks(canvas, grid, line, nodes)

        if self.config.show_generations:
            for gen in range(max_gen + 1):
                canvas.write_str(0, grid.top(gen) + 1, roman(gen + 1))

        return canvas.to_string()
