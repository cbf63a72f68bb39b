"""Canvas: 2D character grid for rendering pedigree charts."""

from __future__ import annotations

from dataclasses import dataclass

from pedigree_layout.renderers.charset import Arms, CharSet, SymbolChars


@dataclass
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def center_col(self) -> int:
        return self.x + self.width // 2

    def right(self) -> int:
        return self.x + self.width

    def bottom(self) -> int:
        return self.y + self.height


class Canvas:
    """A 2D character grid; writes outside the grid are dropped."""

    def __init__(self, width: int, height: int, charset: CharSet) -> None:
        self.width = width
        self.height = height
        self.charset = charset
        self.cells: list[list[str]] = [[" "] * width for _ in range(height)]

    def _inside(self, col: int, row: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, col: int, row: int) -> str:
        if self._inside(col, row):
            return self.cells[row][col]
        return " "

    def set(self, col: int, row: int, c: str) -> None:
        if self._inside(col, row):
            self.cells[row][col] = c

    def add_arms(self, col: int, row: int, arms: Arms) -> None:
        """Merge junction arms into a cell; cells holding text or double lines are left alone."""
        if not self._inside(col, row):
            return
        existing = self.cells[row][col]
        if existing == " ":
            self.cells[row][col] = arms.to_char(self.charset)
            return
        current = Arms.from_char(existing)
        if current is not None:
            self.cells[row][col] = current.merge(arms).to_char(self.charset)

    def hline(self, row: int, col1: int, col2: int, c: str) -> None:
        lo, hi = (col1, col2) if col1 <= col2 else (col2, col1)
        for col in range(lo, hi + 1):
            self.set(col, row, c)

    def vline(self, col: int, row1: int, row2: int) -> None:
        lo, hi = (row1, row2) if row1 <= row2 else (row2, row1)
        for row in range(lo, hi + 1):
            self.add_arms(col, row, Arms(up=True, down=True))

    def draw_symbol(self, rect: Rect, sc: SymbolChars) -> None:
        if rect.width < 2 or rect.height < 2:
            return
        x0, y0 = rect.x, rect.y
        x1, y1 = rect.right() - 1, rect.bottom() - 1
        for row in range(y0, y1 + 1):
            for col in range(x0, x1 + 1):
                self.set(col, row, " ")
        self.set(x0, y0, sc.top_left)
        self.set(x1, y0, sc.top_right)
        self.set(x0, y1, sc.bottom_left)
        self.set(x1, y1, sc.bottom_right)
        for col in range(x0 + 1, x1):
            self.set(col, y0, sc.horizontal)
            self.set(col, y1, sc.horizontal)
        for row in range(y0 + 1, y1):
            self.set(x0, row, sc.vertical)
            self.set(x1, row, sc.vertical)

    def write_str(self, col: int, row: int, s: str) -> None:
        for i, ch in enumerate(s):
            self.set(col + i, row, ch)

    def to_string(self) -> str:
        lines = ["".join(row).rstrip() for row in self.cells]
        return "\n".join(lines).rstrip("\n") + "\n"
