"""Character sets, pedigree symbol borders, and junction merging."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from pedigree_layout.types import Sex


class CharSet(Enum):
    Unicode = "unicode"
    Ascii = "ascii"


@dataclass
class LineChars:
    horizontal: str
    vertical: str
    double: str  # consanguineous spouse line
    double_tee: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    tee_right: str
    tee_left: str
    tee_down: str
    tee_up: str
    cross: str
    rising: str  # slash through a symbol or spouse line, left twin connector
    falling: str  # right twin connector

    @classmethod
    def unicode(cls) -> LineChars:
        return cls(
            horizontal="─",
            vertical="│",
            double="═",
            double_tee="╤",
            top_left="┌",
            top_right="┐",
            bottom_left="└",
            bottom_right="┘",
            tee_right="├",
            tee_left="┤",
            tee_down="┬",
            tee_up="┴",
            cross="┼",
            rising="╱",
            falling="╲",
        )

    @classmethod
    def ascii(cls) -> LineChars:
        return cls(
            horizontal="-",
            vertical="|",
            double="=",
            double_tee="+",
            top_left="+",
            top_right="+",
            bottom_left="+",
            bottom_right="+",
            tee_right="+",
            tee_left="+",
            tee_down="+",
            tee_up="+",
            cross="+",
            rising="/",
            falling="\\",
        )

    @classmethod
    def for_charset(cls, cs: CharSet) -> LineChars:
        if cs == CharSet.Unicode:
            return cls.unicode()
        return cls.ascii()


@dataclass
class SymbolChars:
    """Border characters of one pedigree symbol box."""

    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str

    @classmethod
    def for_sex(cls, sex: Sex, cs: CharSet) -> SymbolChars:
        lc = LineChars.for_charset(cs)
        square = cls(
            top_left=lc.top_left,
            top_right=lc.top_right,
            bottom_left=lc.bottom_left,
            bottom_right=lc.bottom_right,
            horizontal=lc.horizontal,
            vertical=lc.vertical,
        )
        match sex:
            case Sex.Male:
                return square
            case Sex.Female:
                if cs == CharSet.Ascii:
                    return replace(square, top_left="(", top_right=")", bottom_left="(", bottom_right=")")
                return replace(square, top_left="╭", top_right="╮", bottom_left="╰", bottom_right="╯")
            case _:
                return replace(square, top_left="/", top_right="\\", bottom_left="\\", bottom_right="/")


@dataclass
class Arms:
    """Which arms of a junction cell are active."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    @classmethod
    def from_char(cls, c: str) -> Arms | None:
        table: dict[str, tuple[bool, bool, bool, bool]] = {
            "─": (False, False, True, True),
            "│": (True, True, False, False),
            "┌": (False, True, False, True),
            "┐": (False, True, True, False),
            "└": (True, False, False, True),
            "┘": (True, False, True, False),
            "├": (True, True, False, True),
            "┤": (True, True, True, False),
            "┬": (False, True, True, True),
            "┴": (True, False, True, True),
            "┼": (True, True, True, True),
            "╭": (False, True, False, True),
            "╮": (False, True, True, False),
            "╰": (True, False, False, True),
            "╯": (True, False, True, False),
            "-": (False, False, True, True),
            "|": (True, True, False, False),
            "+": (True, True, True, True),
        }
        entry = table.get(c)
        if entry is None:
            return None
        u, d, lft, r = entry
        return cls(up=u, down=d, left=lft, right=r)

    def merge(self, other: Arms) -> Arms:
        return Arms(
            up=self.up or other.up,
            down=self.down or other.down,
            left=self.left or other.left,
            right=self.right or other.right,
        )

    def to_char(self, cs: CharSet) -> str:
        lc = LineChars.for_charset(cs)
        match (self.up, self.down, self.left, self.right):
            case (False, False, False, False):
                return " "
            case (True, True, False, False) | (True, False, False, False) | (False, True, False, False):
                return lc.vertical
            case (False, False, True, True) | (False, False, True, False) | (False, False, False, True):
                return lc.horizontal
            case (False, True, False, True):
                return lc.top_left
            case (False, True, True, False):
                return lc.top_right
            case (True, False, False, True):
                return lc.bottom_left
            case (True, False, True, False):
                return lc.bottom_right
            case (True, True, False, True):
                return lc.tee_right
            case (True, True, True, False):
                return lc.tee_left
            case (False, True, True, True):
                return lc.tee_down
            case (True, False, True, True):
                return lc.tee_up
            case _:
                return lc.cross
