from __future__ import annotations

from enum import Enum
from typing import NamedTuple

class Color(Enum):
    WHITE = 1
    BLACK = -1

    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        return self.value

    @property
    def home_rank(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_rank(self) -> int:
        return 1 if self is Color.WHITE else 6

    @property
    def last_rank(self) -> int:
        return 7 if self is Color.WHITE else 0

BOARD_SIZE = 8
FILES = "abcdefgh"

class Pos(NamedTuple):
    """Board coordinate; x is the file (a=0), y the rank (1=0).

    Out-of-range values are allowed and must be checked with ``is_valid``.
    """
    x: int
    y: int

    def is_valid(self) -> bool:
        return 0 <= self.x < BOARD_SIZE and 0 <= self.y < BOARD_SIZE

    def offset(self, dx: int, dy: int) -> "Pos":
        return Pos(self.x + dx, self.y + dy)

    def __str__(self) -> str:
        return pos_name(self) if self.is_valid() else f"({self.x},{self.y})"

def pos_name(p: Pos) -> str:
    return f"{FILES[p.x]}{p.y + 1}"

def parse_pos(a: str) -> Pos:
    a = a.strip().lower()
    if len(a) != 2 or a[0] not in FILES or not a[1].isdigit():
        raise ValueError(f"Bad square: {a!r}")
    p = Pos(FILES.index(a[0]), int(a[1]) - 1)
    if not p.is_valid():
        raise ValueError(f"Bad square: {a!r}")
    return p

def all_squares():
    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            yield Pos(x, y)
