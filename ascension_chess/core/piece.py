from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .definitions import PieceKind, PIECE_VALUE, ASCENSIONS, PIECE_LETTER
from .types import Color

@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    color: Color
    has_moved: bool = False

    def value(self) -> int:
        return PIECE_VALUE[self.kind]

    def ascension_cost(self) -> Optional[int]:
        a = ASCENSIONS.get(self.kind)
        return None if a is None else a.cost

    def ascended_kind(self) -> Optional[PieceKind]:
        a = ASCENSIONS.get(self.kind)
        return None if a is None else a.target

    def moved(self) -> "Piece":
        return self if self.has_moved else replace(self, has_moved=True)

    def with_kind(self, kind: PieceKind) -> "Piece":
        return replace(self, kind=kind)

    @property
    def symbol(self) -> str:
        ch = PIECE_LETTER[self.kind]
        return ch.upper() if self.color is Color.WHITE else ch
