from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet

class PieceKind(str, Enum):
    KING = "King"
    QUEEN = "Queen"
    ROOK = "Rook"
    BISHOP = "Bishop"
    KNIGHT = "Knight"
    PAWN = "Pawn"
    # ascended kinds
    HAWK = "Hawk"
    ELEPHANT = "Elephant"
    ARCHBISHOP = "Archbishop"
    CANNON = "Cannon"
    MONARCH = "Monarch"

BASE_KINDS: FrozenSet[PieceKind] = frozenset({
    PieceKind.KING, PieceKind.QUEEN, PieceKind.ROOK,
    PieceKind.BISHOP, PieceKind.KNIGHT, PieceKind.PAWN,
})
ASCENDED_KINDS: FrozenSet[PieceKind] = frozenset(set(PieceKind) - BASE_KINDS)

PIECE_VALUE: Dict[PieceKind, int] = {
    PieceKind.PAWN: 1,
    PieceKind.KNIGHT: 3,
    PieceKind.BISHOP: 3,
    PieceKind.ROOK: 5,
    PieceKind.QUEEN: 9,
    PieceKind.KING: 0,
    PieceKind.HAWK: 6,
    PieceKind.ELEPHANT: 10,
    PieceKind.ARCHBISHOP: 10,
    PieceKind.CANNON: 13,
    PieceKind.MONARCH: 21,
}

@dataclass(frozen=True)
class AscensionDef:
    source: PieceKind
    target: PieceKind
    cost: int

ASCENSIONS: Dict[PieceKind, AscensionDef] = {
    PieceKind.PAWN: AscensionDef(PieceKind.PAWN, PieceKind.HAWK, 5),
    PieceKind.KNIGHT: AscensionDef(PieceKind.KNIGHT, PieceKind.ELEPHANT, 7),
    PieceKind.BISHOP: AscensionDef(PieceKind.BISHOP, PieceKind.ARCHBISHOP, 7),
    PieceKind.ROOK: AscensionDef(PieceKind.ROOK, PieceKind.CANNON, 8),
    PieceKind.QUEEN: AscensionDef(PieceKind.QUEEN, PieceKind.MONARCH, 12),
}

STANDARD_PROMOTIONS: FrozenSet[PieceKind] = frozenset({
    PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT,
})
# Hawk promotion unlocks the ascended roster as well
UNLOCKED_PROMOTIONS: FrozenSet[PieceKind] = STANDARD_PROMOTIONS | ASCENDED_KINDS

PROMOTING_KINDS: FrozenSet[PieceKind] = frozenset({PieceKind.PAWN, PieceKind.HAWK})

# point economy
TURN_START_POINTS = 1
CHECK_BONUS = 2
PROMOTION_BONUS = 2
CASTLE_BONUS = 3

# a lone minor (or two knights) only counts as mating material with this many points banked
MINOR_MATING_POINTS = 7

# squares the Archbishop may travel along a rank or file
ARCHBISHOP_ORTHOGONAL_RANGE = 1

# half-moves without capture, pawn/hawk move or ascension before a draw
FIFTY_MOVE_HALFMOVES = 100
REPETITION_LIMIT = 3

PIECE_LETTER: Dict[PieceKind, str] = {
    PieceKind.KING: "k",
    PieceKind.QUEEN: "q",
    PieceKind.ROOK: "r",
    PieceKind.BISHOP: "b",
    PieceKind.KNIGHT: "n",
    PieceKind.PAWN: "p",
    PieceKind.HAWK: "h",
    PieceKind.ELEPHANT: "e",
    PieceKind.ARCHBISHOP: "a",
    PieceKind.CANNON: "c",
    PieceKind.MONARCH: "m",
}
LETTER_TO_KIND: Dict[str, PieceKind] = {v: k for k, v in PIECE_LETTER.items()}
