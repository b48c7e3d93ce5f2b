from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .piece import Piece
from .types import Pos

# move flags
CAPTURE = "capture"
DOUBLE_STEP = "double_pawn_push"
EN_PASSANT = "en_passant"
CASTLE = "castle"
PROMOTION = "promotion"
CHECK = "check"
KING_CAPTURE = "king_capture"

@dataclass(frozen=True)
class MoveRecord:
    """What a single applied move did to the board.

    ``piece`` is the mover as it stood before the move. ``points`` is filled in
    by the game once the point economy has been settled for the move.
    """
    from_pos: Pos
    to_pos: Pos
    piece: Piece
    captured: Optional[Piece] = None
    captured_pos: Optional[Pos] = None
    rook_from: Optional[Pos] = None
    rook_to: Optional[Pos] = None
    flags: Tuple[str, ...] = ()
    points: int = 0

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def has(self, flag: str) -> bool:
        return flag in self.flags
