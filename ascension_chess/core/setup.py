from __future__ import annotations

from typing import TYPE_CHECKING

from .definitions import PieceKind
from .piece import Piece
from .types import Color, Pos

if TYPE_CHECKING:
    from .board import Board

BACK_RANK = (
    PieceKind.ROOK, PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.QUEEN,
    PieceKind.KING, PieceKind.BISHOP, PieceKind.KNIGHT, PieceKind.ROOK,
)

def setup_standard(board: "Board") -> None:
    for color in (Color.WHITE, Color.BLACK):
        for x, kind in enumerate(BACK_RANK):
            board.set_piece(Pos(x, color.home_rank), Piece(kind, color))
        for x in range(8):
            board.set_piece(Pos(x, color.pawn_rank), Piece(PieceKind.PAWN, color))
    board.en_passant_target = None

def ascii_board(board: "Board") -> str:
    rows = []
    for y in range(7, -1, -1):
        row = [str(y + 1)]
        for x in range(8):
            p = board.get_piece(Pos(x, y))
            row.append(p.symbol if p else ".")
        rows.append(" ".join(row))
    rows.append("  a b c d e f g h")
    return "\n".join(rows)
