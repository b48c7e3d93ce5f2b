from __future__ import annotations

from typing import Optional

from .core import Board, Color, Game, Piece, PieceKind, PositionTracker, Pos, parse_pos, pos_name
from .core.definitions import LETTER_TO_KIND, PIECE_LETTER
from .core.tracker import (
    castle_rights, CASTLE_WHITE_KING, CASTLE_WHITE_QUEEN, CASTLE_BLACK_KING, CASTLE_BLACK_QUEEN,
)

STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 0/0"

_RIGHT_FLAGS = (
    ("K", CASTLE_WHITE_KING),
    ("Q", CASTLE_WHITE_QUEEN),
    ("k", CASTLE_BLACK_KING),
    ("q", CASTLE_BLACK_QUEEN),
)


def _parse_placement(placement: str, board: Board) -> None:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError("FEN placement must have 8 ranks")

    kings = {Color.WHITE: 0, Color.BLACK: 0}
    for rank_idx, row in enumerate(ranks):
        y = 7 - rank_idx
        x = 0
        for ch in row:
            if ch.isdigit():
                gap = int(ch)
                if gap < 1 or gap > 8:
                    raise ValueError("Bad empty-square run in FEN")
                x += gap
                if x > 8:
                    raise ValueError("Bad rank width in FEN")
                continue
            if x >= 8:
                raise ValueError("Bad rank width in FEN")
            kind = LETTER_TO_KIND.get(ch.lower())
            if kind is None:
                raise ValueError(f"Unknown piece char: {ch}")
            color = Color.WHITE if ch.isupper() else Color.BLACK
            # anything off its starting square has necessarily moved
            moved = not (kind is PieceKind.PAWN and y == color.pawn_rank)
            board.set_piece(Pos(x, y), Piece(kind, color, has_moved=moved))
            if kind is PieceKind.KING:
                kings[color] += 1
            x += 1
        if x != 8:
            raise ValueError("Bad rank width in FEN")

    if kings[Color.WHITE] != 1 or kings[Color.BLACK] != 1:
        raise ValueError("FEN must contain exactly one king per side")


def _apply_castling(castling: str, board: Board) -> None:
    if castling == "-":
        castling = ""
    seen = set()
    for flag in castling:
        if flag not in "KQkq" or flag in seen:
            raise ValueError("Bad castling rights in FEN")
        seen.add(flag)

    def home(color: Color, x: int, kind: PieceKind) -> Optional[Piece]:
        p = board.get_piece(Pos(x, color.home_rank))
        return p if p is not None and p.kind is kind and p.color is color else None

    for flag in castling:
        color = Color.WHITE if flag.isupper() else Color.BLACK
        rook_x = 7 if flag.lower() == "k" else 0
        king = home(color, 4, PieceKind.KING)
        rook = home(color, rook_x, PieceKind.ROOK)
        if king is None or rook is None:
            raise ValueError("Bad castling rights in FEN")
        board.set_piece(Pos(4, color.home_rank), Piece(PieceKind.KING, color))
        board.set_piece(Pos(rook_x, color.home_rank), Piece(PieceKind.ROOK, color))


def _apply_en_passant(ep: str, side: Color, board: Board) -> None:
    if ep == "-":
        return
    target = parse_pos(ep)
    # the side that just double-stepped is the one not on move
    pusher = side.opposite()
    if target.y != pusher.pawn_rank + pusher.forward:
        raise ValueError("Bad en-passant square in FEN")
    pawn = board.get_piece(Pos(target.x, target.y + pusher.forward))
    if pawn is None or pawn.kind is not PieceKind.PAWN or pawn.color is not pusher:
        raise ValueError("Bad en-passant square in FEN")
    if not board.is_empty(target) or not board.is_empty(Pos(target.x, pusher.pawn_rank)):
        raise ValueError("Bad en-passant square in FEN")
    board.en_passant_target = target


def parse_fen(fen: str) -> Game:
    """Parse an extended FEN into a Game.

    Fields: placement, side, castling, en passant, halfmove, fullmove and an
    optional ``white/black`` point total. Ascended kinds use H, E, A, C, M.
    """
    parts = fen.strip().split()
    if len(parts) not in (6, 7):
        raise ValueError("FEN must have 6 or 7 fields")

    placement, stm, castling, ep, halfmove, fullmove = parts[:6]

    board = Board()
    _parse_placement(placement, board)

    if stm == "w":
        side = Color.WHITE
    elif stm == "b":
        side = Color.BLACK
    else:
        raise ValueError("Bad side-to-move in FEN")

    _apply_castling(castling, board)
    _apply_en_passant(ep, side, board)

    white_points = black_points = 0
    if len(parts) == 7:
        try:
            w, b = parts[6].split("/")
            white_points, black_points = int(w), int(b)
        except ValueError as e:
            raise ValueError(f"Bad point field in FEN: {parts[6]!r}") from e
        if white_points < 0 or black_points < 0:
            raise ValueError(f"Bad point field in FEN: {parts[6]!r}")

    g = Game(board=board, turn=side, white_points=white_points, black_points=black_points, track_positions=False)
    try:
        g.halfmove_clock = int(halfmove)
        g.fullmove_number = int(fullmove)
    except ValueError as e:
        raise ValueError("Bad move counters in FEN") from e

    # hash only once the position is final
    PositionTracker().attach(g)
    return g


def board_placement(board: Board) -> str:
    rows = []
    for y in range(7, -1, -1):
        empty = 0
        row = []
        for x in range(8):
            p = board.get_piece(Pos(x, y))
            if p is None:
                empty += 1
                continue
            if empty:
                row.append(str(empty))
                empty = 0
            row.append(p.symbol)
        if empty:
            row.append(str(empty))
        rows.append("".join(row))
    return "/".join(rows)


def game_to_fen(g: Game) -> str:
    placement = board_placement(g.board)
    stm = "w" if g.turn is Color.WHITE else "b"

    rights = castle_rights(g.board)
    castling = "".join(flag for flag, bit in _RIGHT_FLAGS if rights & bit) or "-"

    ep = "-" if g.board.en_passant_target is None else pos_name(g.board.en_passant_target)

    return (
        f"{placement} {stm} {castling} {ep} {int(g.halfmove_clock)} {int(g.fullmove_number)} "
        f"{int(g.white_points)}/{int(g.black_points)}"
    )
