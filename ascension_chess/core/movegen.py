"""Per-kind move geometry.

Every generator has the signature ``(board, pos, piece, attack_mode) -> List[Pos]``.
In normal mode the result is the set of pseudo-legal destinations. In attack mode
it is the set of squares the piece threatens: friendly-occupied squares are
included, pawn and hawk capture squares are reported regardless of occupancy,
and castling is never generated.
"""

from __future__ import annotations

from typing import Callable, Dict, List, TYPE_CHECKING

from .definitions import PieceKind, ARCHBISHOP_ORTHOGONAL_RANGE
from .geometry import (
    ORTH, DIAG, KING8, KNIGHT_DELTAS, DIAG2,
    can_land, step_targets, slide_targets, signum,
)
from .piece import Piece
from .types import Pos

if TYPE_CHECKING:
    from .board import Board

Generator = Callable[["Board", Pos, Piece, bool], List[Pos]]


def _pawn(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    fwd = piece.color.forward
    if attack_mode:
        return [s for s in (pos.offset(-1, fwd), pos.offset(1, fwd)) if s.is_valid()]

    out: List[Pos] = []
    one = pos.offset(0, fwd)
    if one.is_valid() and board.is_empty(one):
        out.append(one)
        if pos.y == piece.color.pawn_rank:
            two = pos.offset(0, 2 * fwd)
            if board.is_empty(two):
                out.append(two)

    for dx in (-1, 1):
        to = pos.offset(dx, fwd)
        if not to.is_valid():
            continue
        target = board.get_piece(to)
        if target is not None:
            if target.color is not piece.color:
                out.append(to)
        elif to == board.en_passant_target:
            # the double-stepped pawn sits beside us
            victim = board.get_piece(Pos(to.x, pos.y))
            if victim is not None and victim.color is not piece.color:
                out.append(to)
    return out


def _knight(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    return step_targets(board, pos, piece.color, KNIGHT_DELTAS, attack_mode)


def _king(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    out = step_targets(board, pos, piece.color, KING8, attack_mode)
    if not attack_mode:
        out.extend(castling_targets(board, pos, piece))
    return out


def castling_targets(board: "Board", pos: Pos, piece: Piece) -> List[Pos]:
    if piece.has_moved or board.is_in_check(piece.color):
        return []

    enemy = piece.color.opposite()
    out: List[Pos] = []
    for rook_x in (7, 0):
        rook_pos = Pos(rook_x, pos.y)
        if abs(rook_x - pos.x) < 3:
            continue
        rook = board.get_piece(rook_pos)
        if rook is None or rook.kind is not PieceKind.ROOK or rook.color is not piece.color or rook.has_moved:
            continue
        if not board.is_path_clear(pos, rook_pos):
            continue
        step = signum(rook_x - pos.x)
        if board.is_square_attacked(pos.offset(step, 0), enemy):
            continue
        out.append(pos.offset(2 * step, 0))
    return out


def _rook(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    return slide_targets(board, pos, piece.color, ORTH, attack_mode)


def _bishop(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    return slide_targets(board, pos, piece.color, DIAG, attack_mode)


def _queen(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    return slide_targets(board, pos, piece.color, KING8, attack_mode)


def _hawk(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    fwd = piece.color.forward
    capture_squares = [
        pos.offset(-1, 0), pos.offset(1, 0),
        pos.offset(-1, fwd), pos.offset(0, fwd), pos.offset(1, fwd),
    ]
    if attack_mode:
        return [s for s in capture_squares if s.is_valid()]

    out: List[Pos] = []
    one = pos.offset(0, fwd)
    if one.is_valid() and board.is_empty(one):
        out.append(one)
    for s in capture_squares:
        target = board.get_piece(s)
        if target is not None and target.color is not piece.color:
            out.append(s)
    return out


def _elephant(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    out = step_targets(board, pos, piece.color, KNIGHT_DELTAS, attack_mode)
    out.extend(step_targets(board, pos, piece.color, DIAG, attack_mode))
    for dx, dy in DIAG2:
        to = pos.offset(dx, dy)
        if board.is_empty(pos.offset(dx // 2, dy // 2)) and can_land(board, to, piece.color, attack_mode):
            out.append(to)
    return out


def _archbishop(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    out = slide_targets(board, pos, piece.color, DIAG, attack_mode)
    out.extend(slide_targets(board, pos, piece.color, ORTH, attack_mode, limit=ARCHBISHOP_ORTHOGONAL_RANGE))
    return out


def _monarch(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    out = slide_targets(board, pos, piece.color, KING8, attack_mode)
    out.extend(step_targets(board, pos, piece.color, KNIGHT_DELTAS, attack_mode))
    return out


def _cannon(board: "Board", pos: Pos, piece: Piece, attack_mode: bool) -> List[Pos]:
    out: List[Pos] = []
    for dx, dy in ORTH:
        to = pos.offset(dx, dy)
        screened = False
        while to.is_valid():
            target = board.get_piece(to)
            if not screened:
                if target is None:
                    if not attack_mode:
                        out.append(to)
                else:
                    screened = True
            elif target is None:
                # a piece placed here would be capturable over the screen
                if attack_mode:
                    out.append(to)
            else:
                if attack_mode or target.color is not piece.color:
                    out.append(to)
                break
            to = to.offset(dx, dy)
    return out


_GENERATORS: Dict[PieceKind, Generator] = {
    PieceKind.PAWN: _pawn,
    PieceKind.KNIGHT: _knight,
    PieceKind.BISHOP: _bishop,
    PieceKind.ROOK: _rook,
    PieceKind.QUEEN: _queen,
    PieceKind.KING: _king,
    PieceKind.HAWK: _hawk,
    PieceKind.ELEPHANT: _elephant,
    PieceKind.ARCHBISHOP: _archbishop,
    PieceKind.CANNON: _cannon,
    PieceKind.MONARCH: _monarch,
}

if set(_GENERATORS) != set(PieceKind):
    raise RuntimeError(f"No move generator for: {sorted(k.value for k in set(PieceKind) - set(_GENERATORS))}")


def pseudo_legal_moves(board: "Board", pos: Pos, piece: Piece, attack_mode: bool = False) -> List[Pos]:
    return _GENERATORS[piece.kind](board, pos, piece, attack_mode)
