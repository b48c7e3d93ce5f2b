from __future__ import annotations

import random
from typing import Dict, List, Tuple, TYPE_CHECKING

from .definitions import PieceKind
from .events import Listener, TurnStarted
from .types import Color, Pos

if TYPE_CHECKING:
    from .board import Board
    from .game import Game

CASTLE_WHITE_KING = 1
CASTLE_WHITE_QUEEN = 2
CASTLE_BLACK_KING = 4
CASTLE_BLACK_QUEEN = 8

def castle_rights(board: "Board") -> int:
    rights = 0

    def ok(color: Color, pos: Pos, kind: PieceKind) -> bool:
        p = board.get_piece(pos)
        return p is not None and p.kind is kind and p.color is color and not p.has_moved

    for color, king_bit, queen_bit in (
        (Color.WHITE, CASTLE_WHITE_KING, CASTLE_WHITE_QUEEN),
        (Color.BLACK, CASTLE_BLACK_KING, CASTLE_BLACK_QUEEN),
    ):
        rank = color.home_rank
        if ok(color, Pos(4, rank), PieceKind.KING):
            if ok(color, Pos(7, rank), PieceKind.ROOK):
                rights |= king_bit
            if ok(color, Pos(0, rank), PieceKind.ROOK):
                rights |= queen_bit
    return rights

def ep_capturable(board: "Board", ep: Pos, side: Color) -> bool:
    """Whether a pawn of ``side`` stands beside the double-stepped pawn, ready to take it."""
    rank = ep.y - side.forward
    for dx in (-1, 1):
        p = board.get_piece(Pos(ep.x + dx, rank))
        if p is not None and p.kind is PieceKind.PAWN and p.color is side:
            return True
    return False

class PositionTracker(Listener):
    """Zobrist hash of the position at every turn start, with repetition counts."""

    def __init__(self, seed: int = 0xC0FFEE) -> None:
        rng = random.Random(seed)

        self.psq: Dict[Tuple[Color, PieceKind], List[int]] = {
            (color, kind): [rng.getrandbits(64) for _ in range(64)]
            for color in Color
            for kind in PieceKind
        }
        self.side_key = rng.getrandbits(64)
        self.castle_keys = {
            CASTLE_WHITE_KING: rng.getrandbits(64),
            CASTLE_WHITE_QUEEN: rng.getrandbits(64),
            CASTLE_BLACK_KING: rng.getrandbits(64),
            CASTLE_BLACK_QUEEN: rng.getrandbits(64),
        }
        self.ep_keys = [rng.getrandbits(64) for _ in range(64)]

        self.hash: int = 0
        self.rep: Dict[int, int] = {}

    def attach(self, game: "Game") -> None:
        game.listeners.append(self)
        game.tracker = self
        self.sync_from_game(game)

    def sync_from_game(self, game: "Game") -> None:
        self.hash = self.compute_hash(game.board, game.turn)
        self.rep = {self.hash: 1}

    def repetitions(self) -> int:
        return self.rep.get(self.hash, 0)

    def on_event(self, game: "Game", event: object) -> None:
        if isinstance(event, TurnStarted):
            self.hash = self.compute_hash(game.board, event.color)
            self.rep[self.hash] = self.rep.get(self.hash, 0) + 1

    def compute_hash(self, board: "Board", side_to_move: Color) -> int:
        h = 0
        for pos, p in board.pieces():
            h ^= self.psq[(p.color, p.kind)][pos.y * 8 + pos.x]
        if side_to_move is Color.BLACK:
            h ^= self.side_key
        rights = castle_rights(board)
        for bit, key in self.castle_keys.items():
            if rights & bit:
                h ^= key
        ep = board.en_passant_target
        if ep is not None and ep_capturable(board, ep, side_to_move):
            h ^= self.ep_keys[ep.y * 8 + ep.x]
        return h
