from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Union

from .board import Board
from .definitions import (
    PieceKind, PROMOTING_KINDS, STANDARD_PROMOTIONS, UNLOCKED_PROMOTIONS,
    TURN_START_POINTS, CHECK_BONUS, PROMOTION_BONUS, CASTLE_BONUS,
    FIFTY_MOVE_HALFMOVES, REPETITION_LIMIT,
)
from .events import Listener, MoveMade, PieceAscended, PromotionResolved, TurnStarted, GameEnded
from .moves import MoveRecord, CASTLE, CHECK, KING_CAPTURE, PROMOTION
from .result import GameResult, ResultReason
from .tracker import PositionTracker
from .types import Color, Pos

LOGGER = logging.getLogger("ascension.core.game")

# --- turn phases ---
@dataclass(frozen=True)
class Normal:
    pass

@dataclass(frozen=True)
class PostUpgrade:
    """A piece was ascended this turn and may not be selected again."""
    pos: Pos

@dataclass(frozen=True)
class Promoting:
    """A pawn or hawk reached the last rank; ``unlocked`` allows ascended kinds."""
    pos: Pos
    unlocked: bool

@dataclass(frozen=True)
class GameOver:
    pass

Phase = Union[Normal, PostUpgrade, Promoting, GameOver]

class Game:
    """Turn owner, point economy and phase state machine over one board.

    Requests that do not meet their preconditions leave the game untouched.
    Whose turn it is on the wire is the caller's business: the game trusts
    that the active player is the one issuing calls.
    """

    def __init__(
        self,
        board: Optional[Board] = None,
        turn: Color = Color.WHITE,
        white_points: int = 0,
        black_points: int = 0,
        track_positions: bool = True,
    ) -> None:
        self.board = board if board is not None else Board.standard()
        self.turn: Color = turn
        self.white_points: int = white_points
        self.black_points: int = black_points

        self.selected_pos: Optional[Pos] = None
        self.legal_moves: List[Pos] = []
        self.phase: Phase = Normal()
        self.result: Optional[GameResult] = None
        self.last_move: Optional[MoveRecord] = None
        self.history: List[Board] = []

        self.halfmove_clock: int = 0
        self.fullmove_number: int = 1

        self.listeners: List[Listener] = []
        self.tracker: Optional[PositionTracker] = None
        if track_positions:
            PositionTracker().attach(self)

    # --- read helpers ---
    @property
    def winner(self) -> Optional[Color]:
        return None if self.result is None else self.result.winner

    @property
    def is_over(self) -> bool:
        return isinstance(self.phase, GameOver)

    def points_of(self, color: Color) -> int:
        return self.white_points if color is Color.WHITE else self.black_points

    def in_check(self) -> bool:
        return self.board.is_in_check(self.turn)

    def _add_points(self, color: Color, amount: int) -> None:
        if color is Color.WHITE:
            self.white_points += amount
        else:
            self.black_points += amount

    def emit(self, event: object) -> None:
        for listener in list(self.listeners):
            listener.on_event(self, event)

    def clear_selection(self) -> None:
        self.selected_pos = None
        self.legal_moves = []

    # --- input ---
    def select_square(self, pos: Pos) -> None:
        if isinstance(self.phase, (GameOver, Promoting)):
            return

        if pos == self.selected_pos:
            self.clear_selection()
            return

        if self.selected_pos is not None and pos in self.legal_moves:
            self.make_move(self.selected_pos, pos)
            return

        piece = self.board.get_piece(pos)
        if piece is not None and piece.color is self.turn:
            if isinstance(self.phase, PostUpgrade) and self.phase.pos == pos:
                return
            self.selected_pos = pos
            self.legal_moves = self.board.get_legal_moves(pos)
        else:
            self.clear_selection()

    def request_move(self, from_pos: Pos, to_pos: Pos) -> bool:
        """Play ``from_pos`` -> ``to_pos`` exactly as two clicks would. Returns whether it happened."""
        if isinstance(self.phase, (GameOver, Promoting)):
            return False
        self.clear_selection()
        self.select_square(from_pos)
        if self.selected_pos != from_pos or to_pos not in self.legal_moves:
            LOGGER.debug("move_rejected", extra={"from": str(from_pos), "to": str(to_pos)})
            self.clear_selection()
            return False
        self.select_square(to_pos)
        return True

    # --- moves ---
    def make_move(self, from_pos: Pos, to_pos: Pos) -> None:
        if isinstance(self.phase, (GameOver, Promoting)):
            return
        piece = self.board.get_piece(from_pos)
        if piece is None or not to_pos.is_valid():
            LOGGER.debug("move_rejected", extra={"from": str(from_pos), "to": str(to_pos)})
            return

        mover = self.turn
        self.history.append(self.board.clone())
        record = self.board.apply_move(from_pos, to_pos)
        self.clear_selection()

        if record.captured is not None and record.captured.kind is PieceKind.KING:
            record = replace(record, flags=record.flags + (KING_CAPTURE,))
            self.last_move = record
            self.emit(MoveMade(record=record, color=mover))
            self._finish(GameResult.win(mover, ResultReason.KING_CAPTURED))
            return

        gained = record.captured.value() if record.captured is not None else 0
        if record.has(CASTLE):
            gained += CASTLE_BONUS

        flags = list(record.flags)
        promoting = piece.kind in PROMOTING_KINDS and to_pos.y == mover.last_rank
        if promoting:
            flags.append(PROMOTION)
            if piece.kind is PieceKind.PAWN:
                gained += PROMOTION_BONUS
        elif self.board.is_in_check(mover.opposite()):
            # promotions settle the check bonus once the new kind is known
            flags.append(CHECK)
            gained += CHECK_BONUS

        self._add_points(mover, gained)
        record = replace(record, flags=tuple(flags), points=gained)
        self.last_move = record
        self._update_clocks(record, mover)
        self.emit(MoveMade(record=record, color=mover))

        if promoting:
            self.phase = Promoting(to_pos, unlocked=piece.kind is PieceKind.HAWK)
        else:
            self.end_turn_process()

    def resolve_promotion(self, new_kind: PieceKind) -> None:
        if not isinstance(self.phase, Promoting):
            return
        allowed = UNLOCKED_PROMOTIONS if self.phase.unlocked else STANDARD_PROMOTIONS
        if new_kind not in allowed:
            LOGGER.debug("promotion_rejected", extra={"kind": getattr(new_kind, "value", new_kind)})
            return

        pos = self.phase.pos
        check = False
        piece = self.board.get_piece(pos)
        if piece is not None:
            self.board.set_piece(pos, piece.with_kind(new_kind))
            if self.board.is_in_check(self.turn.opposite()):
                check = True
                self._add_points(self.turn, CHECK_BONUS)
                if self.last_move is not None:
                    self.last_move = replace(
                        self.last_move,
                        flags=self.last_move.flags + (CHECK,),
                        points=self.last_move.points + CHECK_BONUS,
                    )

        self.emit(PromotionResolved(pos=pos, color=self.turn, kind=new_kind, check=check))
        self.end_turn_process()

    def end_turn_process(self) -> None:
        self.turn = self.turn.opposite()
        self.phase = Normal()
        self.clear_selection()
        self._add_points(self.turn, TURN_START_POINTS)
        self.emit(TurnStarted(color=self.turn, points=self.points_of(self.turn)))

        result = self._adjudicate()
        if result is not None:
            self._finish(result)

    # --- ascension ---
    def attempt_ascension(self, pos: Pos) -> None:
        if not isinstance(self.phase, Normal):
            return
        if self.board.is_in_check(self.turn):
            return

        piece = self.board.get_piece(pos)
        if piece is None or piece.color is not self.turn:
            return
        cost = piece.ascension_cost()
        target = piece.ascended_kind()
        if cost is None or target is None:
            return
        if self.points_of(self.turn) < cost:
            LOGGER.debug("ascension_rejected", extra={"pos": str(pos), "cost": cost})
            return
        if not self._can_move_other_than(pos):
            # the ascended piece is frozen for the turn, something else has to move
            LOGGER.debug("ascension_rejected", extra={"pos": str(pos), "reason": "no_other_move"})
            return

        self._add_points(self.turn, -cost)
        self.board.set_piece(pos, piece.with_kind(target))
        self.phase = PostUpgrade(pos)
        self.clear_selection()
        self.halfmove_clock = 0
        self.emit(PieceAscended(pos=pos, color=self.turn, from_kind=piece.kind, to_kind=target, cost=cost))

    def _can_move_other_than(self, pos: Pos) -> bool:
        for p, _ in self.board.pieces(self.turn):
            if p != pos and self.board.get_legal_moves(p):
                return True
        return False

    # --- adjudication ---
    def _update_clocks(self, record: MoveRecord, mover: Color) -> None:
        if record.is_capture or record.piece.kind in PROMOTING_KINDS:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if mover is Color.BLACK:
            self.fullmove_number += 1

    def _adjudicate(self) -> Optional[GameResult]:
        if not self.board.has_any_legal_move(self.turn):
            if self.board.is_in_check(self.turn):
                return GameResult.win(self.turn.opposite(), ResultReason.CHECKMATE)
            return GameResult.draw(ResultReason.STALEMATE)
        if self.board.has_insufficient_material(self.white_points, self.black_points):
            return GameResult.draw(ResultReason.INSUFFICIENT_MATERIAL)
        if self.tracker is not None and self.tracker.repetitions() >= REPETITION_LIMIT:
            return GameResult.draw(ResultReason.THREEFOLD_REPETITION)
        if self.halfmove_clock >= FIFTY_MOVE_HALFMOVES:
            return GameResult.draw(ResultReason.FIFTY_MOVE_RULE)
        return None

    def _finish(self, result: GameResult) -> None:
        self.result = result
        self.phase = GameOver()
        self.clear_selection()
        LOGGER.debug("game_over", extra={"reason": result.reason.value, "winner": getattr(result.winner, "name", None)})
        self.emit(GameEnded(result=result))
