from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .definitions import PieceKind
from .types import Color, Pos

if TYPE_CHECKING:
    from .game import Game
    from .moves import MoveRecord
    from .result import GameResult

class Listener:
    def on_event(self, game: "Game", event: object) -> None:
        return

@dataclass(frozen=True)
class MoveMade:
    record: "MoveRecord"
    color: Color

@dataclass(frozen=True)
class PieceAscended:
    pos: Pos
    color: Color
    from_kind: PieceKind
    to_kind: PieceKind
    cost: int

@dataclass(frozen=True)
class PromotionResolved:
    pos: Pos
    color: Color
    kind: PieceKind
    check: bool

@dataclass(frozen=True)
class TurnStarted:
    color: Color
    points: int

@dataclass(frozen=True)
class GameEnded:
    result: "GameResult"
