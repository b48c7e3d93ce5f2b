from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .types import Color

class ResultReason(str, Enum):
    CHECKMATE = "checkmate"
    KING_CAPTURED = "king_captured"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient_material"
    THREEFOLD_REPETITION = "threefold_repetition"
    FIFTY_MOVE_RULE = "fifty_move_rule"

@dataclass(frozen=True)
class GameResult:
    winner: Optional[Color]
    reason: ResultReason

    @classmethod
    def win(cls, winner: Color, reason: ResultReason) -> "GameResult":
        return cls(winner=winner, reason=reason)

    @classmethod
    def draw(cls, reason: ResultReason) -> "GameResult":
        return cls(winner=None, reason=reason)

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def describe(self) -> str:
        what = self.reason.value.replace("_", " ")
        if self.is_draw:
            return f"Draw by {what}."
        return f"{self.winner.name.title()} wins by {what}."
