from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..core import Game, PieceKind, Pos, parse_pos
from ..core.definitions import LETTER_TO_KIND
from ..core.events import MoveMade, PieceAscended, PromotionResolved
from ..core.game import PostUpgrade, Promoting

LOGGER = logging.getLogger("ascension.api.commands")


@dataclass(frozen=True)
class SelectCommand:
    pos: Pos


@dataclass(frozen=True)
class MoveCommand:
    from_pos: Pos
    to_pos: Pos


@dataclass(frozen=True)
class AscendCommand:
    pos: Pos


@dataclass(frozen=True)
class PromoteCommand:
    kind: PieceKind


Command = Union[SelectCommand, MoveCommand, AscendCommand, PromoteCommand]


def apply_command(game: Game, cmd: Command) -> bool:
    """Run one player action against ``game``. Returns whether the state advanced."""
    if isinstance(cmd, SelectCommand):
        before = (game.selected_pos, len(game.history))
        game.select_square(cmd.pos)
        return (game.selected_pos, len(game.history)) != before

    if isinstance(cmd, MoveCommand):
        return game.request_move(cmd.from_pos, cmd.to_pos)

    if isinstance(cmd, AscendCommand):
        before = game.phase
        game.attempt_ascension(cmd.pos)
        return game.phase != before and isinstance(game.phase, PostUpgrade)

    if isinstance(cmd, PromoteCommand):
        if not isinstance(game.phase, Promoting):
            return False
        game.resolve_promotion(cmd.kind)
        return not isinstance(game.phase, Promoting)

    raise TypeError(f"Unknown command: {cmd!r}")


def command_from_event(event: object) -> Optional[Command]:
    """The action that produced ``event``, when it is one a remote peer has to replay."""
    if isinstance(event, MoveMade):
        return MoveCommand(event.record.from_pos, event.record.to_pos)
    if isinstance(event, PieceAscended):
        return AscendCommand(event.pos)
    if isinstance(event, PromotionResolved):
        return PromoteCommand(event.kind)
    return None


def parse_promotion_kind(token: str) -> PieceKind:
    t = token.strip()
    kind = LETTER_TO_KIND.get(t.lower()) if len(t) == 1 else None
    if kind is not None:
        return kind
    for k in PieceKind:
        if k.value.lower() == t.lower():
            return k
    raise ValueError(f"Unknown piece kind: {token!r}")


def parse_command(text: str, selected: Optional[Pos] = None) -> Command:
    """Parse a typed action.

    Accepted forms: ``e2`` (click), ``e2e4`` / ``e2 e4`` (move),
    ``ascend e2`` / ``u e2`` / ``u`` (ascend, defaults to the selection),
    ``promote q`` / ``=q`` (promotion choice, letter or kind name).
    """
    words = text.strip().lower().split()
    if not words:
        raise ValueError("Empty command")

    head = words[0]
    if head.startswith("=") and len(words) == 1 and len(head) > 1:
        return PromoteCommand(parse_promotion_kind(head[1:]))

    if head in ("promote", "p"):
        if len(words) != 2:
            raise ValueError("Usage: promote <kind>")
        return PromoteCommand(parse_promotion_kind(words[1]))

    if head in ("ascend", "u"):
        if len(words) == 2:
            return AscendCommand(parse_pos(words[1]))
        if len(words) == 1 and selected is not None:
            return AscendCommand(selected)
        raise ValueError("Usage: ascend <square>")

    if len(words) == 2:
        return MoveCommand(parse_pos(words[0]), parse_pos(words[1]))
    if len(words) == 1 and len(head) == 4:
        return MoveCommand(parse_pos(head[:2]), parse_pos(head[2:]))
    if len(words) == 1 and len(head) == 2:
        return SelectCommand(parse_pos(head))
    raise ValueError(f"Cannot parse command: {text!r}")
