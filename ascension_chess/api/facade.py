from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..core import Game
from ..fen import parse_fen

from .commands import (
    Command, SelectCommand, MoveCommand, AscendCommand, PromoteCommand,
    apply_command,
)
from .serde import snapshot, diff, pos_to_dict, dict_to_pos, kind_from_name


class AscensionEngine:
    """A small, stable facade for UI/server integration.

    - every action returns before/after snapshots plus a diff for animation
    - rejected actions leave the state untouched and report ``applied: False``
    """

    def __init__(self, game: Optional[Game] = None) -> None:
        self.game = game if game is not None else Game()

    @classmethod
    def from_fen(cls, fen: str) -> "AscensionEngine":
        return cls(parse_fen(fen))

    def state(self) -> Dict[str, Any]:
        return snapshot(self.game)

    def legal_moves(self, pos: Any) -> List[Dict[str, Any]]:
        p = dict_to_pos(pos)
        return [pos_to_dict(t) for t in self.game.board.get_legal_moves(p)]

    def run(self, cmd: Command) -> Dict[str, Any]:
        before = snapshot(self.game)
        applied = apply_command(self.game, cmd)
        after = snapshot(self.game)
        return {"applied": applied, "before": before, "after": after, "diff": diff(before, after)}

    def click(self, pos: Any) -> Dict[str, Any]:
        return self.run(SelectCommand(dict_to_pos(pos)))

    def move(self, from_pos: Any, to_pos: Any) -> Dict[str, Any]:
        return self.run(MoveCommand(dict_to_pos(from_pos), dict_to_pos(to_pos)))

    def ascend(self, pos: Any) -> Dict[str, Any]:
        return self.run(AscendCommand(dict_to_pos(pos)))

    def promote(self, kind: Any) -> Dict[str, Any]:
        return self.run(PromoteCommand(kind_from_name(kind)))
