"""Stable backend boundary for renderers and network peers.

Speaks JSON-friendly structures only:
- state snapshots and snapshot diffs
- player commands (click, move, ascend, promote)
"""

from .facade import AscensionEngine
from .commands import (
    Command, SelectCommand, MoveCommand, AscendCommand, PromoteCommand,
    apply_command, command_from_event, parse_command,
)
from .serde import snapshot, diff

__all__ = [
    "AscensionEngine",
    "Command", "SelectCommand", "MoveCommand", "AscendCommand", "PromoteCommand",
    "apply_command", "command_from_event", "parse_command",
    "snapshot", "diff",
]
