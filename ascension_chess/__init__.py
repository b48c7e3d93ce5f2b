"""Ascension Chess: chess with a point economy and piece ascension.

- core: board, movement rules, turn/phase state machine, adjudication
- api: JSON-friendly snapshots and player commands for renderers
- net: framed relay protocol, relay server and online session
- fen: extended FEN (ascended kinds and point totals)
"""

from . import core, api, net
from .fen import parse_fen, game_to_fen, STARTPOS_FEN

__all__ = [
    "core", "api", "net",
    "parse_fen", "game_to_fen", "STARTPOS_FEN",
]
