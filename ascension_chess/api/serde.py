from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..core import Board, Color, Game, Piece, PieceKind, Pos, pos_name, parse_pos
from ..core.definitions import STANDARD_PROMOTIONS, UNLOCKED_PROMOTIONS
from ..core.game import PostUpgrade, Promoting, GameOver, Phase
from ..core.moves import MoveRecord


LOGGER = logging.getLogger("ascension.api.serde")


def color_to_str(c: Color) -> str:
    return "WHITE" if c is Color.WHITE else "BLACK"


def str_to_color(s: str) -> Color:
    try:
        return Color[str(s).upper()]
    except KeyError:
        raise ValueError(f"Bad color: {s!r}") from None


def pos_to_dict(p: Pos) -> Dict[str, Any]:
    return {"x": p.x, "y": p.y, "alg": pos_name(p)}


def dict_to_pos(d: Any) -> Pos:
    if isinstance(d, str):
        return parse_pos(d)
    if not isinstance(d, dict):
        raise ValueError(f"Bad square: {d!r}")
    if "x" in d and "y" in d:
        x, y = d["x"], d["y"]
        if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, int) or not isinstance(y, int):
            raise ValueError(f"Bad square: {d!r}")
        p = Pos(x, y)
        if not p.is_valid():
            raise ValueError(f"Bad square: {d!r}")
        return p
    if "alg" in d:
        return parse_pos(str(d["alg"]))
    raise ValueError(f"Missing square coordinates: {d!r}")


def kind_from_name(name: Any) -> PieceKind:
    try:
        return PieceKind(str(name))
    except ValueError:
        raise ValueError(f"Unknown piece kind: {name!r}") from None


def piece_to_dict(pos: Pos, p: Piece) -> Dict[str, Any]:
    return {
        "pos": pos_to_dict(pos),
        "kind": p.kind.value,
        "color": color_to_str(p.color),
        "has_moved": bool(p.has_moved),
        "symbol": p.symbol,
    }


def phase_to_dict(phase: Phase) -> Dict[str, Any]:
    if isinstance(phase, PostUpgrade):
        return {"kind": "post_upgrade", "pos": pos_to_dict(phase.pos)}
    if isinstance(phase, Promoting):
        choices = UNLOCKED_PROMOTIONS if phase.unlocked else STANDARD_PROMOTIONS
        return {
            "kind": "promoting",
            "pos": pos_to_dict(phase.pos),
            "unlocked": phase.unlocked,
            "choices": sorted(k.value for k in choices),
        }
    if isinstance(phase, GameOver):
        return {"kind": "game_over"}
    return {"kind": "normal"}


def move_to_dict(m: MoveRecord) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "from": pos_to_dict(m.from_pos),
        "to": pos_to_dict(m.to_pos),
        "kind": m.piece.kind.value,
        "color": color_to_str(m.piece.color),
        "flags": list(m.flags),
        "points": int(m.points),
    }
    if m.captured is not None and m.captured_pos is not None:
        d["captured"] = piece_to_dict(m.captured_pos, m.captured)
    if m.rook_from is not None and m.rook_to is not None:
        d["rook_from"] = pos_to_dict(m.rook_from)
        d["rook_to"] = pos_to_dict(m.rook_to)
    return d


def _pieces(board: Board) -> List[Dict[str, Any]]:
    return [piece_to_dict(pos, p) for pos, p in board.pieces()]


def snapshot(game: Game) -> Dict[str, Any]:
    """JSON-friendly, read-only view of everything a renderer draws in a frame."""

    out: Dict[str, Any] = {
        "turn": color_to_str(game.turn),
        "phase": phase_to_dict(game.phase),
        "pieces": _pieces(game.board),
        "en_passant_target": (
            pos_to_dict(game.board.en_passant_target) if game.board.en_passant_target is not None else None
        ),
        "selected": pos_to_dict(game.selected_pos) if game.selected_pos is not None else None,
        "legal_moves": [pos_to_dict(p) for p in game.legal_moves],
        "points": {"WHITE": int(game.white_points), "BLACK": int(game.black_points)},
        "check": bool(game.board.is_in_check(game.turn)),
        "result": None,
        "last_move": move_to_dict(game.last_move) if game.last_move is not None else None,
        "ply": len(game.history),
        "halfmove_clock": int(game.halfmove_clock),
        "fullmove_number": int(game.fullmove_number),
    }

    if game.result is not None:
        out["result"] = {
            "winner": color_to_str(game.result.winner) if game.result.winner is not None else None,
            "reason": game.result.reason.value,
            "text": game.result.describe(),
        }

    from ..fen import game_to_fen  # lazy import
    out["fen"] = game_to_fen(game)
    return out


def diff(before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, Any]:
    """Per-square changes between two snapshots, for animating a transition."""
    b = {p["pos"]["alg"]: p for p in before.get("pieces", [])}
    a = {p["pos"]["alg"]: p for p in after.get("pieces", [])}

    changed: List[Dict[str, Any]] = []
    for square in sorted(a.keys() | b.keys()):
        bp: Optional[Dict[str, Any]] = b.get(square)
        ap: Optional[Dict[str, Any]] = a.get(square)
        if bp == ap:
            continue
        changed.append({"square": square, "before": bp, "after": ap})

    points_delta = {
        c: int(after.get("points", {}).get(c, 0)) - int(before.get("points", {}).get(c, 0))
        for c in ("WHITE", "BLACK")
    }
    if changed or any(points_delta.values()):
        LOGGER.debug("snapshot_diff", extra={"squares": len(changed)})

    return {
        "changed": changed,
        "points_delta": points_delta,
        "turn": after.get("turn"),
        "phase": after.get("phase"),
        "last_move": after.get("last_move"),
    }
