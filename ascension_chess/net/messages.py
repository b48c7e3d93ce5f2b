"""Relay wire messages.

Each message is one JSON document, externally tagged by variant name::

    {"Join": {"room": "abc123"}}
    {"Welcome": {"color": "White"}}
    {"Move": {"from": {"x": 4, "y": 1}, "to": {"x": 4, "y": 3}}}
    "OpponentDisconnected"

Positions travel as ``{"x": file, "y": rank}`` objects, piece kinds by name ("Queen", "Hawk", ...).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..core import Color, PieceKind, Pos
from ..api.commands import Command, MoveCommand, AscendCommand, PromoteCommand


class ProtocolError(ValueError):
    pass


@dataclass(frozen=True)
class Join:
    room: Optional[str] = None


@dataclass(frozen=True)
class RoomCode:
    code: str


@dataclass(frozen=True)
class Welcome:
    color: Color


@dataclass(frozen=True)
class Move:
    from_pos: Pos
    to_pos: Pos


@dataclass(frozen=True)
class Upgrade:
    pos: Pos


@dataclass(frozen=True)
class Promote:
    piece_type: PieceKind


@dataclass(frozen=True)
class Error:
    message: str


@dataclass(frozen=True)
class OpponentDisconnected:
    pass


Message = Union[Join, RoomCode, Welcome, Move, Upgrade, Promote, Error, OpponentDisconnected]

# the only kinds a relay passes from one player to the other
FORWARDED = (Move, Upgrade, Promote)

_COLOR_NAMES = {Color.WHITE: "White", Color.BLACK: "Black"}


def _pos_out(p: Pos) -> dict:
    return {"x": p.x, "y": p.y}


def _pos_in(obj: Any) -> Pos:
    if not isinstance(obj, dict) or "x" not in obj or "y" not in obj:
        raise ProtocolError(f"Bad position: {obj!r}")
    x, y = obj["x"], obj["y"]
    if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, int) or not isinstance(y, int):
        raise ProtocolError(f"Bad position: {obj!r}")
    p = Pos(x, y)
    if not p.is_valid():
        raise ProtocolError(f"Position off board: {obj!r}")
    return p


def _str_in(obj: Any, field: str) -> str:
    if not isinstance(obj, str):
        raise ProtocolError(f"Field {field!r} must be a string")
    return obj


def to_wire(msg: Message) -> Any:
    if isinstance(msg, OpponentDisconnected):
        return "OpponentDisconnected"
    if isinstance(msg, Join):
        return {"Join": {"room": msg.room}}
    if isinstance(msg, RoomCode):
        return {"RoomCode": {"code": msg.code}}
    if isinstance(msg, Welcome):
        return {"Welcome": {"color": _COLOR_NAMES[msg.color]}}
    if isinstance(msg, Move):
        return {"Move": {"from": _pos_out(msg.from_pos), "to": _pos_out(msg.to_pos)}}
    if isinstance(msg, Upgrade):
        return {"Upgrade": {"pos": _pos_out(msg.pos)}}
    if isinstance(msg, Promote):
        return {"Promote": {"piece_type": msg.piece_type.value}}
    if isinstance(msg, Error):
        return {"Error": {"message": msg.message}}
    raise TypeError(f"Not a relay message: {msg!r}")


def from_wire(obj: Any) -> Message:
    if obj == "OpponentDisconnected":
        return OpponentDisconnected()
    if not isinstance(obj, dict) or len(obj) != 1:
        raise ProtocolError("Message must be a single-key object")

    tag, body = next(iter(obj.items()))
    if not isinstance(body, dict):
        raise ProtocolError(f"Body of {tag!r} must be an object")

    try:
        if tag == "Join":
            room = body.get("room")
            return Join(room=None if room is None else _str_in(room, "room"))
        if tag == "RoomCode":
            return RoomCode(code=_str_in(body["code"], "code"))
        if tag == "Welcome":
            name = body["color"]
            for color, wire in _COLOR_NAMES.items():
                if name == wire:
                    return Welcome(color=color)
            raise ProtocolError(f"Bad color: {name!r}")
        if tag == "Move":
            return Move(from_pos=_pos_in(body["from"]), to_pos=_pos_in(body["to"]))
        if tag == "Upgrade":
            return Upgrade(pos=_pos_in(body["pos"]))
        if tag == "Promote":
            try:
                return Promote(piece_type=PieceKind(body["piece_type"]))
            except (TypeError, ValueError):
                raise ProtocolError(f"Unknown piece kind: {body['piece_type']!r}") from None
        if tag == "Error":
            return Error(message=_str_in(body["message"], "message"))
    except KeyError as e:
        raise ProtocolError(f"Missing field {e.args[0]!r} in {tag}") from None

    raise ProtocolError(f"Unknown message type: {tag!r}")


def encode(msg: Message) -> bytes:
    return json.dumps(to_wire(msg), separators=(",", ":")).encode("utf-8")


def decode(raw: bytes) -> Message:
    try:
        obj = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(f"Invalid JSON: {e}") from e
    return from_wire(obj)


def command_to_message(cmd: Command) -> Message:
    if isinstance(cmd, MoveCommand):
        return Move(cmd.from_pos, cmd.to_pos)
    if isinstance(cmd, AscendCommand):
        return Upgrade(cmd.pos)
    if isinstance(cmd, PromoteCommand):
        return Promote(cmd.kind)
    raise TypeError(f"Command is not sent over the relay: {cmd!r}")


def message_to_command(msg: Message) -> Command:
    if isinstance(msg, Move):
        return MoveCommand(msg.from_pos, msg.to_pos)
    if isinstance(msg, Upgrade):
        return AscendCommand(msg.pos)
    if isinstance(msg, Promote):
        return PromoteCommand(msg.piece_type)
    raise TypeError(f"Message carries no game action: {msg!r}")
