"""Online play: framed JSON messages, the room relay and the client session."""

from .config import RelayConfig
from .framing import FrameTooLargeError, TruncatedFrameError, read_frame, write_frame
from .messages import (
    Join, RoomCode, Welcome, Move, Upgrade, Promote, Error, OpponentDisconnected,
    Message, ProtocolError, encode, decode,
)
from .client import RelayClient, RelayError, JoinResult, NetworkSession
from .relay import RelayServer, RoomRegistry, RateLimiter

__all__ = [
    "RelayConfig",
    "FrameTooLargeError", "TruncatedFrameError", "read_frame", "write_frame",
    "Join", "RoomCode", "Welcome", "Move", "Upgrade", "Promote", "Error", "OpponentDisconnected",
    "Message", "ProtocolError", "encode", "decode",
    "RelayClient", "RelayError", "JoinResult", "NetworkSession",
    "RelayServer", "RoomRegistry", "RateLimiter",
]
