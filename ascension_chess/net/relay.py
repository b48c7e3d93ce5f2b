#!/usr/bin/env python3
"""Ascension Chess: two-player relay server (stdlib only).

Pairs two TCP clients in a named room and forwards game actions between them.
The relay never looks at the board; each client runs its own engine.

Run:
  python -m ascension_chess.net.relay --port 8080
"""

from __future__ import annotations

import argparse
import logging
import secrets
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from socketserver import StreamRequestHandler, TCPServer, ThreadingMixIn
from typing import BinaryIO, Callable, Deque, Dict, List, Optional

from ..core import Color
from .config import RelayConfig
from .framing import FrameTooLargeError, TruncatedFrameError, read_frame, write_frame
from .messages import (
    FORWARDED, Error, Join, Message, OpponentDisconnected, ProtocolError, RoomCode, Welcome,
    decode, encode,
)

LOGGER = logging.getLogger("ascension.net.relay")

Clock = Callable[[], float]

MAX_ROOM_NAME = 20


def valid_room_name(name: str) -> bool:
    return 0 < len(name) <= MAX_ROOM_NAME and name.isalnum()


class RateLimiter:
    """Sliding-window count of new connections per client address."""

    def __init__(self, window: float, max_requests: int, clock: Clock = time.monotonic) -> None:
        self.window = window
        self.max_requests = max_requests
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: Dict[str, Deque[float]] = {}

    def check(self, ip: str) -> bool:
        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(ip, deque())
            while hits and now - hits[0] >= self.window:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def cleanup(self) -> None:
        now = self._clock()
        with self._lock:
            for ip in list(self._hits):
                hits = self._hits[ip]
                while hits and now - hits[0] >= self.window:
                    hits.popleft()
                if not hits:
                    del self._hits[ip]

    def tracked(self) -> int:
        with self._lock:
            return len(self._hits)


class Peer:
    """Write side of one connection; sends from any thread are serialized."""

    def __init__(self, wfile: BinaryIO, address: str = "?", max_frame: int = 8 * 1024) -> None:
        self.address = address
        self._wfile = wfile
        self._max_frame = max_frame
        self._lock = threading.Lock()

    def send(self, msg: Message) -> bool:
        data = encode(msg)
        with self._lock:
            try:
                write_frame(self._wfile, data, self._max_frame)
            except OSError as e:
                LOGGER.info("send_failed", extra={"peer": self.address, "error": str(e)})
                return False
        return True


@dataclass
class Room:
    last_active: float
    white: Optional[Peer] = None
    black: Optional[Peer] = None

    def slot(self, color: Color) -> Optional[Peer]:
        return self.white if color is Color.WHITE else self.black

    def set_slot(self, color: Color, peer: Optional[Peer]) -> None:
        if color is Color.WHITE:
            self.white = peer
        else:
            self.black = peer

    def is_empty(self) -> bool:
        return self.white is None and self.black is None


@dataclass
class JoinOutcome:
    color: Optional[Color] = None
    created: bool = False
    error: Optional[str] = None


@dataclass
class RoomRegistry:
    max_rooms: int
    room_timeout: float
    clock: Clock = time.monotonic
    rooms: Dict[str, Room] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def join(self, name: str, peer: Peer, create: bool = False) -> JoinOutcome:
        """Seat ``peer`` in room ``name``. ``create`` demands a fresh room."""
        now = self.clock()
        with self._lock:
            room = self.rooms.get(name)
            if room is not None and create:
                return JoinOutcome(error="Room creation collision. Try again.")
            if room is None:
                if len(self.rooms) >= self.max_rooms:
                    return JoinOutcome(error="Server is full")
                self.rooms[name] = Room(last_active=now, white=peer)
                return JoinOutcome(color=Color.WHITE, created=True)

            if room.white is None:
                color = Color.WHITE
            elif room.black is None:
                color = Color.BLACK
            else:
                return JoinOutcome(error="Room full")
            room.set_slot(color, peer)
            room.last_active = now
            return JoinOutcome(color=color)

    def opponent(self, name: str, color: Color) -> Optional[Peer]:
        """Opponent of ``color`` in ``name``; marks the room active."""
        with self._lock:
            room = self.rooms.get(name)
            if room is None:
                return None
            room.last_active = self.clock()
            return room.slot(color.opposite())

    def leave(self, name: str, color: Color, peer: Peer) -> Optional[Peer]:
        """Free ``peer``'s seat. Returns the opponent left behind, if any."""
        with self._lock:
            room = self.rooms.get(name)
            if room is None or room.slot(color) is not peer:
                return None
            room.set_slot(color, None)
            if room.is_empty():
                del self.rooms[name]
                LOGGER.info("room_closed", extra={"room": name})
                return None
            return room.slot(color.opposite())

    def evict_idle(self) -> List[str]:
        now = self.clock()
        with self._lock:
            stale = [n for n, r in self.rooms.items() if now - r.last_active > self.room_timeout]
            for n in stale:
                del self.rooms[n]
        return stale

    def __len__(self) -> int:
        with self._lock:
            return len(self.rooms)


class RelayHandler(StreamRequestHandler):
    server: "RelayServer"

    def handle(self) -> None:
        ip = self.client_address[0]
        if not self.server.rate_limiter.check(ip):
            LOGGER.warning("rate_limited", extra={"peer": ip})
            return

        try:
            self._session(ip)
        except (ProtocolError, FrameTooLargeError, TruncatedFrameError) as e:
            LOGGER.warning("protocol_error", extra={"peer": ip, "error": str(e)})
        except OSError as e:
            LOGGER.info("connection_error", extra={"peer": ip, "error": str(e)})
        except Exception:
            LOGGER.exception("relay_connection_unhandled", extra={"peer": ip})

    def _session(self, ip: str) -> None:
        cfg = self.server.config
        registry = self.server.registry

        raw = read_frame(self.rfile, cfg.max_frame)
        if raw is None:
            return
        first = decode(raw)
        if not isinstance(first, Join):
            raise ProtocolError(f"Expected Join, got {type(first).__name__}")

        peer = Peer(self.wfile, ip, cfg.max_frame)
        create = first.room is None
        name = secrets.token_hex(3) if create else first.room
        if not valid_room_name(name):
            peer.send(Error("Invalid room name"))
            return

        outcome = registry.join(name, peer, create=create)
        if outcome.error is not None or outcome.color is None:
            LOGGER.info("join_refused", extra={"peer": ip, "room": name, "reason": outcome.error})
            peer.send(Error(outcome.error or "Join failed"))
            return

        color = outcome.color
        LOGGER.info("joined", extra={"peer": ip, "room": name, "color": color.name})
        try:
            if outcome.created:
                peer.send(RoomCode(name))
            peer.send(Welcome(color))

            while True:
                raw = read_frame(self.rfile, cfg.max_frame)
                if raw is None:
                    break
                msg = decode(raw)
                if not isinstance(msg, FORWARDED):
                    LOGGER.warning("ignored_message", extra={"peer": ip, "type": type(msg).__name__})
                    continue
                target = registry.opponent(name, color)
                if target is not None:
                    target.send(msg)
        finally:
            left_behind = registry.leave(name, color, peer)
            LOGGER.info("left", extra={"peer": ip, "room": name, "color": color.name})
            if left_behind is not None:
                left_behind.send(OpponentDisconnected())


class RelayServer(ThreadingMixIn, TCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, config: RelayConfig, clock: Clock = time.monotonic) -> None:
        self.config = config
        self.registry = RoomRegistry(config.max_rooms, config.room_timeout, clock)
        self.rate_limiter = RateLimiter(config.rate_window, config.rate_max, clock)
        self._stop = threading.Event()
        self._janitor: Optional[threading.Thread] = None
        super().__init__((config.host, config.port), RelayHandler)

    @property
    def port(self) -> int:
        return self.server_address[1]

    def janitor_pass(self) -> List[str]:
        evicted = self.registry.evict_idle()
        for name in evicted:
            LOGGER.info("room_evicted", extra={"room": name})
        self.rate_limiter.cleanup()
        return evicted

    def _janitor_loop(self) -> None:
        while not self._stop.wait(self.config.cleanup_interval):
            self.janitor_pass()

    def start_janitor(self) -> None:
        if self._janitor is not None:
            return
        self._janitor = threading.Thread(target=self._janitor_loop, name="relay-janitor", daemon=True)
        self._janitor.start()

    def serve_in_thread(self) -> threading.Thread:
        t = threading.Thread(target=self.serve_forever, name="relay-serve", daemon=True)
        t.start()
        return t

    def shutdown(self) -> None:
        self._stop.set()
        super().shutdown()


def serve(config: RelayConfig) -> int:
    with RelayServer(config) as server:
        server.start_janitor()
        LOGGER.info("relay_listening", extra={"host": config.host, "port": server.port})
        print(f"Ascension relay listening on {config.host}:{server.port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("Relay stopped")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Ascension Chess relay server")
    ap.add_argument("--host", default=None)
    ap.add_argument("--port", type=int, default=None)
    ap.add_argument("--max-rooms", type=int, default=None)
    ap.add_argument("--room-timeout", type=float, default=None)
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    config = RelayConfig.from_env().with_overrides(
        host=args.host, port=args.port, max_rooms=args.max_rooms, room_timeout=args.room_timeout,
    )
    return serve(config)


if __name__ == "__main__":
    raise SystemExit(main())
