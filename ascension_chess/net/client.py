from __future__ import annotations

import logging
import queue
import socket
import threading
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from ..api.commands import (
    Command, SelectCommand, MoveCommand, AscendCommand, PromoteCommand,
    apply_command, command_from_event,
)
from ..core import Color, Game, Listener, PieceKind, Pos
from .framing import DEFAULT_MAX_FRAME, read_frame, write_frame
from .messages import (
    FORWARDED, Error, Join, Message, OpponentDisconnected, ProtocolError, RoomCode, Welcome,
    command_to_message, decode, encode, message_to_command,
)

LOGGER = logging.getLogger("ascension.net.client")


class RelayError(RuntimeError):
    """The relay refused a request with an ``Error`` message."""


@dataclass(frozen=True)
class JoinResult:
    color: Color
    room: Optional[str]


class RelayClient:
    """Blocking framed connection to a relay."""

    def __init__(self, host: str, port: int, timeout: Optional[float] = None, max_frame: int = DEFAULT_MAX_FRAME) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.max_frame = max_frame
        self._sock: Optional[socket.socket] = None
        self._rfile: Optional[BinaryIO] = None
        self._wfile: Optional[BinaryIO] = None
        self._send_lock = threading.Lock()

    def connect(self) -> "RelayClient":
        self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        self._rfile = self._sock.makefile("rb")
        self._wfile = self._sock.makefile("wb")
        LOGGER.debug("connected", extra={"host": self.host, "port": self.port})
        return self

    def send(self, msg: Message) -> None:
        if self._wfile is None:
            raise ConnectionError("Relay client is not connected")
        with self._send_lock:
            write_frame(self._wfile, encode(msg), self.max_frame)

    def recv(self) -> Optional[Message]:
        """Next message, or None once the relay closed the connection."""
        if self._rfile is None:
            raise ConnectionError("Relay client is not connected")
        raw = read_frame(self._rfile, self.max_frame)
        if raw is None:
            return None
        return decode(raw)

    def join(self, room: Optional[str] = None) -> JoinResult:
        """Join ``room`` (or create one with a random code) and wait for the seat."""
        self.send(Join(room))
        code = room
        while True:
            msg = self.recv()
            if msg is None:
                raise ConnectionError("Relay closed the connection while joining")
            if isinstance(msg, RoomCode):
                code = msg.code
            elif isinstance(msg, Welcome):
                return JoinResult(color=msg.color, room=code)
            elif isinstance(msg, Error):
                raise RelayError(msg.message)
            else:
                raise ProtocolError(f"Unexpected {type(msg).__name__} while joining")

    def close(self) -> None:
        # shutdown first: it wakes a reader blocked in recv, which holds the rfile lock
        if self._sock is not None:
            try:
                self._sock.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                LOGGER.debug("shutdown_failed", extra={"error": str(e)})
        for f in (self._rfile, self._wfile):
            if f is not None:
                try:
                    f.close()
                except OSError as e:
                    LOGGER.debug("close_failed", extra={"error": str(e)})
        if self._sock is not None:
            self._sock.close()
        self._sock = self._rfile = self._wfile = None

    def __enter__(self) -> "RelayClient":
        return self.connect() if self._sock is None else self

    def __exit__(self, *exc) -> None:
        self.close()


_CLOSED = object()

READER_JOIN_TIMEOUT = 2.0


class NetworkSession(Listener):
    """One side of an online game.

    Local actions go through the engine and the state-changing events they
    produce are forwarded. Incoming actions are queued by a reader thread and
    only touch the game inside ``poll``, on the caller's thread.
    """

    def __init__(self, game: Game, client: RelayClient, color: Color) -> None:
        self.game = game
        self.client = client
        self.color = color
        self.connected = True
        self.opponent_left = False
        self.last_error: Optional[str] = None

        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._applying_remote = False
        self._reader: Optional[threading.Thread] = None
        game.listeners.append(self)

    # --- plumbing ---
    def start(self) -> None:
        if self._reader is not None:
            return
        self._reader = threading.Thread(target=self._read_loop, name="relay-reader", daemon=True)
        self._reader.start()

    def _read_loop(self) -> None:
        try:
            while True:
                msg = self.client.recv()
                if msg is None:
                    break
                self._inbox.put(msg)
        except (ValueError, OSError) as e:
            LOGGER.info("reader_stopped", extra={"error": str(e)})
        finally:
            self._inbox.put(_CLOSED)

    def on_event(self, game: Game, event: object) -> None:
        if self._applying_remote or not self.connected:
            return
        cmd = command_from_event(event)
        if cmd is None:
            return
        try:
            self.client.send(command_to_message(cmd))
        except OSError as e:
            LOGGER.warning("forward_failed", extra={"error": str(e)})
            self.connected = False

    # --- local actions ---
    @property
    def my_turn(self) -> bool:
        return self.game.turn is self.color and not self.game.is_over

    def act(self, cmd: Command) -> bool:
        if not self.my_turn:
            return False
        return apply_command(self.game, cmd)

    def click(self, pos: Pos) -> bool:
        return self.act(SelectCommand(pos))

    def move(self, from_pos: Pos, to_pos: Pos) -> bool:
        return self.act(MoveCommand(from_pos, to_pos))

    def ascend(self, pos: Pos) -> bool:
        return self.act(AscendCommand(pos))

    def promote(self, kind: PieceKind) -> bool:
        return self.act(PromoteCommand(kind))

    # --- remote actions ---
    def poll(self, timeout: float = 0.0) -> List[Message]:
        """Apply everything received so far; wait up to ``timeout`` for the first message."""
        handled: List[Message] = []
        block = timeout > 0
        while True:
            try:
                item = self._inbox.get(block=block, timeout=timeout if block else None)
            except queue.Empty:
                break
            block = False
            if item is _CLOSED:
                self.connected = False
                break
            self._handle(item)
            handled.append(item)
        return handled

    def _handle(self, msg: Message) -> None:
        if isinstance(msg, FORWARDED):
            if self.game.turn is self.color:
                LOGGER.warning("remote_out_of_turn", extra={"type": type(msg).__name__})
                return
            self._applying_remote = True
            try:
                ok = apply_command(self.game, message_to_command(msg))
            finally:
                self._applying_remote = False
            if not ok:
                LOGGER.warning("remote_action_rejected", extra={"type": type(msg).__name__})
        elif isinstance(msg, OpponentDisconnected):
            self.opponent_left = True
        elif isinstance(msg, Error):
            self.last_error = msg.message
        else:
            LOGGER.debug("ignored_message", extra={"type": type(msg).__name__})

    def close(self) -> None:
        if self in self.game.listeners:
            self.game.listeners.remove(self)
        self.connected = False
        self.client.close()
        reader = self._reader
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=READER_JOIN_TIMEOUT)
            if reader.is_alive():
                LOGGER.warning("reader_still_running")
