from __future__ import annotations

import argparse
import logging
from typing import Callable, Iterable, Iterator, Optional

from .api.commands import AscendCommand, Command, PromoteCommand, SelectCommand, apply_command, parse_command
from .core import Game, Promoting, PostUpgrade, ascii_board
from .core.definitions import STANDARD_PROMOTIONS, UNLOCKED_PROMOTIONS
from .fen import parse_fen, game_to_fen
from .net.client import NetworkSession, RelayClient, RelayError
from .net.config import RelayConfig

HELP = (
    "Commands: e2 (select) | e2e4 (move) | u [e2] (ascend) | =q (promote) | fen | help | quit"
)


def _new_game(fen: Optional[str]) -> Game:
    return parse_fen(fen) if fen else Game()


def render(game: Game) -> str:
    lines = [ascii_board(game.board), ""]
    lines.append(f"Points  White: {game.white_points}  Black: {game.black_points}")

    if game.result is not None:
        lines.append(game.result.describe())
        return "\n".join(lines)

    status = f"{game.turn.name.title()} to move"
    if game.in_check():
        status += " (check)"
    lines.append(status)

    if isinstance(game.phase, Promoting):
        kinds = UNLOCKED_PROMOTIONS if game.phase.unlocked else STANDARD_PROMOTIONS
        lines.append("Promote to: " + ", ".join(sorted(k.value for k in kinds)))
    elif isinstance(game.phase, PostUpgrade):
        lines.append(f"Ascended {game.phase.pos}; move another piece")

    if game.selected_pos is not None:
        targets = " ".join(str(p) for p in sorted(game.legal_moves))
        lines.append(f"Selected {game.selected_pos}: {targets or '(no moves)'}")
    return "\n".join(lines)


def _describe_rejection(game: Game, cmd: Command) -> str:
    if isinstance(cmd, AscendCommand):
        return "Cannot ascend that piece now."
    if isinstance(cmd, PromoteCommand):
        return "Not a valid promotion choice." if isinstance(game.phase, Promoting) else "Nothing to promote."
    if isinstance(cmd, SelectCommand):
        return "Nothing to select there."
    return "Illegal move."


def run_session(
    game: Game,
    lines: Iterable[str],
    write: Callable[[str], None] = print,
    act: Optional[Callable[[Command], bool]] = None,
) -> int:
    """Drive ``game`` from typed lines until input ends, ``quit``, or the game is over."""
    act = act or (lambda c: apply_command(game, c))
    write(render(game))
    for line in lines:
        text = line.strip()
        if not text:
            continue
        if text in ("quit", "exit"):
            return 0
        if text == "help":
            write(HELP)
            continue
        if text == "fen":
            write(game_to_fen(game))
            continue
        try:
            cmd = parse_command(text, game.selected_pos)
        except ValueError as e:
            write(str(e))
            continue
        if not act(cmd):
            write(_describe_rejection(game, cmd))
            continue
        write(render(game))
        if game.is_over:
            return 0
    return 0


def _prompt_lines(prompt: str) -> Iterator[str]:
    while True:
        try:
            yield input(prompt)
        except EOFError:
            return


def cmd_show(args: argparse.Namespace) -> int:
    g = _new_game(args.fen)
    print(render(g))
    print()
    print(game_to_fen(g))
    return 0


def cmd_play(args: argparse.Namespace) -> int:
    g = _new_game(args.fen)
    print(HELP)
    return run_session(g, _prompt_lines("> "))


def cmd_relay(args: argparse.Namespace) -> int:
    from .net.relay import serve

    config = RelayConfig.from_env().with_overrides(
        host=args.host, port=args.port, max_rooms=args.max_rooms, room_timeout=args.room_timeout,
    )
    return serve(config)


def _online_lines(session: NetworkSession, write: Callable[[str], None]) -> Iterator[str]:
    """Typed lines for the local player, pumping the relay while the opponent moves."""
    while session.connected and not session.game.is_over:
        if session.opponent_left:
            write("Opponent disconnected.")
            return
        if not session.my_turn:
            if session.poll(timeout=0.5):
                write(render(session.game))
            continue
        session.poll()
        if not session.my_turn or session.game.is_over:
            continue
        try:
            yield input(f"[{session.color.name.lower()}] > ")
        except EOFError:
            return
    if not session.connected:
        write("Connection to relay lost.")


def cmd_join(args: argparse.Namespace) -> int:
    client = RelayClient(args.host, args.port)
    try:
        client.connect()
        joined = client.join(args.room)
    except RelayError as e:
        print(f"Relay refused: {e}")
        client.close()
        return 1
    except OSError as e:
        print(f"Cannot reach relay at {args.host}:{args.port}: {e}")
        client.close()
        return 1

    print(f"Room {joined.room}: you play {joined.color.name.title()}")
    game = Game()
    session = NetworkSession(game, client, joined.color)
    session.start()
    try:
        return run_session(game, _online_lines(session, print), act=session.act)
    finally:
        session.close()


def main(argv: Optional[list] = None) -> int:
    ap = argparse.ArgumentParser(prog="ascension-chess")
    ap.add_argument("--log-level", default="WARNING", help="logging level (DEBUG, INFO, ...)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ss = sub.add_parser("show", help="Show the board and FEN")
    ss.add_argument("--fen", type=str, default=None)
    ss.set_defaults(fn=cmd_show)

    pl = sub.add_parser("play", help="Hot-seat game in the terminal")
    pl.add_argument("--fen", type=str, default=None)
    pl.set_defaults(fn=cmd_play)

    rl = sub.add_parser("relay", help="Run the online relay server")
    rl.add_argument("--host", type=str, default=None)
    rl.add_argument("--port", type=int, default=None)
    rl.add_argument("--max-rooms", type=int, default=None)
    rl.add_argument("--room-timeout", type=float, default=None, help="seconds")
    rl.set_defaults(fn=cmd_relay)

    jn = sub.add_parser("join", help="Play online through a relay")
    jn.add_argument("--host", type=str, default="127.0.0.1")
    jn.add_argument("--port", type=int, default=RelayConfig.port)
    jn.add_argument("--room", type=str, default=None, help="room code; omit to create one")
    jn.set_defaults(fn=cmd_join)

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return int(args.fn(args))


if __name__ == "__main__":
    raise SystemExit(main())
