#!/usr/bin/env python3
"""Many rooms at once: random games mirrored through one relay must stay in sync."""
from __future__ import annotations

import argparse
import concurrent.futures
import random
import sys
import threading
from pathlib import Path
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from ascension_chess.api.commands import MoveCommand, PromoteCommand
from ascension_chess.core import Game, PieceKind, Promoting
from ascension_chess.fen import game_to_fen
from ascension_chess.net import NetworkSession, RelayClient, RelayConfig, RelayServer


def _random_command(game: Game, rnd: random.Random):
    if isinstance(game.phase, Promoting):
        return PromoteCommand(PieceKind.QUEEN)
    choices = []
    for pos, _ in game.board.pieces(game.turn):
        for to in game.board.get_legal_moves(pos):
            choices.append(MoveCommand(pos, to))
    return rnd.choice(choices) if choices else None


def _room_worker(host: str, port: int, plies: int, seed: int, errors: List[str], lock: threading.Lock) -> None:
    rnd = random.Random(seed)
    a = RelayClient(host, port, timeout=5.0).connect()
    b = RelayClient(host, port, timeout=5.0).connect()
    try:
        joined_a = a.join(None)
        joined_b = b.join(joined_a.room)
        sessions = {
            joined_a.color: NetworkSession(Game(track_positions=False), a, joined_a.color),
            joined_b.color: NetworkSession(Game(track_positions=False), b, joined_b.color),
        }
        for s in sessions.values():
            s.start()

        for _ in range(plies):
            mover = sessions[next(iter(sessions.values())).game.turn]
            if mover.game.is_over:
                break
            cmd = _random_command(mover.game, rnd)
            if cmd is None or not mover.act(cmd):
                with lock:
                    errors.append(f"seed={seed}: local action rejected {cmd!r}")
                return
            other = sessions[mover.color.opposite()]
            if not other.poll(timeout=5.0):
                with lock:
                    errors.append(f"seed={seed}: action never arrived")
                return

        fens = {game_to_fen(s.game) for s in sessions.values()}
        if len(fens) != 1:
            with lock:
                errors.append(f"seed={seed}: games diverged {sorted(fens)}")
    except (OSError, ValueError) as e:
        with lock:
            errors.append(f"seed={seed}: {e}")
    finally:
        a.close()
        b.close()


def run_stress(host: str, port: int, rooms: int, plies: int, seed: int) -> None:
    errors: List[str] = []
    lock = threading.Lock()
    with concurrent.futures.ThreadPoolExecutor(max_workers=rooms) as ex:
        futures = [ex.submit(_room_worker, host, port, plies, seed + i, errors, lock) for i in range(rooms)]
        for f in futures:
            f.result()
    if errors:
        raise AssertionError(errors[0])


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rooms", type=int, default=16)
    ap.add_argument("--plies", type=int, default=40)
    ap.add_argument("--seed", type=int, default=1337)
    args = ap.parse_args()

    # every worker connects twice from the same address
    config = RelayConfig(host="127.0.0.1", port=0, rate_max=max(30, 2 * args.rooms))
    server = RelayServer(config)
    server.serve_in_thread()
    try:
        run_stress("127.0.0.1", server.port, args.rooms, args.plies, args.seed)
        print(f"{args.rooms} rooms x {args.plies} plies: in sync")
        return 0
    finally:
        server.shutdown()
        server.server_close()


if __name__ == "__main__":
    raise SystemExit(main())
