#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import random
import sys
import time
import tracemalloc
from pathlib import Path
from typing import Dict, Union

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from ascension_chess.core import Game, PieceKind, Promoting
from ascension_chess.fen import parse_fen

Metrics = Dict[str, Union[float, int]]

# middlegame with every ascended kind on the board
ASCENDED_FEN = "r1b1k2r/pp1h1ppp/2e2m2/2p1C3/2A1p3/2NP1H2/PPP2PPP/R1BMK2R w KQkq - 0 1 12/9"


def run_legal_moves(fen: str, repeat: int) -> Metrics:
    game = parse_fen(fen)
    total = 0
    start = time.perf_counter()
    tracemalloc.start()
    for _ in range(repeat):
        for pos, _ in game.board.pieces(game.turn):
            total += len(game.board.get_legal_moves(pos))
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    elapsed = time.perf_counter() - start
    return {
        "repeat": repeat,
        "total_moves": total,
        "seconds": elapsed,
        "moves_per_sec": 0.0 if elapsed <= 0 else total / elapsed,
        "peak_alloc_bytes": peak,
    }


def run_random_games(games: int, plies: int, seed: int) -> Metrics:
    rnd = random.Random(seed)
    played = 0
    start = time.perf_counter()
    for _ in range(games):
        g = Game()
        for _ in range(plies):
            if g.is_over:
                break
            moves = [(p, t) for p, _ in g.board.pieces(g.turn) for t in g.board.get_legal_moves(p)]
            p, t = rnd.choice(moves)
            g.make_move(p, t)
            if isinstance(g.phase, Promoting):
                g.resolve_promotion(PieceKind.QUEEN)
            played += 1
    elapsed = time.perf_counter() - start
    return {
        "games": games,
        "plies": played,
        "seconds": elapsed,
        "plies_per_sec": 0.0 if elapsed <= 0 else played / elapsed,
    }


def check_thresholds(results: Dict[str, Metrics], thresholds_path: Path) -> int:
    if not thresholds_path.exists():
        return 0
    thresholds = json.loads(thresholds_path.read_text())
    status = 0
    for bench_name, limits in thresholds.items():
        values = results.get(bench_name)
        if values is None:
            continue
        for metric, expected in limits.items():
            base_metric = metric[:-4]
            current = float(values.get(base_metric, 0.0))
            if metric.endswith("_min") and current < float(expected):
                print(f"THRESHOLD FAIL {bench_name}.{base_metric}: {current} < {expected}")
                status = 1
            elif metric.endswith("_max") and current > float(expected):
                print(f"THRESHOLD FAIL {bench_name}.{base_metric}: {current} > {expected}")
                status = 1
    return status


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark legal-move generation hot paths")
    parser.add_argument("--repeat", type=int, default=20)
    parser.add_argument("--games", type=int, default=5)
    parser.add_argument("--plies", type=int, default=60)
    parser.add_argument("--seed", type=int, default=1337)
    parser.add_argument(
        "--thresholds",
        type=Path,
        default=Path(__file__).with_name("benchmark_thresholds.json"),
    )
    parser.add_argument("--check-thresholds", action="store_true")
    args = parser.parse_args()

    results = {
        "legal_start": run_legal_moves("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", args.repeat),
        "legal_ascended": run_legal_moves(ASCENDED_FEN, args.repeat),
        "random_games": run_random_games(args.games, args.plies, args.seed),
    }
    print(json.dumps(results, indent=2, sort_keys=True))

    if args.check_thresholds:
        return check_thresholds(results, args.thresholds)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
