from __future__ import annotations

from pathlib import Path
import sys

# Ensure the repo root is on sys.path so `import ascension_chess` works.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from ascension_chess.api import AscensionEngine
from ascension_chess.cli import render


def show(title: str, eng: AscensionEngine) -> None:
    print("\n" + "=" * 72)
    print(title)
    print(render(eng.game))


def report(label: str, result: dict) -> None:
    changed = ", ".join(c["square"] for c in result["diff"]["changed"]) or "-"
    print(f"{label}: applied={result['applied']} changed={changed} points={result['diff']['points_delta']}")


def demo_pawn_ascends_to_hawk() -> None:
    eng = AscensionEngine.from_fen("4k3/8/8/3p4/8/8/4P3/4K3 w - - 0 1 5/0")
    show("Demo 1: White spends 5 points to ascend the e2 pawn into a Hawk", eng)

    report("ascend e2", eng.ascend("e2"))
    report("click e2 (frozen this turn)", eng.click("e2"))
    report("Ke1-d1", eng.move("e1", "d1"))
    report("Ke8-f8", eng.move("e8", "f8"))
    show("The Hawk now steps forward or captures sideways and ahead", eng)
    print("Hawk moves from e2:", [m["alg"] for m in eng.legal_moves("e2")])


def demo_cannon_needs_a_screen() -> None:
    eng = AscensionEngine.from_fen("4k3/8/8/8/r7/8/P7/R3K3 w - - 0 1 8/0")
    show("Demo 2: a Rook ascends into a Cannon, which captures over exactly one screen", eng)

    report("ascend a1", eng.ascend("a1"))
    report("Ke1-f1", eng.move("e1", "f1"))
    report("Ke8-d8", eng.move("e8", "d8"))
    print("Cannon moves from a1:", [m["alg"] for m in eng.legal_moves("a1")])
    report("Ca1xa4", eng.move("a1", "a4"))
    show("After the Cannon capture", eng)


def demo_hawk_promotion_unlocks_ascended_kinds() -> None:
    eng = AscensionEngine.from_fen("k7/4H3/8/8/8/8/8/4K3 w - - 0 1 0/0")
    show("Demo 3: a Hawk reaching the last rank may promote into any ascended kind", eng)

    report("He7-e8", eng.move("e7", "e8"))
    print("Phase:", eng.state()["phase"])
    report("promote to Monarch", eng.promote("Monarch"))
    show("After promotion", eng)


if __name__ == "__main__":
    demo_pawn_ascends_to_hawk()
    demo_cannon_needs_a_screen()
    demo_hawk_promotion_unlocks_ascended_kinds()
