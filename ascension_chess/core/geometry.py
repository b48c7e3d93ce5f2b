from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from .types import Color, Pos

if TYPE_CHECKING:
    from .board import Board

# deltas
ORTH = ((1,0),(-1,0),(0,1),(0,-1))
DIAG = ((1,1),(1,-1),(-1,1),(-1,-1))
KNIGHT_DELTAS = ((1,2),(2,1),(2,-1),(1,-2),(-1,-2),(-2,-1),(-2,1),(-1,2))
KING8 = ORTH + DIAG
DIAG2 = ((2,2),(2,-2),(-2,2),(-2,-2))

def can_land(board: "Board", to: Pos, color: Color, attack_mode: bool) -> bool:
    """Whether a non-sliding piece of ``color`` may land on (or threatens) ``to``."""
    if not to.is_valid():
        return False
    if attack_mode:
        return True
    target = board.get_piece(to)
    return target is None or target.color is not color

def step_targets(board: "Board", start: Pos, color: Color,
                 deltas: Iterable[Tuple[int,int]], attack_mode: bool) -> List[Pos]:
    out = []
    for dx, dy in deltas:
        to = start.offset(dx, dy)
        if can_land(board, to, color, attack_mode):
            out.append(to)
    return out

def slide_targets(board: "Board", start: Pos, color: Color,
                  dirs: Iterable[Tuple[int,int]], attack_mode: bool,
                  limit: Optional[int] = None) -> List[Pos]:
    """Walk each direction until the edge, the first occupied square, or ``limit`` steps.

    The blocking square is included when it holds an enemy, or always in attack mode.
    """
    out = []
    for dx, dy in dirs:
        to = start.offset(dx, dy)
        dist = 0
        while to.is_valid() and (limit is None or dist < limit):
            target = board.get_piece(to)
            if target is None:
                out.append(to)
            else:
                if attack_mode or target.color is not color:
                    out.append(to)
                break
            to = to.offset(dx, dy)
            dist += 1
    return out

def signum(v: int) -> int:
    return (v > 0) - (v < 0)
