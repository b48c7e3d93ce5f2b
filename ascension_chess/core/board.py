from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .definitions import PieceKind, MINOR_MATING_POINTS
from .geometry import signum
from .movegen import pseudo_legal_moves
from .moves import MoveRecord, CAPTURE, CASTLE, DOUBLE_STEP, EN_PASSANT
from .piece import Piece
from .setup import setup_standard
from .types import BOARD_SIZE, Color, Pos

class Board:
    """8x8 grid of optional pieces, indexed ``squares[x][y]``, plus the en-passant target."""

    def __init__(self) -> None:
        self.squares: List[List[Optional[Piece]]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self.en_passant_target: Optional[Pos] = None

    @classmethod
    def standard(cls) -> "Board":
        board = cls()
        setup_standard(board)
        return board

    def clone(self) -> "Board":
        other = Board()
        # pieces are immutable values, copying the columns is enough
        other.squares = [col[:] for col in self.squares]
        other.en_passant_target = self.en_passant_target
        return other

    # --- square access ---
    def get_piece(self, pos: Pos) -> Optional[Piece]:
        if pos.is_valid():
            return self.squares[pos.x][pos.y]
        return None

    def set_piece(self, pos: Pos, piece: Optional[Piece]) -> None:
        if pos.is_valid():
            self.squares[pos.x][pos.y] = piece

    def is_empty(self, pos: Pos) -> bool:
        return self.get_piece(pos) is None

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[Pos, Piece]]:
        for x in range(BOARD_SIZE):
            for y in range(BOARD_SIZE):
                p = self.squares[x][y]
                if p is not None and (color is None or p.color is color):
                    yield Pos(x, y), p

    def find_king(self, color: Color) -> Optional[Pos]:
        for pos, p in self.pieces(color):
            if p.kind is PieceKind.KING:
                return pos
        return None

    def is_path_clear(self, from_pos: Pos, to_pos: Pos) -> bool:
        """True if every square strictly between two aligned squares is empty."""
        dx = signum(to_pos.x - from_pos.x)
        dy = signum(to_pos.y - from_pos.y)
        if dx == 0 and dy == 0:
            return True
        cur = from_pos.offset(dx, dy)
        while cur != to_pos:
            # non-aligned pairs walk off the board instead of looping
            if not cur.is_valid() or not self.is_empty(cur):
                return False
            cur = cur.offset(dx, dy)
        return True

    # --- move generation ---
    def get_pseudo_legal_moves(self, pos: Pos, piece: Piece, attack_mode: bool = False) -> List[Pos]:
        return pseudo_legal_moves(self, pos, piece, attack_mode)

    def get_legal_moves(self, pos: Pos) -> List[Pos]:
        piece = self.get_piece(pos)
        if piece is None:
            return []
        moves = []
        for target in self.get_pseudo_legal_moves(pos, piece):
            if not self.simulate_move(pos, target).is_in_check(piece.color):
                moves.append(target)
        return moves

    def has_any_legal_move(self, color: Color) -> bool:
        for pos, _ in self.pieces(color):
            if self.get_legal_moves(pos):
                return True
        return False

    def simulate_move(self, from_pos: Pos, to_pos: Pos) -> "Board":
        tmp = self.clone()
        tmp.apply_move(from_pos, to_pos)
        return tmp

    def apply_move(self, from_pos: Pos, to_pos: Pos) -> MoveRecord:
        """Relocate a piece with all board-level side effects.

        Handles the castling rook, en-passant removal and the en-passant target
        refresh. Scoring, promotion and turn order belong to the game.
        """
        piece = self.get_piece(from_pos)
        if piece is None:
            raise ValueError(f"No piece on {from_pos}")

        captured = self.get_piece(to_pos)
        captured_pos = to_pos if captured is not None else None
        rook_from = rook_to = None
        flags = []

        self.set_piece(to_pos, piece.moved())
        self.set_piece(from_pos, None)

        if piece.kind is PieceKind.KING and abs(to_pos.x - from_pos.x) == 2:
            step = signum(to_pos.x - from_pos.x)
            rook_from = Pos(7 if step > 0 else 0, from_pos.y)
            rook_to = to_pos.offset(-step, 0)
            rook = self.get_piece(rook_from)
            if rook is not None:
                self.set_piece(rook_to, rook.moved())
                self.set_piece(rook_from, None)
            flags.append(CASTLE)
        elif piece.kind is PieceKind.PAWN and captured is None and from_pos.x != to_pos.x:
            victim_pos = Pos(to_pos.x, from_pos.y)
            victim = self.get_piece(victim_pos)
            if victim is not None:
                captured, captured_pos = victim, victim_pos
                self.set_piece(victim_pos, None)
                flags.append(EN_PASSANT)

        self.en_passant_target = None
        if piece.kind is PieceKind.PAWN and abs(to_pos.y - from_pos.y) == 2:
            self.en_passant_target = Pos(from_pos.x, (from_pos.y + to_pos.y) // 2)
            flags.append(DOUBLE_STEP)

        if captured is not None:
            flags.append(CAPTURE)

        return MoveRecord(
            from_pos=from_pos,
            to_pos=to_pos,
            piece=piece,
            captured=captured,
            captured_pos=captured_pos,
            rook_from=rook_from,
            rook_to=rook_to,
            flags=tuple(flags),
        )

    # --- check detection ---
    def is_square_attacked(self, target: Pos, by_color: Color) -> bool:
        for pos, p in self.pieces(by_color):
            if target in self.get_pseudo_legal_moves(pos, p, attack_mode=True):
                return True
        return False

    def is_in_check(self, color: Color) -> bool:
        king_pos = self.find_king(color)
        if king_pos is None:
            return False
        return self.is_square_attacked(king_pos, color.opposite())

    # --- adjudication ---
    def has_mating_potential(self, color: Color, points: int) -> bool:
        bishops = knights = 0
        for _, p in self.pieces(color):
            if p.kind is PieceKind.KING:
                continue
            if p.kind is PieceKind.BISHOP:
                bishops += 1
            elif p.kind is PieceKind.KNIGHT:
                knights += 1
            else:
                return True
        if bishops + knights == 0:
            return False
        if (bishops, knights) in ((1, 0), (0, 1), (0, 2)):
            # banked points can buy an ascension that mates
            return points >= MINOR_MATING_POINTS
        return True

    def has_insufficient_material(self, white_points: int, black_points: int) -> bool:
        return not (
            self.has_mating_potential(Color.WHITE, white_points)
            or self.has_mating_potential(Color.BLACK, black_points)
        )
