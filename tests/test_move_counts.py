import unittest

from ascension_chess.core import Board, Color
from ascension_chess.fen import parse_fen, STARTPOS_FEN


def count_moves(board: Board, color: Color, depth: int) -> int:
    """Leaf count of the board-level move tree (promotions count once)."""
    if depth == 0:
        return 1
    total = 0
    for pos, _ in list(board.pieces(color)):
        for target in board.get_legal_moves(pos):
            if depth == 1:
                total += 1
                continue
            total += count_moves(board.simulate_move(pos, target), color.opposite(), depth - 1)
    return total


class TestMoveCounts(unittest.TestCase):
    def test_start_position(self):
        g = parse_fen(STARTPOS_FEN)
        self.assertEqual(count_moves(g.board, g.turn, 1), 20)
        self.assertEqual(count_moves(g.board, g.turn, 2), 400)

    def test_kiwipete(self):
        g = parse_fen("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
        self.assertEqual(count_moves(g.board, g.turn, 1), 48)

    def test_lone_cannon_needs_a_screen(self):
        g = parse_fen("4k3/8/8/8/8/8/8/C3K3 w - - 0 1")
        # a1 cannon: 7 up the file, b1-d1 along the rank; king: d1 d2 e2 f2 f1
        self.assertEqual(count_moves(g.board, g.turn, 1), 15)


if __name__ == "__main__":
    unittest.main()
