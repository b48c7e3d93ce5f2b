import unittest

from ascension_chess.fen import parse_fen, game_to_fen, STARTPOS_FEN
from ascension_chess.core import Color, Game, PieceKind, parse_pos


class TestFEN(unittest.TestCase):
    def test_roundtrip_startpos(self):
        g = parse_fen(STARTPOS_FEN)
        self.assertEqual(game_to_fen(g), STARTPOS_FEN)
        self.assertEqual(game_to_fen(Game()), STARTPOS_FEN)

    def test_roundtrip_kiwipete(self):
        fen = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        g = parse_fen(fen)
        self.assertEqual(game_to_fen(g), fen + " 0/0")

    def test_roundtrip_ascended_kinds_and_points(self):
        fen = "4k3/2m5/2e5/8/3C4/5a2/4H3/4K3 b - - 3 12 7/4"
        g = parse_fen(fen)
        self.assertEqual(game_to_fen(g), fen)
        self.assertEqual(g.board.get_piece(parse_pos("c7")).kind, PieceKind.MONARCH)
        self.assertEqual(g.board.get_piece(parse_pos("d4")).kind, PieceKind.CANNON)
        self.assertIs(g.turn, Color.BLACK)
        self.assertEqual((g.white_points, g.black_points), (7, 4))
        self.assertEqual((g.halfmove_clock, g.fullmove_number), (3, 12))

    def test_castling_rights_map_to_moved_flags(self):
        g = parse_fen("r3k2r/8/8/8/8/8/8/R3K2R w Kq - 0 1")
        self.assertFalse(g.board.get_piece(parse_pos("e1")).has_moved)
        self.assertFalse(g.board.get_piece(parse_pos("h1")).has_moved)
        self.assertTrue(g.board.get_piece(parse_pos("a1")).has_moved)
        self.assertTrue(g.board.get_piece(parse_pos("h8")).has_moved)
        self.assertFalse(g.board.get_piece(parse_pos("a8")).has_moved)

    def test_en_passant_field(self):
        g = parse_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 2")
        self.assertEqual(g.board.en_passant_target, parse_pos("d6"))
        self.assertIn(parse_pos("d6"), g.board.get_legal_moves(parse_pos("e5")))
        self.assertEqual(game_to_fen(g).split()[3], "d6")

    def test_fen_invalid_cases(self):
        fen_invalid_cases = (
            "4k3/8/8/8/8/8/8/8 w - - 0 1",  # missing white king
            "4k3/8/8/8/8/8/8/4K2K w - - 0 1",  # extra white king
            "4k3/8/8/8/8/8/8/4K3 w K - 0 1",  # K without rook h1
            "4k3/8/8/8/8/8/8/4K3 w Q - 0 1",  # Q without rook a1
            "4k3/8/8/8/8/8/8/4K2R w k - 0 1",  # k without black rook on h8
            "4k3/8/8/8/8/8/8/4K3 w q - 0 1",  # q without black rook a8
            "4k3/8/8/8/8/8/8/4K3 w KK - 0 1",  # duplicate castling flag
            "4k3/8/8/8/8/8/8/4K3 w A - 0 1",  # invalid castling flag
            "4k3/8/8/8/8/8/8/4K3 w - e3 0 1",  # white to move must use rank 6 EP square
            "4k3/8/8/8/8/8/8/4K3 b - e6 0 1",  # black to move must use rank 3 EP square
            "4k3/8/8/8/8/8/8/4K3 w - e6 0 1",  # no pawn on expected destination square
            "4k3/8/8/8/4p3/8/4P3/4K3 w - e6 0 1",  # pushed pawn is not on e5
            "4k3/8/8/8/8/8/8/4K3 x - - 0 1",  # bad side to move
            "4k3/8/8/8/8/8/8/4K3 w - - 0",  # too few fields
            "4k3/8/8/8/8/8/8/4K3 w - - 0 1 0/0 extra",  # too many fields
            "4k3/8/8/8/8/8/8/4K3 w - - a 1",  # bad halfmove counter
            "4k3/8/8/8/8/8/8/4K3 w - - 0 1 5",  # points without separator
            "4k3/8/8/8/8/8/8/4K3 w - - 0 1 -1/0",  # negative points
            "4k3/8/8/8/8/8/8/4X3 w - - 0 1",  # unknown piece letter
            "4k3/8/8/8/8/8/8/4K4 w - - 0 1",  # rank too wide
            "4k3/8/8/8/8/8/4K3 w - - 0 1",  # seven ranks
        )

        for fen in fen_invalid_cases:
            with self.subTest(fen=fen):
                with self.assertRaises(ValueError):
                    parse_fen(fen)


if __name__ == "__main__":
    unittest.main()
