import unittest

from ascension_chess.core import Board, Color, Piece, PieceKind, Pos, parse_pos, pos_name
from ascension_chess.core.moves import CAPTURE, CASTLE, DOUBLE_STEP, EN_PASSANT

W, B = Color.WHITE, Color.BLACK


def P(alg):
    return parse_pos(alg)


def board_with(*placements):
    board = Board()
    for item in placements:
        alg, kind, color = item[:3]
        moved = item[3] if len(item) > 3 else True
        board.set_piece(P(alg), Piece(kind, color, has_moved=moved))
    return board


def legal(board, alg):
    return sorted(pos_name(p) for p in board.get_legal_moves(P(alg)))


class TestSquares(unittest.TestCase):
    def test_standard_setup(self):
        b = Board.standard()
        self.assertEqual(len(list(b.pieces())), 32)
        self.assertEqual(b.get_piece(P("d1")), Piece(PieceKind.QUEEN, W))
        self.assertEqual(b.get_piece(P("e8")), Piece(PieceKind.KING, B))
        self.assertIsNone(b.en_passant_target)

    def test_invalid_coordinates_are_harmless(self):
        b = Board()
        self.assertIsNone(b.get_piece(Pos(-1, 3)))
        b.set_piece(Pos(8, 8), Piece(PieceKind.ROOK, W))
        self.assertEqual(list(b.pieces()), [])
        self.assertTrue(b.is_empty(Pos(10, 0)))

    def test_clone_is_independent(self):
        b = Board.standard()
        c = b.clone()
        c.set_piece(P("e2"), None)
        self.assertIsNotNone(b.get_piece(P("e2")))

    def test_find_king(self):
        b = Board.standard()
        self.assertEqual(b.find_king(B), P("e8"))
        self.assertIsNone(Board().find_king(W))


class TestPathClear(unittest.TestCase):
    def test_aligned(self):
        b = board_with(("a4", PieceKind.PAWN, W))
        self.assertFalse(b.is_path_clear(P("a1"), P("a8")))
        self.assertTrue(b.is_path_clear(P("a1"), P("a4")))
        self.assertTrue(b.is_path_clear(P("b1"), P("b8")))
        self.assertTrue(b.is_path_clear(P("a1"), P("h8")))

    def test_adjacent_and_identical(self):
        b = Board()
        self.assertTrue(b.is_path_clear(P("d4"), P("d5")))
        self.assertTrue(b.is_path_clear(P("d4"), P("d4")))

    def test_unaligned_pair_terminates(self):
        self.assertFalse(Board().is_path_clear(P("a1"), P("b3")))


class TestApplyMove(unittest.TestCase):
    def test_simple_move_marks_piece_moved(self):
        b = Board.standard()
        rec = b.apply_move(P("g1"), P("f3"))
        self.assertIsNone(b.get_piece(P("g1")))
        self.assertTrue(b.get_piece(P("f3")).has_moved)
        self.assertFalse(rec.piece.has_moved)
        self.assertEqual(rec.flags, ())

    def test_no_piece_raises(self):
        with self.assertRaises(ValueError):
            Board().apply_move(P("e4"), P("e5"))

    def test_capture(self):
        b = board_with(("a1", PieceKind.ROOK, W), ("a8", PieceKind.ROOK, B))
        rec = b.apply_move(P("a1"), P("a8"))
        self.assertEqual(rec.captured, Piece(PieceKind.ROOK, B, has_moved=True))
        self.assertEqual(rec.captured_pos, P("a8"))
        self.assertTrue(rec.has(CAPTURE))

    def test_castling_moves_rook(self):
        b = board_with(("e1", PieceKind.KING, W, False), ("h1", PieceKind.ROOK, W, False), ("a1", PieceKind.ROOK, W, False))
        rec = b.apply_move(P("e1"), P("g1"))
        self.assertEqual(b.get_piece(P("f1")).kind, PieceKind.ROOK)
        self.assertIsNone(b.get_piece(P("h1")))
        self.assertTrue(rec.has(CASTLE))
        self.assertEqual((rec.rook_from, rec.rook_to), (P("h1"), P("f1")))

        b2 = board_with(("e1", PieceKind.KING, W, False), ("a1", PieceKind.ROOK, W, False))
        b2.apply_move(P("e1"), P("c1"))
        self.assertEqual(b2.get_piece(P("d1")).kind, PieceKind.ROOK)
        self.assertIsNone(b2.get_piece(P("a1")))

    def test_en_passant_cycle(self):
        b = board_with(
            ("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B),
            ("e5", PieceKind.PAWN, W), ("d7", PieceKind.PAWN, B, False),
        )
        rec = b.apply_move(P("d7"), P("d5"))
        self.assertTrue(rec.has(DOUBLE_STEP))
        self.assertEqual(b.en_passant_target, P("d6"))
        self.assertEqual(legal(b, "e5"), ["d6", "e6"])

        rec = b.apply_move(P("e5"), P("d6"))
        self.assertTrue(rec.has(EN_PASSANT))
        self.assertTrue(rec.has(CAPTURE))
        self.assertEqual(rec.captured_pos, P("d5"))
        self.assertIsNone(b.get_piece(P("d5")))
        self.assertIsNone(b.en_passant_target)

    def test_en_passant_expires(self):
        b = board_with(
            ("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B),
            ("e5", PieceKind.PAWN, W), ("d7", PieceKind.PAWN, B, False),
        )
        b.apply_move(P("d7"), P("d5"))
        b.apply_move(P("e1"), P("f1"))
        self.assertIsNone(b.en_passant_target)
        self.assertEqual(legal(b, "e5"), ["e6"])

    def test_en_passant_cannot_expose_the_king_along_the_rank(self):
        # taking on d6 lifts both pawns off the fifth rank
        b = board_with(
            ("a5", PieceKind.KING, W), ("e1", PieceKind.KING, B),
            ("e5", PieceKind.PAWN, W), ("d5", PieceKind.PAWN, B), ("h5", PieceKind.ROOK, B),
        )
        b.en_passant_target = P("d6")
        self.assertEqual(legal(b, "e5"), ["e6"])

        b.set_piece(P("h5"), None)
        self.assertEqual(legal(b, "e5"), ["d6", "e6"])

    def test_en_passant_target_without_victim(self):
        b = board_with(("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B), ("e5", PieceKind.PAWN, W))
        b.en_passant_target = P("d6")
        self.assertEqual(legal(b, "e5"), ["e6"])


class TestLegality(unittest.TestCase):
    def test_pinned_rook_stays_on_file(self):
        b = board_with(
            ("e1", PieceKind.KING, W), ("e2", PieceKind.ROOK, W),
            ("e8", PieceKind.ROOK, B), ("a8", PieceKind.KING, B),
        )
        self.assertEqual(legal(b, "e2"), ["e3", "e4", "e5", "e6", "e7", "e8"])

    def test_king_cannot_step_into_attack(self):
        b = board_with(("e1", PieceKind.KING, W), ("d8", PieceKind.ROOK, B), ("a8", PieceKind.KING, B))
        self.assertNotIn("d1", legal(b, "e1"))
        self.assertNotIn("d2", legal(b, "e1"))
        self.assertIn("f2", legal(b, "e1"))

    def test_simulate_does_not_touch_original(self):
        b = Board.standard()
        after = b.simulate_move(P("e2"), P("e4"))
        self.assertIsNotNone(b.get_piece(P("e2")))
        self.assertIsNone(after.get_piece(P("e2")))

    def test_empty_square_has_no_moves(self):
        self.assertEqual(Board.standard().get_legal_moves(P("e4")), [])

    def test_check_detection(self):
        b = board_with(("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B), ("b4", PieceKind.BISHOP, B))
        self.assertTrue(b.is_in_check(W))
        self.assertFalse(b.is_in_check(B))
        self.assertTrue(b.is_square_attacked(P("c3"), B))
        self.assertFalse(b.is_square_attacked(P("c4"), B))

    def test_cannon_gives_check_over_a_screen(self):
        b = board_with(
            ("e1", PieceKind.KING, W), ("e4", PieceKind.KNIGHT, W),
            ("e8", PieceKind.CANNON, B), ("a8", PieceKind.KING, B),
        )
        self.assertTrue(b.is_in_check(W))

    def test_has_any_legal_move(self):
        self.assertTrue(Board.standard().has_any_legal_move(W))
        # black king in the corner with no safe square
        b = board_with(("h8", PieceKind.KING, B), ("f7", PieceKind.KING, W), ("g6", PieceKind.QUEEN, W))
        self.assertFalse(b.has_any_legal_move(B))


class TestMaterial(unittest.TestCase):
    def test_bare_kings(self):
        b = board_with(("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B))
        self.assertTrue(b.has_insufficient_material(100, 100))

    def test_lone_minor_needs_points(self):
        b = board_with(("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B), ("b1", PieceKind.KNIGHT, W))
        self.assertTrue(b.has_insufficient_material(6, 0))
        self.assertFalse(b.has_insufficient_material(7, 0))

    def test_two_knights_need_points(self):
        b = board_with(
            ("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B),
            ("b1", PieceKind.KNIGHT, W), ("g1", PieceKind.KNIGHT, W),
        )
        self.assertTrue(b.has_insufficient_material(0, 0))

    def test_mating_material(self):
        for kind in (PieceKind.PAWN, PieceKind.ROOK, PieceKind.QUEEN, PieceKind.HAWK, PieceKind.CANNON):
            with self.subTest(kind=kind):
                b = board_with(("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B), ("d4", kind, B))
                self.assertFalse(b.has_insufficient_material(0, 0))
        b = board_with(
            ("e1", PieceKind.KING, W), ("e8", PieceKind.KING, B),
            ("c1", PieceKind.BISHOP, W), ("b1", PieceKind.KNIGHT, W),
        )
        self.assertFalse(b.has_insufficient_material(0, 0))


if __name__ == "__main__":
    unittest.main()
