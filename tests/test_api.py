import json
import unittest

from ascension_chess.api import (
    AscendCommand, AscensionEngine, MoveCommand, PromoteCommand, SelectCommand,
    apply_command, command_from_event, diff, parse_command, snapshot,
)
from ascension_chess.api.serde import dict_to_pos, kind_from_name, str_to_color
from ascension_chess.core import Color, Game, MoveMade, PieceKind, Pos, TurnStarted, parse_pos
from ascension_chess.fen import parse_fen, STARTPOS_FEN


def P(alg):
    return parse_pos(alg)


class TestSnapshot(unittest.TestCase):
    def test_start_position(self):
        snap = snapshot(Game())
        self.assertEqual(snap["turn"], "WHITE")
        self.assertEqual(snap["phase"], {"kind": "normal"})
        self.assertEqual(len(snap["pieces"]), 32)
        self.assertEqual(snap["points"], {"WHITE": 0, "BLACK": 0})
        self.assertFalse(snap["check"])
        self.assertIsNone(snap["result"])
        self.assertIsNone(snap["last_move"])
        self.assertEqual(snap["fen"], STARTPOS_FEN)
        json.dumps(snap)

    def test_selection_and_legal_moves(self):
        g = Game()
        g.select_square(P("g1"))
        snap = snapshot(g)
        self.assertEqual(snap["selected"]["alg"], "g1")
        self.assertEqual(sorted(m["alg"] for m in snap["legal_moves"]), ["f3", "h3"])

    def test_promoting_phase_lists_choices(self):
        g = parse_fen("k7/4H3/8/8/8/8/8/4K3 w - - 0 1 0/0")
        g.request_move(P("e7"), P("e8"))
        phase = snapshot(g)["phase"]
        self.assertEqual(phase["kind"], "promoting")
        self.assertTrue(phase["unlocked"])
        self.assertIn("Monarch", phase["choices"])
        self.assertNotIn("King", phase["choices"])

    def test_result_and_last_move(self):
        g = parse_fen("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1 0/0")
        g.request_move(P("a1"), P("a8"))
        snap = snapshot(g)
        self.assertEqual(snap["phase"], {"kind": "game_over"})
        self.assertEqual(snap["result"]["winner"], "WHITE")
        self.assertEqual(snap["result"]["reason"], "checkmate")
        self.assertEqual(snap["last_move"]["to"]["alg"], "a8")
        self.assertIn("check", snap["last_move"]["flags"])


class TestDiff(unittest.TestCase):
    def test_move_diff(self):
        g = Game()
        before = snapshot(g)
        g.request_move(P("e2"), P("e4"))
        d = diff(before, snapshot(g))
        self.assertEqual([c["square"] for c in d["changed"]], ["e2", "e4"])
        self.assertIsNone(d["changed"][1]["before"])
        self.assertEqual(d["points_delta"], {"WHITE": 0, "BLACK": 1})
        self.assertEqual(d["turn"], "BLACK")

    def test_no_change(self):
        snap = snapshot(Game())
        self.assertEqual(diff(snap, snap)["changed"], [])


class TestSerdeParsing(unittest.TestCase):
    def test_dict_to_pos(self):
        self.assertEqual(dict_to_pos({"x": 4, "y": 3}), Pos(4, 3))
        self.assertEqual(dict_to_pos("e4"), Pos(4, 3))
        self.assertEqual(dict_to_pos({"alg": "a1"}), Pos(0, 0))
        for bad in ({"x": 8, "y": 0}, {"x": True, "y": 0}, {"x": "1", "y": 0}, {}, 12, None):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    dict_to_pos(bad)

    def test_names(self):
        self.assertIs(kind_from_name("Cannon"), PieceKind.CANNON)
        self.assertIs(str_to_color("black"), Color.BLACK)
        with self.assertRaises(ValueError):
            kind_from_name("Dragon")
        with self.assertRaises(ValueError):
            str_to_color("green")


class TestCommands(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(parse_command("e2e4"), MoveCommand(P("e2"), P("e4")))
        self.assertEqual(parse_command(" e2 e4 "), MoveCommand(P("e2"), P("e4")))
        self.assertEqual(parse_command("e2"), SelectCommand(P("e2")))
        self.assertEqual(parse_command("ascend b1"), AscendCommand(P("b1")))
        self.assertEqual(parse_command("u", selected=P("c1")), AscendCommand(P("c1")))
        self.assertEqual(parse_command("=q"), PromoteCommand(PieceKind.QUEEN))
        self.assertEqual(parse_command("promote archbishop"), PromoteCommand(PieceKind.ARCHBISHOP))
        self.assertEqual(parse_command("p m"), PromoteCommand(PieceKind.MONARCH))
        for bad in ("", "u", "e9e4", "promote", "=z", "castle now please"):
            with self.subTest(text=bad):
                with self.assertRaises(ValueError):
                    parse_command(bad)

    def test_apply_reports_progress(self):
        g = parse_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1 5/0")
        self.assertFalse(apply_command(g, PromoteCommand(PieceKind.QUEEN)))
        self.assertFalse(apply_command(g, MoveCommand(P("e1"), P("e3"))))
        self.assertFalse(apply_command(g, SelectCommand(P("d4"))))
        self.assertTrue(apply_command(g, AscendCommand(P("e7"))))
        self.assertFalse(apply_command(g, AscendCommand(P("e7"))))
        self.assertTrue(apply_command(g, MoveCommand(P("e1"), P("d1"))))
        self.assertIs(g.turn, Color.BLACK)

    def test_apply_promotion(self):
        g = parse_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1 0/0")
        self.assertTrue(apply_command(g, MoveCommand(P("e7"), P("e8"))))
        self.assertFalse(apply_command(g, PromoteCommand(PieceKind.CANNON)))
        self.assertTrue(apply_command(g, PromoteCommand(PieceKind.KNIGHT)))
        self.assertEqual(g.board.get_piece(P("e8")).kind, PieceKind.KNIGHT)

    def test_unknown_command(self):
        with self.assertRaises(TypeError):
            apply_command(Game(), "e2e4")

    def test_command_from_event(self):
        g = Game()
        seen = []

        class Collect:
            def on_event(self, game, event):
                seen.append(event)

        g.listeners.append(Collect())
        g.request_move(P("d2"), P("d4"))
        self.assertEqual(command_from_event(seen[0]), MoveCommand(P("d2"), P("d4")))
        self.assertIsInstance(seen[0], MoveMade)
        self.assertIsInstance(seen[1], TurnStarted)
        self.assertIsNone(command_from_event(seen[1]))


class TestFacade(unittest.TestCase):
    def test_move_and_reject(self):
        eng = AscensionEngine()
        out = eng.move("e2", "e4")
        self.assertTrue(out["applied"])
        self.assertEqual(out["after"]["turn"], "BLACK")
        self.assertEqual(len(out["diff"]["changed"]), 2)

        out = eng.move({"x": 0, "y": 1}, {"x": 0, "y": 3})
        self.assertFalse(out["applied"])
        self.assertEqual(out["diff"]["changed"], [])

    def test_ascend_and_promote_by_name(self):
        eng = AscensionEngine.from_fen("k7/4H3/8/8/8/8/8/4K3 w - - 0 1 0/0")
        self.assertTrue(eng.move("e7", "e8")["applied"])
        out = eng.promote("Elephant")
        self.assertTrue(out["applied"])
        self.assertEqual(out["after"]["turn"], "BLACK")
        with self.assertRaises(ValueError):
            eng.promote("Dragon")

    def test_legal_moves(self):
        eng = AscensionEngine()
        self.assertEqual(sorted(m["alg"] for m in eng.legal_moves("b1")), ["a3", "c3"])
        self.assertEqual(eng.legal_moves("e4"), [])


if __name__ == "__main__":
    unittest.main()
