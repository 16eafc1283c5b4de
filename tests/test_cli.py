import contextlib
import io
import unittest

from rubik_solver.cli import build_parser, main


def run_cli(argv: list[str]) -> str:
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        main(argv)
    return out.getvalue()


class TestCLI(unittest.TestCase):
    def test_parser_modes(self):
        parser = build_parser()
        args = parser.parse_args(["scramble"])
        self.assertEqual(args.length, 20)
        self.assertIsNone(args.seed)
        args = parser.parse_args(["solve", "--moves", "R U", "--phases"])
        self.assertEqual(args.moves, "R U")
        self.assertTrue(args.phases)
        args = parser.parse_args(["evaluate", "--episodes", "3", "--progress", "off"])
        self.assertEqual(args.episodes, 3)
        with self.assertRaises(SystemExit):
            parser.parse_args([])

    def test_scramble_prints_moves_and_facelets(self):
        text = run_cli(["scramble", "--length", "12", "--seed", "4"])
        lines = dict(line.split("=", 1) for line in text.strip().splitlines())
        self.assertEqual(len(lines["scramble"].split()), 12)
        self.assertEqual(len(lines["facelets"]), 54)

    def test_solve_history(self):
        text = run_cli(["solve", "--moves", "R U R' F2 y D'", "--phases"])
        self.assertIn("history=R U R' F2 y D'", text)
        self.assertIn("phase=cross", text)
        self.assertIn("solved=True", text)

    def test_bad_history_exits(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main(["solve", "--moves", "R Q"])


if __name__ == "__main__":
    unittest.main()
