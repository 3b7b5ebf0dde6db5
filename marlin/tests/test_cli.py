import io
import unittest
from unittest.mock import patch

from marlin.cli import Shell, main
from marlin.config import Settings
from marlin.core.errors import InvalidConfigError
from marlin.core.position import Position
from marlin.core.solver import Solver
from marlin.tests.boards import pattern_matrix


class TestShell(unittest.TestCase):
    def setUp(self):
        self.out = io.StringIO()
        self.shell = Shell(Solver(1 << 12), out=self.out)

    def run_lines(self, *lines):
        for line in lines:
            self.shell.handle(line)
        return self.out.getvalue()

    def test_position_and_display(self):
        output = self.run_lines("position 44", "display")
        self.assertIn("Played 2 moves", output)
        self.assertIn("|.|.|.|O|.|.|.|", output)
        self.assertIn("|.|.|.|X|.|.|.|", output)
        self.assertEqual(self.shell.position.move_count, 2)

    def test_position_reset(self):
        output = self.run_lines("position 44", "position")
        self.assertIn("Position reset to empty board", output)
        self.assertEqual(self.shell.position, Position())

    def test_position_errors_are_reported(self):
        output = self.run_lines("position 48")
        self.assertIn("Error: Invalid character '8'", output)
        output = self.run_lines("position 1111111")
        self.assertIn("Error: Column 1 is full", output)

    def test_go_immediate_win(self):
        output = self.run_lines("position 112233", "go")
        self.assertIn("bestmove 4 score WIN (immediate)", output)

    def test_go_forced_loss(self):
        output = self.run_lines("position 22334", "go")
        self.assertIn("  Column 1: score -18", output)
        self.assertIn("bestmove 1 score -18 (LOSS)", output)
        self.assertIn("Nodes analyzed: 7", output)

    def test_solve(self):
        output = self.run_lines("position 22334", "solve")
        self.assertIn("score -18 (LOSS in 1)", output)
        self.assertIn("Nodes analyzed: 8", output)

    def test_solve_draw(self):
        self.shell.position = Position.from_matrix(pattern_matrix({0: 1}))
        output = self.run_lines("solve")
        self.assertIn("score 0 (DRAW)", output)

    def test_full_board(self):
        self.shell.position = Position.from_matrix(pattern_matrix())
        output = self.run_lines("go", "solve")
        self.assertEqual(output.count("Game is a draw - no moves available"), 2)

    def test_position_rejects_moves_after_a_win(self):
        output = self.run_lines("position 12121212")
        self.assertIn("Error: Game is already over", output)
        self.assertNotIn("Played", output)
        # Moves before the rejected one stay on the board
        self.assertEqual(self.shell.position.move_count, 7)
        self.assertIn("Game is already over", self.run_lines("go"))

    def test_won_position_is_not_searched(self):
        self.shell.position = Position.from_moves([0, 1, 0, 1, 0, 1, 0])
        output = self.run_lines("go", "solve")
        self.assertEqual(output.count("Game is already over"), 2)
        self.assertNotIn("bestmove", output)
        self.assertNotIn("score", output)

    def test_unknown_and_empty(self):
        output = self.run_lines("", "   ", "fly")
        self.assertEqual(output, "Unknown command: fly (type 'help' for commands)\n")

    def test_quit_stops(self):
        self.assertFalse(self.shell.handle("quit"))
        self.assertFalse(self.shell.handle("exit"))
        self.assertTrue(self.shell.handle("help"))

    def test_run_until_quit(self):
        self.shell.run(io.StringIO("help\nposition 4\nquit\nposition 44\n"))
        output = self.out.getvalue()
        self.assertIn("Marlin Connect 4 Engine", output)
        self.assertIn("Commands:", output)
        self.assertIn("Goodbye!", output)
        self.assertEqual(self.shell.position.move_count, 1)

    def test_run_until_eof(self):
        self.shell.run(io.StringIO("position 4"))
        self.assertEqual(self.shell.position.move_count, 1)


class TestMain(unittest.TestCase):
    def test_bad_config_exits_with_message(self):
        err = io.StringIO()
        with patch("marlin.cli.get_settings", side_effect=InvalidConfigError("'solver' must be a mapping")), \
                patch("sys.stderr", err):
            self.assertEqual(main(), 1)
        self.assertIn("Configuration error: 'solver' must be a mapping", err.getvalue())

    def test_runs_shell_until_eof(self):
        out = io.StringIO()
        with patch("marlin.cli.get_settings", return_value=Settings(tt_size=1 << 12)), \
                patch("sys.stdin", io.StringIO("position 4\n")), \
                patch("sys.stdout", out):
            self.assertEqual(main(), 0)
        self.assertIn("Played 1 moves", out.getvalue())


if __name__ == '__main__':
    unittest.main()
