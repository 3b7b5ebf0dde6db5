"""
Line-based command loop for the Marlin Connect Four engine.

Commands:
  position [moves]  - Reset the board, then play a move string (e.g. 'position 4433')
  display | d       - Show the board
  go                - Score every column and pick the best move
  solve             - Value of the position for the player to move
  help              - List commands
  quit | exit       - Leave
"""
import sys
import logging
from typing import Optional, TextIO

from pydantic import ValidationError

from marlin.config import get_settings
from marlin.core.constants import COLS
from marlin.core.errors import MarlinError, InvalidConfigError
from marlin.core.notation import play_moves, render
from marlin.core.position import Position
from marlin.core.solver import Solver, score_to_outcome

logger = logging.getLogger(__name__)

BANNER = "Marlin Connect 4 Engine v0.1\nType 'help' for available commands.\n"

HELP = """Commands:
  position [moves]  - Set position (e.g., 'position 4433')
  display           - Show the board
  go                - Find best move
  solve             - Score the position
  quit              - Exit"""


class Shell:
    def __init__(self, solver: Optional[Solver] = None, out: Optional[TextIO] = None):
        self.position = Position()
        self.solver = solver or Solver()
        self.out = out if out is not None else sys.stdout

    def say(self, text: str):
        print(text, file=self.out)

    def handle(self, line: str) -> bool:
        """Runs one command line. Returns False once the loop should stop."""
        command, _, args = line.strip().partition(" ")
        args = args.strip()

        if command in ("quit", "exit"):
            self.say("Goodbye!")
            return False

        try:
            if command == "help":
                self.say(HELP)
            elif command == "position":
                self.cmd_position(args)
            elif command in ("display", "d"):
                self.say(render(self.position))
            elif command == "go":
                self.cmd_go()
            elif command == "solve":
                self.cmd_solve()
            elif not command:
                pass
            else:
                self.say(f"Unknown command: {command} (type 'help' for commands)")
        except MarlinError as e:
            logger.debug("Command %r rejected: %s", line, e)
            self.say(f"Error: {e}")
        return True

    def cmd_position(self, args: str):
        self.position = Position()
        if not args:
            self.say("Position reset to empty board")
            return
        count = play_moves(self.position, args)
        self.say(f"Played {count} moves")

    def cmd_go(self):
        if self.position.has_winner():
            self.say("Game is already over")
            return
        # Fast path: immediate wins
        for col in range(COLS):
            if self.position.can_play(col) and self.position.is_winning_move(col):
                self.say(f"bestmove {col + 1} score WIN (immediate)")
                return
        if self.position.is_full():
            self.say("Game is a draw - no moves available")
            return

        self.say("Analyzing...")
        analysis = self.solver.analyze(self.position)
        for col, score in analysis.scores.items():
            if score is not None:
                self.say(f"  Column {col + 1}: score {score}")
        self.say(f"bestmove {analysis.best_move + 1} score {analysis.best_score} ({analysis.outcome})")
        self.say(f"Nodes analyzed: {analysis.nodes}")

    def cmd_solve(self):
        if self.position.has_winner():
            self.say("Game is already over")
            return
        if self.position.is_full():
            self.say("Game is a draw - no moves available")
            return
        score = self.solver.solve(self.position)
        outcome, distance = score_to_outcome(score, self.position.move_count)
        if distance:
            self.say(f"score {score} ({outcome} in {distance})")
        else:
            self.say(f"score {score} ({outcome})")
        self.say(f"Nodes analyzed: {self.solver.node_count}")

    def run(self, stream: TextIO, prompt: bool = False):
        self.say(BANNER)
        while True:
            if prompt:
                print("> ", end="", file=self.out, flush=True)
            line = stream.readline()
            if not line:  # EOF
                break
            if not self.handle(line):
                break


def main():
    try:
        settings = get_settings()
    except (InvalidConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    Shell(Solver(settings.tt_size)).run(sys.stdin, prompt=sys.stdin.isatty())
    return 0


if __name__ == "__main__":
    sys.exit(main())
