# marlin/core/solver.py
import logging
from enum import StrEnum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel

from .constants import COLS, MAX_MOVES, MAX_SCORE, MIN_SCORE, COLUMN_ORDER, DEFAULT_TT_SIZE
from .errors import IllegalMoveError
from .position import Position
from .transposition import TranspositionTable

logger = logging.getLogger(__name__)


class Outcome(StrEnum):
    WIN = "WIN"
    LOSS = "LOSS"
    DRAW = "DRAW"


class Analysis(BaseModel):
    """Per-column ranking of a position, from the point of view of the player to move."""
    scores: Dict[int, Optional[int]]  # None marks a full column
    best_move: int
    best_score: int
    outcome: Outcome
    moves_to_outcome: int
    nodes: int


def win_score(move_count: int) -> int:
    """Score of winning with the stone played after `move_count` moves. Earlier wins score higher."""
    return (MAX_MOVES + 1 - move_count) // 2


def score_to_outcome(score: int, move_count: int) -> Tuple[Outcome, int]:
    """
    Translates a score at a position with `move_count` stones into an outcome
    and the number of stones the winning side still has to place.
    """
    if score > 0:
        return Outcome.WIN, win_score(move_count) - score + 1
    if score < 0:
        return Outcome.LOSS, win_score(move_count + 1) + score + 1
    return Outcome.DRAW, 0


class Solver:
    def __init__(self, table_size: int = DEFAULT_TT_SIZE, use_table: bool = True):
        self.tt = TranspositionTable(table_size) if use_table else None
        self.node_count = 0

    def reset(self):
        """Forgets every cached bound. Scores never depend on it, only the work done."""
        if self.tt is not None:
            self.tt.reset()

    def solve(self, board: Position) -> int:
        """
        Exact value of `board` for the player to move:
        positive = forced win (faster wins score higher), 0 = draw, negative = forced loss.
        The board must not already contain a four-in-a-row.
        """
        self.node_count = 0
        alpha, beta = MIN_SCORE, MAX_SCORE
        logger.debug("Solving %r with window [%d, %d]", board, alpha, beta)

        score = self.negamax(board, alpha, beta)

        logger.debug("Score %d after %d nodes", score, self.node_count)
        return score

    def analyze(self, board: Position) -> Analysis:
        """
        Root Entry Point for move choice.
        Evaluates EVERY column so callers can rank them, not just pick one.
        """
        if board.has_winner():
            raise IllegalMoveError("Game is already over")
        if board.is_full():
            raise IllegalMoveError("No moves left: the board is full")

        self.reset()
        total_nodes = 0

        move_scores: Dict[int, Optional[int]] = {}
        best_score = MIN_SCORE - 1
        best_move = -1

        # Iterate ALL columns (0..6) - No sorting here, we need index mapping
        for col in range(COLS):
            if not board.can_play(col):
                move_scores[col] = None
                continue

            if board.is_winning_move(col):
                score = win_score(board.move_count)
            else:
                next_board = board.copy()
                next_board.play(col)
                # We want the exact value of *this* column, even if it's sub-optimal,
                # so every child gets the full window.
                score = -self.solve(next_board)
                total_nodes += self.node_count

            move_scores[col] = score
            if score > best_score:
                best_score = score
                best_move = col

        self.node_count = total_nodes
        outcome, distance = score_to_outcome(best_score, board.move_count)
        logger.debug("Best move %d (%s in %d) after %d nodes", best_move, outcome, distance, total_nodes)

        return Analysis(
            scores=move_scores,
            best_move=best_move,
            best_score=best_score,
            outcome=outcome,
            moves_to_outcome=distance,
            nodes=total_nodes,
        )

    def negamax(self, board: Position, alpha: int, beta: int) -> int:
        """
        Score of `board` within the window (alpha, beta):
            - an exact score if it lies inside the window
            - an upper bound <= alpha if the true score is at most alpha
            - a lower bound >= beta if the true score is at least beta
        """
        self.node_count += 1

        # 1. Win on this move: nothing can beat it, so check before any pruning
        for col in COLUMN_ORDER:
            if board.can_play(col) and board.is_winning_move(col):
                return win_score(board.move_count)

        # 2. Check Draw: the last empty cell cannot win (checked above)
        if board.move_count >= MAX_MOVES - 1:
            return 0

        # 3. Transposition Table Cache: stored values are upper bounds
        key = board.key()
        if self.tt is not None:
            cached = self.tt.get(key)
            if cached:
                upper = cached + MIN_SCORE - 1
                if beta > upper:
                    beta = upper
                    if alpha >= beta:
                        return beta

        # 4. Max theoretical score: no immediate win, so at best we win with our following stone
        upper = (MAX_MOVES - 1 - board.move_count) // 2
        if beta > upper:
            beta = upper
            if alpha >= beta:
                return beta

        # 5. Recursive Search
        for col in COLUMN_ORDER:  # 3, 2, 4, 1...
            if board.can_play(col):
                next_board = board.copy()
                next_board.play(col)
                score = -self.negamax(next_board, -beta, -alpha)

                if score >= beta:
                    return score  # Beta Cutoff
                if score > alpha:
                    alpha = score

        # Offset keeps stored values >= 1, so 0 can only mean a miss
        if self.tt is not None:
            self.tt.put(key, alpha - MIN_SCORE + 1)
        return alpha
