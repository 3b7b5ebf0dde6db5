from typing import Iterable, List
from .constants import ROWS, COLS, HEIGHT, MAX_MOVES, BOTTOM_MASK
from .errors import InvalidColumnError, IllegalMoveError, InvalidBoardError


def bottom_mask(col: int) -> int:
    """Single bit at the bottom cell of `col`."""
    return 1 << (col * HEIGHT)


def top_mask(col: int) -> int:
    """Single bit at the top playable cell of `col` (not the sentinel)."""
    return 1 << (col * HEIGHT + ROWS - 1)


def column_mask(col: int) -> int:
    """All playable cells of `col`."""
    return ((1 << ROWS) - 1) << (col * HEIGHT)


def alignment(p: int) -> bool:
    """
    Checks if the stone set `p` contains 4 connected.
    Each direction: AND with a shifted copy marks runs of 2,
    AND again at twice the shift marks runs of 4.
    """
    # Horizontal (Shift 7)
    m = p & (p >> HEIGHT)
    if m & (m >> (2 * HEIGHT)): return True
    # Diagonal \ (Shift 6)
    m = p & (p >> (HEIGHT - 1))
    if m & (m >> (2 * (HEIGHT - 1))): return True
    # Diagonal / (Shift 8)
    m = p & (p >> (HEIGHT + 1))
    if m & (m >> (2 * (HEIGHT + 1))): return True
    # Vertical (Shift 1)
    m = p & (p >> 1)
    if m & (m >> 2): return True

    return False


class Position:
    """
    Connect Four board as two bitboards, seen from the player about to move.

    Bit layout: column c owns bits c*7 .. c*7+6, bottom row first. Bit c*7+6
    is a sentinel that is never set, so shifted win checks cannot wrap
    from one column into the next.

        stones: cells of the player to move
        mask:   cells of both players
    """

    def __init__(self, stones: int = 0, mask: int = 0, move_count: int = 0):
        self.stones = stones
        self.mask = mask
        self.move_count = move_count

    @classmethod
    def from_moves(cls, moves: Iterable[int]) -> 'Position':
        """Replays 0-based columns onto an empty board, stopping at the first illegal one."""
        position = cls()
        for index, col in enumerate(moves):
            position.play_checked(col, index)
        return position

    @classmethod
    def from_matrix(cls, matrix: List[List[int]]) -> 'Position':
        """
        Converts a 2D matrix (Row 0=Top) to a Position (Row 0=Bottom).
        Values: 0=Empty, 1=Player1, 2=Player2.
        Automatically detects whose turn it is based on piece count.
        """
        if len(matrix) != ROWS or any(len(row) != COLS for row in matrix):
            raise InvalidBoardError(f"Board must be {ROWS}x{COLS}")

        mask = 0
        p1_pieces = 0
        moves_count = 0

        # 1. Build Mask and P1 Map, bottom up so floating pieces are caught
        for c in range(COLS):
            landed = True
            for r in range(ROWS - 1, -1, -1):
                val = matrix[r][c]
                if val not in (0, 1, 2):
                    raise InvalidBoardError(f"Unknown cell value {val!r} at row {r}, column {c}")
                if val == 0:
                    landed = False
                    continue
                if not landed:
                    raise InvalidBoardError(f"Floating piece at row {r}, column {c}")

                moves_count += 1
                bit = 1 << (c * HEIGHT + (ROWS - 1) - r)
                mask |= bit
                if val == 1:
                    p1_pieces |= bit

        # 2. Current player is P1 if even moves, P2 if odd.
        # 'stones' is always the CURRENT player.
        if moves_count % 2 == 0:
            stones = p1_pieces
        else:
            stones = mask ^ p1_pieces

        return cls(stones, mask, moves_count)

    def copy(self) -> 'Position':
        return Position(self.stones, self.mask, self.move_count)

    @property
    def current_player(self) -> int:
        """1 for the first player, 2 for the second."""
        return 1 + self.move_count % 2

    @property
    def opponent_stones(self) -> int:
        return self.stones ^ self.mask

    def is_full(self) -> bool:
        return self.move_count >= MAX_MOVES

    def can_play(self, col: int) -> bool:
        """Checks if the top cell of the column is empty."""
        if not 0 <= col < COLS:
            raise InvalidColumnError(col)
        return (self.mask & top_mask(col)) == 0

    def play(self, col: int):
        """
        Drops a piece for the current player and hands the turn over.
        Precondition: can_play(col). Nothing is checked here.
        """
        # Swap roles: the stored stones now belong to the next player
        self.stones ^= self.mask
        # Gravity trick: the carry of (column bits + bottom bit) lands on the first empty row
        self.mask |= self.mask + bottom_mask(col)
        self.move_count += 1

    def play_checked(self, col: int, index: int = -1):
        """play() for untrusted input: raises IllegalMoveError instead of corrupting the board."""
        if self.has_winner():
            raise IllegalMoveError("Game is already over", col, index)
        if not 0 <= col < COLS:
            raise IllegalMoveError(f"Column {col + 1} is outside the board", col, index)
        if not self.can_play(col):
            raise IllegalMoveError(f"Column {col + 1} is full", col, index)
        self.play(col)

    def is_winning_move(self, col: int) -> bool:
        """Checks if the current player connects four by playing `col`, without playing it."""
        if not 0 <= col < COLS:
            raise InvalidColumnError(col)
        landing = (self.mask + bottom_mask(col)) & column_mask(col)
        return alignment(self.stones | landing)

    def has_winner(self) -> bool:
        """Checks if the player who just moved has connected four."""
        return alignment(self.opponent_stones)

    def can_win_next(self) -> bool:
        return any(self.can_play(c) and self.is_winning_move(c) for c in range(COLS))

    def key(self) -> int:
        """Unique ID for caching: Stones + Mask + Bottom row"""
        return self.stones + self.mask + BOTTOM_MASK

    # play() mutates in place, so positions compare by value but are not hashable
    __hash__ = None

    def __eq__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return (self.stones, self.mask, self.move_count) == (other.stones, other.mask, other.move_count)

    def __repr__(self):
        return f"Position(stones={self.stones:#x}, mask={self.mask:#x}, move_count={self.move_count})"
