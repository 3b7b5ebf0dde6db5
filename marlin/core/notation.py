from typing import List
from .constants import ROWS, COLS, HEIGHT
from .errors import MoveParseError
from .position import Position

SYMBOLS = {0: ".", 1: "X", 2: "O"}


def parse_moves(text: str) -> List[int]:
    """
    Parses a move string like "4433221".
    Each digit is a 1-based column; returns 0-based columns.
    """
    moves = []
    for i, ch in enumerate(text):
        if not ("1" <= ch <= str(COLS)):
            raise MoveParseError(ch, i)
        moves.append(int(ch) - 1)
    return moves


def play_moves(position: Position, text: str) -> int:
    """Plays a move string onto `position`. Returns the number of moves played."""
    moves = parse_moves(text)
    for index, col in enumerate(moves):
        position.play_checked(col, index)
    return len(moves)


def cell_owner(position: Position, row: int, col: int) -> int:
    """0=Empty, 1=Player1, 2=Player2. Row 0 is the BOTTOM."""
    bit = 1 << (col * HEIGHT + row)
    if not position.mask & bit:
        return 0
    # 'stones' belongs to whoever is to move
    if position.stones & bit:
        return position.current_player
    return 3 - position.current_player


def to_matrix(position: Position) -> List[List[int]]:
    """Inverse of Position.from_matrix (Row 0=Top)."""
    return [[cell_owner(position, r, c) for c in range(COLS)] for r in range(ROWS - 1, -1, -1)]


def render(position: Position) -> str:
    """Generates an ASCII grid representation, 1-based column header."""
    header = " " + " ".join([str(i + 1) for i in range(COLS)])
    rows_str = []
    for row in to_matrix(position):
        rows_str.append("|" + "|".join(SYMBOLS[v] for v in row) + "|")
    footer = f"Moves: {position.move_count}, {SYMBOLS[position.current_player]} to play"
    return header + "\n" + "\n".join(rows_str) + "\n" + footer
