class MarlinError(Exception):
    """Base class for caller contract violations detected by the engine."""


class InvalidColumnError(MarlinError, IndexError):
    def __init__(self, col: int):
        super().__init__(f"Column {col} is outside the board")
        self.col = col


class IllegalMoveError(MarlinError, ValueError):
    """A move that cannot be played: off the board, into a full column, or on a finished board."""

    def __init__(self, message: str, col: int = -1, index: int = -1):
        super().__init__(message)
        self.col = col
        self.index = index


class InvalidBoardError(MarlinError, ValueError):
    pass


class MoveParseError(MarlinError, ValueError):
    def __init__(self, char: str, index: int):
        super().__init__(f"Invalid character '{char}' at position {index + 1} in move string")
        self.char = char
        self.index = index


class InvalidConfigError(MarlinError, ValueError):
    """Settings file that cannot be read as a `solver:` mapping."""
