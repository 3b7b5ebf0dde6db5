# marlin/core/constants.py

# --- Board Dimensions ---
ROWS = 6
COLS = 7
# Height includes a sentinel row to prevent bit-shift overflows
HEIGHT = ROWS + 1
MAX_MOVES = ROWS * COLS

# --- Bit Masks ---
# One bit at the bottom of every column: bits 0, 7, 14, ..., 42
BOTTOM_MASK = sum(1 << (c * HEIGHT) for c in range(COLS))
# Every playable cell (sentinel bits stay clear)
BOARD_MASK = BOTTOM_MASK * ((1 << ROWS) - 1)

# --- Scoring System ---
# Logic: Score = (MAX_MOVES + 1 - moves) // 2 for the side that wins
# Win on the 1st move   = +21 (MAX_SCORE)
# Fastest possible loss = -18 (opponent completes four with its 4th stone)
# Draw                  = 0
# MIN_SCORE is the floor of the root search window
MAX_SCORE = (MAX_MOVES + 1) // 2
MIN_SCORE = -(MAX_MOVES // 2)

# --- Transposition Table ---
# 2^23 slots, ~72 MB with 8-byte keys and 1-byte values
DEFAULT_TT_SIZE = 1 << 23

# --- Optimization ---
# Search center columns first to maximize Alpha-Beta pruning efficiency
COLUMN_ORDER = (3, 2, 4, 1, 5, 0, 6)
