# marlin/core/transposition.py
import logging
import numpy as np
from .constants import DEFAULT_TT_SIZE

logger = logging.getLogger(__name__)


class TranspositionTable:
    """
    Direct-mapped cache: slot = key % size, newest entry always wins the slot.

    A key of 0 marks an empty slot, and get() answers 0 for a miss.
    Callers store values offset so that 0 is never a real score.
    """

    def __init__(self, size: int = DEFAULT_TT_SIZE):
        if size <= 0:
            raise ValueError(f"Table size must be positive, got {size}")
        self.size = size
        # Compact storage: 8-byte keys, 1-byte values
        self.keys = np.zeros(size, dtype=np.uint64)
        self.values = np.zeros(size, dtype=np.int8)
        self.hits = 0

    def get(self, key: int) -> int:
        idx = key % self.size
        if self.keys[idx] == key:
            self.hits += 1
            return int(self.values[idx])
        return 0

    def put(self, key: int, value: int):
        idx = key % self.size
        self.keys[idx] = key
        self.values[idx] = value

    def reset(self):
        logger.debug("Clearing transposition table (%d slots, %d hits)", self.size, self.hits)
        self.keys.fill(0)
        self.values.fill(0)
        self.hits = 0

    def __len__(self):
        """Number of occupied slots."""
        return int(np.count_nonzero(self.keys))
