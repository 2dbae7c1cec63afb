"""
Saturating Counters and Counter Tables

2-bit saturating counters and the fixed-size tables of them that every
predictor scheme is built from.
"""

import numpy as np
from typing import List, Tuple


# 2-bit counter states
STRONGLY_NOT_TAKEN = 0
WEAKLY_NOT_TAKEN = 1
WEAKLY_TAKEN = 2
STRONGLY_TAKEN = 3


def saturate(value: int, taken: bool, max_value: int) -> int:
    """Next counter value: one step towards the outcome, clamped to [0, max_value]."""
    if taken:
        return min(value + 1, max_value)
    return max(value - 1, 0)


class SaturatingCounter:
    """
    Single saturating counter.

    Values below the threshold predict not taken, values at or above it
    predict taken. Stops at 0 and at max_value instead of wrapping.
    """

    def __init__(self, value: int = WEAKLY_TAKEN, bits: int = 2):
        self.bits = bits
        self.max_value = (1 << bits) - 1
        self.threshold = 1 << (bits - 1)
        self.value = min(max(value, 0), self.max_value)

    def increment(self) -> None:
        self.update(True)

    def decrement(self) -> None:
        self.update(False)

    def update(self, taken: bool) -> None:
        """Move towards the actual outcome."""
        self.value = saturate(self.value, taken, self.max_value)

    def is_taken(self) -> bool:
        return self.value >= self.threshold

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"SaturatingCounter({self.value}/{self.max_value})"


class CounterTable:
    """
    Table of 2^index_bits saturating counters.

    The table is allocated once and never resized. Counters follow the
    same saturate() rule as SaturatingCounter.
    """

    def __init__(self, index_bits: int, initial_value: int = WEAKLY_TAKEN,
                 counter_bits: int = 2):
        """
        Initialize counter table.

        Args:
            index_bits: Table exponent (table has 2^index_bits entries)
            initial_value: Value every counter starts at
            counter_bits: Bits per counter
        """
        self.index_bits = index_bits
        self.num_entries = 1 << index_bits
        self.index_mask = self.num_entries - 1
        self.counter_bits = counter_bits
        self.initial_value = initial_value

        # Counter bounds
        self.counter_max = (1 << counter_bits) - 1
        self.threshold = 1 << (counter_bits - 1)

        self.table = np.full(self.num_entries, initial_value, dtype=np.uint8)

    def value(self, index: int) -> int:
        """Raw counter value at index."""
        return int(self.table[index])

    def is_taken(self, index: int) -> bool:
        return int(self.table[index]) >= self.threshold

    def increment(self, index: int) -> None:
        self.update(index, True)

    def decrement(self, index: int) -> None:
        self.update(index, False)

    def update(self, index: int, taken: bool) -> None:
        """Increment on taken, decrement on not taken."""
        # Clamp in Python ints; uint8 would wrap below zero
        self.table[index] = saturate(int(self.table[index]), taken, self.counter_max)

    def reset(self) -> None:
        """Restore every counter to its initial value."""
        self.table.fill(self.initial_value)

    def contents(self) -> List[Tuple[int, int]]:
        """Final contents as (index, value) pairs in table order."""
        return [(index, int(value)) for index, value in enumerate(self.table)]

    def snapshot(self) -> np.ndarray:
        """Copy of the raw counter array."""
        return self.table.copy()

    def get_storage_bits(self) -> int:
        """Total storage in bits."""
        return self.num_entries * self.counter_bits

    def get_statistics(self) -> dict:
        """Distribution of counter states across the table."""
        counts = np.bincount(self.table, minlength=self.counter_max + 1)
        return {
            'entries': self.num_entries,
            'counter_bits': self.counter_bits,
            'total_bits': self.get_storage_bits(),
            'predict_taken': int(np.sum(self.table >= self.threshold)),
            'state_counts': [int(c) for c in counts],
        }

    def __len__(self) -> int:
        return self.num_entries

    def __repr__(self) -> str:
        return f"CounterTable(2^{self.index_bits}, init={self.initial_value})"
