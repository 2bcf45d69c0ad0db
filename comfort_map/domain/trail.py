"""Fixed-capacity ring buffer of recent agent positions."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np


class Trail:
    """Bounded FIFO of ``(x, y)`` positions with O(1) append and eviction.

    Once full, each append overwrites the oldest entry.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._buffer = np.zeros((capacity, 2), dtype=float)
        self._start = 0
        self._size = 0

    def append(self, x: float, y: float) -> None:
        end = (self._start + self._size) % self.capacity
        self._buffer[end] = (x, y)
        if self._size < self.capacity:
            self._size += 1
        else:
            self._start = (self._start + 1) % self.capacity

    def clear(self) -> None:
        self._start = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for k in range(self._size):
            x, y = self._buffer[(self._start + k) % self.capacity]
            yield float(x), float(y)

    def to_array(self) -> np.ndarray:
        """Ordered copy (oldest first) with shape ``(len(self), 2)``."""
        idx = (self._start + np.arange(self._size)) % self.capacity
        return self._buffer[idx].copy()
