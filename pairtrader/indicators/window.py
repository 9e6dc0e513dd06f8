"""
Fixed-capacity price window.
"""

from collections import deque
from typing import Optional


class PriceWindow:
    """
    Time-ordered, fixed-capacity window of observed prices.

    Append-only: once at capacity, each push evicts the oldest sample.
    Oldest first when read back.
    """

    __slots__ = ("_capacity", "_values")

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._values: deque[int] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._values) == self._capacity

    def push(self, price: int) -> None:
        """Append a sample, evicting the oldest one when full."""
        self._values.append(price)

    def values(self) -> list[int]:
        """Snapshot of the window contents, oldest first."""
        return list(self._values)

    def recent(self, lookback: int) -> list[int]:
        """The most recent `lookback` samples, oldest first."""
        if lookback >= len(self._values):
            return list(self._values)
        return list(self._values)[-lookback:]

    def latest(self) -> Optional[int]:
        return self._values[-1] if self._values else None

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __repr__(self) -> str:
        return f"PriceWindow(capacity={self._capacity}, size={len(self._values)})"
