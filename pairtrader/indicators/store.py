"""
Rolling indicator store.

Owns one PriceWindow per series. A series is keyed by an Instrument or by
a strategy-defined name (e.g. "reference_bid", "gap").
"""

import logging
from collections.abc import Hashable

from .window import PriceWindow

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 52


class IndicatorStore:
    """
    Collection of fixed-capacity price windows.

    Single-writer: mutated only from the engine's event path.
    """

    def __init__(self, default_capacity: int = DEFAULT_CAPACITY):
        self._default_capacity = default_capacity
        self._windows: dict[Hashable, PriceWindow] = {}

    def register(self, key: Hashable, capacity: int) -> PriceWindow:
        """
        Register a series with an explicit capacity.

        Re-registering with the same capacity returns the existing window.
        """
        existing = self._windows.get(key)
        if existing is not None:
            if existing.capacity != capacity:
                raise ValueError(
                    f"series {key!r} already registered with capacity "
                    f"{existing.capacity}, not {capacity}"
                )
            return existing
        window = PriceWindow(capacity)
        self._windows[key] = window
        logger.debug(f"Registered series {key!r} (capacity={capacity})")
        return window

    def push(self, key: Hashable, price: int) -> None:
        """Append a sample to a series, creating it with the default capacity."""
        window = self._windows.get(key)
        if window is None:
            window = self.register(key, self._default_capacity)
        window.push(price)

    def window(self, key: Hashable) -> PriceWindow:
        """Window for a series (empty default-capacity window if unseen)."""
        window = self._windows.get(key)
        if window is None:
            window = self.register(key, self._default_capacity)
        return window

    def __contains__(self, key: Hashable) -> bool:
        return key in self._windows

    def clear(self) -> None:
        """Drop all samples, keeping registrations."""
        for window in self._windows.values():
            window.clear()
