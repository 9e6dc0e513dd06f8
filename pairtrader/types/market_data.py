"""
Market data snapshot types.

Top-of-book snapshots for the two instruments. Only level 0 is used by the
decision core; deeper levels are carried for logging.
"""

from dataclasses import dataclass, field

from .core import Instrument


@dataclass(slots=True)
class OrderBookSnapshot:
    """
    Top-of-book snapshot for one instrument.

    Price arrays are ordered best-first. A price of 0 means the level is
    empty (no bid / no ask).
    """
    instrument: Instrument
    sequence: int
    ask_prices: list[int] = field(default_factory=list)
    ask_volumes: list[int] = field(default_factory=list)
    bid_prices: list[int] = field(default_factory=list)
    bid_volumes: list[int] = field(default_factory=list)
    ts_local_ms: int = 0

    @property
    def best_ask(self) -> int:
        """Best ask price, 0 if the ask side is empty."""
        return self.ask_prices[0] if self.ask_prices else 0

    @property
    def best_bid(self) -> int:
        """Best bid price, 0 if the bid side is empty."""
        return self.bid_prices[0] if self.bid_prices else 0

    @property
    def has_two_sides(self) -> bool:
        return self.best_ask > 0 and self.best_bid > 0

    @property
    def mid(self) -> int | None:
        """Integer mid price, None unless both sides are present."""
        if not self.has_two_sides:
            return None
        return (self.best_ask + self.best_bid) // 2
