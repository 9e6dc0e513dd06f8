"""
Strategy base classes and input types.

This module defines:
- StrategyInput: All inputs needed by a strategy (books, indicators, position)
- Strategy: Abstract base class that all strategies must implement
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..indicators import IndicatorStore
from ..types import (
    Instrument,
    Side,
    Lifespan,
    StrategyKind,
    OrderBookSnapshot,
    Quote,
    QuoteDecision,
    ceil_to_tick,
    floor_to_tick,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StrategyInput:
    """
    All inputs needed by a strategy to decide its quotes.

    The engine assembles this on every order book event.

    Attributes:
        book: The snapshot that triggered this decision
        reference: Latest REFERENCE snapshot (None until first seen)
        tradable: Latest TRADABLE snapshot (None until first seen)
        indicators: Rolling windows owned by the engine
        position: Signed net position in the tradable instrument
        position_limit: Hard bound on |position|
        tick_size: Price increment
        aggressive_buy_price: Worst acceptable buy price (near-certain fill)
        aggressive_sell_price: Worst acceptable sell price (near-certain fill)
        unwind_side: Side that reduces position when above the soft limit
        unwind_size: Maximum size of one unwind order
    """
    book: OrderBookSnapshot
    reference: Optional[OrderBookSnapshot]
    tradable: Optional[OrderBookSnapshot]
    indicators: IndicatorStore
    position: int
    position_limit: int
    tick_size: int
    aggressive_buy_price: int
    aggressive_sell_price: int
    unwind_side: Optional[Side] = None
    unwind_size: int = 30

    @property
    def is_reference_update(self) -> bool:
        return self.book.instrument == Instrument.REFERENCE

    @property
    def bid_capacity(self) -> int:
        """Bid size the position leaves room for. Working orders are netted when the engine clamps."""
        return max(0, self.position_limit - self.position)

    @property
    def ask_capacity(self) -> int:
        """Ask size the position leaves room for. Working orders are netted when the engine clamps."""
        return max(0, self.position_limit + self.position)


class Strategy(ABC):
    """
    Abstract base class for quoting strategies.

    A strategy looks at the current books, its indicator windows and the
    position, and says what it WANTS resting on each side. It never tracks
    orders itself: the engine reconciles the decision against the resting
    orders held by the lifecycle manager.

    Implementing a Strategy:
        1. Subclass Strategy and set `kind`
        2. Optionally override observe() to feed indicator windows
        3. Implement decide(inp) -> QuoteDecision

    Example:
        class MyStrategy(Strategy):
            kind = StrategyKind.TICK_OFFSET

            def decide(self, inp: StrategyInput) -> QuoteDecision:
                if not inp.is_reference_update:
                    return QuoteDecision.none("NOT_REFERENCE")
                return QuoteDecision(
                    bid=Quote(Side.BUY, inp.book.best_bid - 100, inp.bid_capacity),
                    ask=Quote(Side.SELL, inp.book.best_ask + 100, inp.ask_capacity),
                )
    """

    kind: StrategyKind

    def observe(self, book: OrderBookSnapshot, store: IndicatorStore) -> None:
        """
        Feed a new snapshot into the strategy's indicator windows.

        Called on every order book event, before decide() or unwind().
        """

    @abstractmethod
    def decide(self, inp: StrategyInput) -> QuoteDecision:
        """
        Decide desired quotes for the current event.

        May raise InsufficientSamples; the engine suppresses the signal for
        this event.
        """

    def unwind(self, inp: StrategyInput) -> QuoteDecision:
        """
        Aggressive fill-and-kill quote reducing position.

        Used by the engine instead of decide() while |position| is above
        the soft limit. Priced at the reference touch on the reducing side.
        """
        side = inp.unwind_side
        reference = inp.reference
        if side is None or reference is None:
            return QuoteDecision.none("NO_UNWIND")

        size = min(inp.unwind_size, abs(inp.position))
        if side == Side.SELL:
            if reference.best_bid <= 0:
                return QuoteDecision.none("NO_REFERENCE_BID")
            price = floor_to_tick(reference.best_bid, inp.tick_size)
            quote = Quote(Side.SELL, price, size, Lifespan.FILL_AND_KILL)
            return QuoteDecision(ask=quote, reason_flags={"UNWIND"})

        if reference.best_ask <= 0:
            return QuoteDecision.none("NO_REFERENCE_ASK")
        price = ceil_to_tick(reference.best_ask, inp.tick_size)
        quote = Quote(Side.BUY, price, size, Lifespan.FILL_AND_KILL)
        return QuoteDecision(bid=quote, reason_flags={"UNWIND"})
