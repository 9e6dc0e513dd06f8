"""
Trend-following strategy (cloud breakout).

Tracks cloud lines over the reference bid and ask series. Opens a
position only when flat, on a breakout through the cloud confirmed by the
conversion/base-line relationship. Exits when that relationship flips or
price crosses the stop loss recorded at entry.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..indicators import IndicatorStore, cloud_levels, SPAN_B_LOOKBACK
from ..types import (
    Instrument,
    Side,
    Lifespan,
    StrategyKind,
    OrderBookSnapshot,
    Quote,
    QuoteDecision,
)
from .base import Strategy, StrategyInput

logger = logging.getLogger(__name__)

BID_SERIES = "reference_bid"
ASK_SERIES = "reference_ask"


@dataclass(slots=True)
class TrendConfig:
    """
    Configuration for TrendStrategy.

    window: Samples kept per series; signals need a full window
    entry_size: Size of an opening order (clamped to the limit)
    """
    window: int = SPAN_B_LOOKBACK
    entry_size: int = 100


class TrendStrategy(Strategy):
    """
    Cloud breakout trend follower.

    Entry (flat only):
        Long  - reference ask above the bid-series cloud top and the
                bid-series conversion line above its base line
        Short - reference bid below the ask-series cloud bottom and the
                ask-series conversion line below its base line
        Stop loss is set to the base line at entry.

    Exit:
        Long  - ask-series conversion below base, or bid <= stop
        Short - bid-series conversion above base, or ask >= stop

    All orders are fill-and-kill at the aggressive prices.
    """

    kind = StrategyKind.TREND

    def __init__(self, config: Optional[TrendConfig] = None):
        self.config = config or TrendConfig()
        self.stop_loss: Optional[int] = None

    def observe(self, book: OrderBookSnapshot, store: IndicatorStore) -> None:
        if book.instrument != Instrument.REFERENCE or not book.has_two_sides:
            return
        store.register(BID_SERIES, self.config.window)
        store.register(ASK_SERIES, self.config.window)
        store.push(BID_SERIES, book.best_bid)
        store.push(ASK_SERIES, book.best_ask)

    def decide(self, inp: StrategyInput) -> QuoteDecision:
        if not inp.is_reference_update:
            return QuoteDecision.none("NOT_REFERENCE")
        if not inp.book.has_two_sides:
            return QuoteDecision.none("ONE_SIDED_BOOK")

        # Raises InsufficientSamples until both windows hold 52 samples
        bid_cloud = cloud_levels(inp.indicators.window(BID_SERIES))
        ask_cloud = cloud_levels(inp.indicators.window(ASK_SERIES))

        bid = inp.book.best_bid
        ask = inp.book.best_ask
        position = inp.position

        if position == 0:
            if bid < ask_cloud.bottom and ask_cloud.bearish:
                self.stop_loss = ask_cloud.base
                logger.info(f"Short entry: bid {bid} below cloud {ask_cloud.bottom}, stop {self.stop_loss}")
                return self._sell(inp, self.config.entry_size, "OPEN_SHORT")
            if ask > bid_cloud.top and bid_cloud.bullish:
                self.stop_loss = bid_cloud.base
                logger.info(f"Long entry: ask {ask} above cloud {bid_cloud.top}, stop {self.stop_loss}")
                return self._buy(inp, self.config.entry_size, "OPEN_LONG")
            return QuoteDecision.none("NO_SIGNAL")

        if position > 0:
            stopped = self.stop_loss is not None and bid <= self.stop_loss
            if ask_cloud.bearish or stopped:
                logger.info(f"Long exit ({'stop' if stopped else 'reversal'}) at bid {bid}")
                return self._sell(inp, position, "CLOSE_LONG")
            return QuoteDecision.none("HOLD_LONG")

        stopped = self.stop_loss is not None and ask >= self.stop_loss
        if bid_cloud.bullish or stopped:
            logger.info(f"Short exit ({'stop' if stopped else 'reversal'}) at ask {ask}")
            return self._buy(inp, -position, "CLOSE_SHORT")
        return QuoteDecision.none("HOLD_SHORT")

    @staticmethod
    def _buy(inp: StrategyInput, size: int, reason: str) -> QuoteDecision:
        quote = Quote(Side.BUY, inp.aggressive_buy_price, size, Lifespan.FILL_AND_KILL)
        return QuoteDecision(bid=quote, reason_flags={reason})

    @staticmethod
    def _sell(inp: StrategyInput, size: int, reason: str) -> QuoteDecision:
        quote = Quote(Side.SELL, inp.aggressive_sell_price, size, Lifespan.FILL_AND_KILL)
        return QuoteDecision(ask=quote, reason_flags={reason})
