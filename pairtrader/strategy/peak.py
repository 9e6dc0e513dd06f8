"""
Peak-detection arbitrage strategy.

Watches the cross-instrument gaps and only trades when a gap stops
rising, so we never chase a spread that is still widening.

    sell gap = tradable bid - reference ask   (sell tradable, hedge buy)
    buy gap  = reference bid - tradable ask   (buy tradable, hedge sell)
"""

import logging
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
    fee_adjusted_ask,
    fee_adjusted_bid,
)
from .base import Strategy, StrategyInput

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PeakConfig:
    """
    Configuration for PeakStrategy.

    fee_bps: Net fee (taker minus maker rebate) folded into quote prices
    """
    fee_bps: int = 1


@dataclass(slots=True)
class GapTracker:
    """Rising/falling state of one gap series."""
    last: Optional[int] = None
    rising: bool = False
    at_peak: bool = False

    def update(self, gap: int) -> None:
        """Record a new gap; at_peak is set when a rise just ended."""
        self.at_peak = self.rising and self.last is not None and gap < self.last
        self.rising = self.last is not None and gap > self.last
        self.last = gap


@dataclass(slots=True)
class _Touch:
    bid: int = 0
    ask: int = 0


class PeakStrategy(Strategy):
    """
    Local-extrema gap arbitrage.

    How it works:
        1. Track the tradable touch from TRADABLE snapshots (zeros ignored)
        2. On each REFERENCE snapshot, update both gap trackers
        3. On a detected peak, quote the tradable side at the fee-adjusted
           tradable touch, sized to the full remaining limit capacity

    A missing reference ask blocks selling (no hedge buy available), a
    missing reference bid blocks buying.
    """

    kind = StrategyKind.PEAK

    def __init__(self, config: Optional[PeakConfig] = None):
        self.config = config or PeakConfig()
        self.sell_gap = GapTracker()
        self.buy_gap = GapTracker()
        self._tradable = _Touch()
        self._can_sell = False
        self._can_buy = False

    def observe(self, book: OrderBookSnapshot, store: IndicatorStore) -> None:
        if book.instrument == Instrument.TRADABLE:
            if book.best_bid > 0:
                self._tradable.bid = book.best_bid
            if book.best_ask > 0:
                self._tradable.ask = book.best_ask
            return

        self._can_sell = book.best_ask > 0 and self._tradable.bid > 0
        self._can_buy = book.best_bid > 0 and self._tradable.ask > 0

        if self._can_sell:
            self.sell_gap.update(self._tradable.bid - book.best_ask)
        else:
            self.sell_gap.at_peak = False
        if self._can_buy:
            self.buy_gap.update(book.best_bid - self._tradable.ask)
        else:
            self.buy_gap.at_peak = False

    def decide(self, inp: StrategyInput) -> QuoteDecision:
        if not inp.is_reference_update:
            return QuoteDecision.none("NOT_REFERENCE")

        cfg = self.config
        decision = QuoteDecision()

        if self._can_sell and self.sell_gap.at_peak and inp.position >= -inp.position_limit:
            price = fee_adjusted_ask(self._tradable.bid, cfg.fee_bps, inp.tick_size)
            decision.ask = Quote(Side.SELL, price, inp.ask_capacity, Lifespan.GOOD_FOR_DAY)
            decision.reason_flags.add("SELL_GAP_PEAK")
            logger.debug(f"Sell gap peaked at {self.sell_gap.last}, ask {price}")

        if self._can_buy and self.buy_gap.at_peak and inp.position <= inp.position_limit:
            price = fee_adjusted_bid(self._tradable.ask, cfg.fee_bps, inp.tick_size)
            if price > 0:
                decision.bid = Quote(Side.BUY, price, inp.bid_capacity, Lifespan.GOOD_FOR_DAY)
                decision.reason_flags.add("BUY_GAP_PEAK")
                logger.debug(f"Buy gap peaked at {self.buy_gap.last}, bid {price}")

        return decision
