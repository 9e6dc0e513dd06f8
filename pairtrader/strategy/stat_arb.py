"""
Statistical arbitrage strategy.

Trades the tradable instrument against the reference when the price gap
between them strays from its rolling mean.

    gap = reference mid - tradable mid

A high gap means the tradable instrument is cheap relative to the
reference, so we buy it; a low gap means it is rich, so we sell.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..errors import InsufficientSamples
from ..indicators import IndicatorStore, mean, combined_std
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

GAP_SERIES = "gap"
REFERENCE_MID_SERIES = "reference_mid"
TRADABLE_MID_SERIES = "tradable_mid"


@dataclass(slots=True)
class StatArbConfig:
    """
    Configuration for StatArbStrategy.

    window: Samples per series; no signal until the gap window is full
    max_trade_size: Cap on one arbitrage order
    position_buffer: Headroom kept below the hard limit; arbitrage never
                     takes |position| beyond limit - buffer
    """
    window: int = 30
    max_trade_size: int = 10
    position_buffer: int = 10


def stat_arb_signal(
    gap: float,
    gap_mean: float,
    std: float,
    max_trade_size: int,
) -> Optional[tuple[Side, int]]:
    """
    Mean-reversion signal for one gap observation.

    Buys when gap > mean + std, sells when gap < mean - std. Size is the
    number of standard deviations moved, rounded up, capped at
    max_trade_size.

    Returns:
        (side, size) or None when inside the band or std is zero
    """
    if std <= 0:
        return None
    if gap > gap_mean + std:
        side = Side.BUY
    elif gap < gap_mean - std:
        side = Side.SELL
    else:
        return None
    size = math.ceil(abs(gap - gap_mean) / std)
    return side, min(size, max_trade_size)


class StatArbStrategy(Strategy):
    """
    Gap mean-reversion between the two instruments.

    How it works:
        1. Track the latest mid of each instrument
        2. On each REFERENCE snapshot, push both mids and their gap
        3. Compare the latest gap to the window mean, using the combined
           standard deviation of the two mid series as the band width
        4. Take the tradable touch with a fill-and-kill order
    """

    kind = StrategyKind.STAT_ARB

    def __init__(self, config: Optional[StatArbConfig] = None):
        self.config = config or StatArbConfig()
        self._mids: dict[Instrument, int] = {}

    def observe(self, book: OrderBookSnapshot, store: IndicatorStore) -> None:
        mid = book.mid
        if mid is None:
            return
        self._mids[book.instrument] = mid

        if book.instrument != Instrument.REFERENCE:
            return
        tradable_mid = self._mids.get(Instrument.TRADABLE)
        if tradable_mid is None:
            return

        window = self.config.window
        store.register(GAP_SERIES, window)
        store.register(REFERENCE_MID_SERIES, window)
        store.register(TRADABLE_MID_SERIES, window)
        store.push(REFERENCE_MID_SERIES, mid)
        store.push(TRADABLE_MID_SERIES, tradable_mid)
        store.push(GAP_SERIES, mid - tradable_mid)

    def decide(self, inp: StrategyInput) -> QuoteDecision:
        if not inp.is_reference_update:
            return QuoteDecision.none("NOT_REFERENCE")

        cfg = self.config
        store = inp.indicators
        gaps = store.window(GAP_SERIES)
        if len(gaps) < cfg.window:
            raise InsufficientSamples(needed=cfg.window, available=len(gaps))

        gap = gaps.latest()
        gap_mean = mean(gaps)
        std = combined_std(store.window(REFERENCE_MID_SERIES), store.window(TRADABLE_MID_SERIES))

        signal = stat_arb_signal(gap, gap_mean, std, cfg.max_trade_size)
        if signal is None:
            return QuoteDecision.none("INSIDE_BAND")
        side, size = signal

        budget = inp.position_limit - cfg.position_buffer
        if side == Side.BUY:
            size = min(size, budget - inp.position)
        else:
            size = min(size, budget + inp.position)
        if size <= 0:
            return QuoteDecision.none("BUFFER_REACHED")

        tradable = inp.tradable
        if tradable is None:
            return QuoteDecision.none("NO_TRADABLE")

        logger.debug(f"Gap {gap} vs mean {gap_mean:.1f} std {std:.1f} -> {side.name} {size}")
        if side == Side.BUY:
            if tradable.best_ask <= 0:
                return QuoteDecision.none("NO_TRADABLE_ASK")
            quote = Quote(Side.BUY, tradable.best_ask, size, Lifespan.FILL_AND_KILL)
            return QuoteDecision(bid=quote, reason_flags={"GAP_HIGH"})

        if tradable.best_bid <= 0:
            return QuoteDecision.none("NO_TRADABLE_BID")
        quote = Quote(Side.SELL, tradable.best_bid, size, Lifespan.FILL_AND_KILL)
        return QuoteDecision(ask=quote, reason_flags={"GAP_LOW"})
