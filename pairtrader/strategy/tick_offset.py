"""
Tick-offset mirroring strategy.

Quotes the tradable instrument just outside the reference instrument's
touch, optionally marked up for fees and a profit margin.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..types import (
    Side,
    Lifespan,
    StrategyKind,
    Quote,
    QuoteDecision,
    fee_adjusted_ask,
    fee_adjusted_bid,
)
from .base import Strategy, StrategyInput

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TickOffsetConfig:
    """
    Configuration for TickOffsetStrategy.

    Pricing:
        offset_ticks: Ticks outside the reference touch
        fee_bps: Fee markup applied before rounding (0 = plain mirror)
        profit_margin: Extra price units added outside the fee-adjusted touch

    Sizing:
        lot_total: Bid size + ask size. The ask gets (limit + position) // 2
                   and the bid gets the rest, so inventory leans the split.
    """
    offset_ticks: int = 1
    fee_bps: int = 0
    profit_margin: int = 0
    lot_total: int = 100


class TickOffsetStrategy(Strategy):
    """
    Mirror the reference book onto the tradable one.

    How it works:
        1. On each REFERENCE snapshot, take the best bid and ask
        2. Ask = ceil_tick(best_ask * (1 + fee)) + offset + margin
        3. Bid = floor_tick(best_bid * (1 - fee)) - offset - margin
        4. Split lot_total between the sides according to position

    Re-quoting only happens on price change (engine replacement rule), so
    a size change alone never churns the queue.
    """

    kind = StrategyKind.TICK_OFFSET

    def __init__(self, config: Optional[TickOffsetConfig] = None):
        self.config = config or TickOffsetConfig()

    def decide(self, inp: StrategyInput) -> QuoteDecision:
        if not inp.is_reference_update:
            return QuoteDecision.none("NOT_REFERENCE")

        cfg = self.config
        book = inp.book
        tick = inp.tick_size
        offset = cfg.offset_ticks * tick + cfg.profit_margin

        ask_sz, bid_sz = self._split_sizes(inp)

        ask = None
        if book.best_ask > 0:
            ask_px = fee_adjusted_ask(book.best_ask, cfg.fee_bps, tick) + offset
            ask = Quote(Side.SELL, ask_px, ask_sz, Lifespan.GOOD_FOR_DAY)

        bid = None
        if book.best_bid > 0:
            bid_px = fee_adjusted_bid(book.best_bid, cfg.fee_bps, tick) - offset
            if bid_px > 0:
                bid = Quote(Side.BUY, bid_px, bid_sz, Lifespan.GOOD_FOR_DAY)

        return QuoteDecision(bid=bid, ask=ask)

    def _split_sizes(self, inp: StrategyInput) -> tuple[int, int]:
        """(ask_size, bid_size) summing to lot_total, each within limit capacity."""
        ask_sz = max(0, (inp.position_limit + inp.position) // 2)
        bid_sz = max(0, self.config.lot_total - ask_sz)
        return min(ask_sz, inp.ask_capacity), min(bid_sz, inp.bid_capacity)
