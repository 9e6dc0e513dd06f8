"""
Engine policies.

Risk limits and exchange price constraints shared by every strategy.
"""

from dataclasses import dataclass
from typing import Optional

from ..types import max_ask_nearest_tick, min_bid_nearest_tick

# Exchange price bounds (minimum currency units)
MINIMUM_BID = 1
MAXIMUM_ASK = 2**31 - 1


@dataclass
class EnginePolicies:
    """
    Configurable policies for the engine.

    Position limits:
        position_limit: Hard bound on |position|. Never breached by a
                        committed quote.
        soft_position_limit: When |position| exceeds this, strategies
                             switch to aggressive unwind quotes.
                             None disables unwind mode.

    Prices:
        tick_size: Price increment; all quotes are tick-aligned.
        minimum_bid / maximum_ask: Exchange price bounds, used to derive
                                   the near-guaranteed hedge prices.
    """
    position_limit: int = 100
    soft_position_limit: Optional[int] = None

    tick_size: int = 100
    minimum_bid: int = MINIMUM_BID
    maximum_ask: int = MAXIMUM_ASK

    # Maximum size of one unwind order
    unwind_size: int = 30

    @property
    def hedge_buy_price(self) -> int:
        """Worst acceptable price for a buy hedge (near-certain fill)."""
        return max_ask_nearest_tick(self.maximum_ask, self.tick_size)

    @property
    def hedge_sell_price(self) -> int:
        """Worst acceptable price for a sell hedge (near-certain fill)."""
        return min_bid_nearest_tick(self.minimum_bid, self.tick_size)
