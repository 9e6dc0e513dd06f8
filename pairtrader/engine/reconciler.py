"""
Reconciler for the engine.

Compares a strategy's QuoteDecision with the resting orders held by the
lifecycle manager and produces effects (cancel/place) to reach it.

REPLACEMENT RULE (all strategies):
   - No desired quote on a side: DO NOTHING
   - Desired price == resting price: DO NOTHING (no cancel/replace churn)
   - Desired price differs: REPLACE (place_quote cancels the old one)
   - Desired price differs but size is zero: CANCEL only
   - Desired quote does not fit the position limit: resize it; if no size
     fits, cancel the stale resting order and place nothing
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import LimitBreach
from ..types import Side, Quote, QuoteDecision

if TYPE_CHECKING:
    from .lifecycle import OrderLifecycleManager
    from .position import PositionTracker

logger = logging.getLogger(__name__)


@dataclass
class EffectBatch:
    """
    Effects for one decision.

    Cancels execute before places.
    """
    cancels: list[Side] = field(default_factory=list)
    places: list[Quote] = field(default_factory=list)
    suppressed: list[str] = field(default_factory=list)  # Reasons, for logging

    @property
    def is_empty(self) -> bool:
        """True if no effects in this batch."""
        return not self.cancels and not self.places


def reconcile(
    decision: QuoteDecision,
    lifecycle: "OrderLifecycleManager",
    tracker: "PositionTracker",
) -> EffectBatch:
    """
    Turn a decision into cancel/place effects.

    Args:
        decision: Desired quotes from the strategy
        lifecycle: Current resting orders
        tracker: Position limit checks

    Returns:
        EffectBatch with cancel/place effects
    """
    batch = EffectBatch()
    for side in (Side.BUY, Side.SELL):
        desired = decision.for_side(side)
        if desired is None:
            continue

        resting_price = lifecycle.resting_price(side)
        if resting_price is not None and resting_price == desired.price:
            continue

        if desired.size <= 0:
            # Nothing to quote at the new price; withdraw the stale one
            if resting_price is not None:
                batch.cancels.append(side)
            continue

        try:
            quote = tracker.clamp(desired)
        except LimitBreach as e:
            batch.suppressed.append(str(e))
            if resting_price is not None:
                # Stale price on a side we may no longer add to
                batch.cancels.append(side)
            continue

        batch.places.append(quote)
    return batch
