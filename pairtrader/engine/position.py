"""
Position and risk tracker.

Owns signed net inventory in the tradable instrument, enforces the hard
position limit, and hedges every fill on the reference instrument.

KEY RULES:

1. Hedge every fill, immediately
   - Ask fill -> position -= qty -> hedge BUY qty
   - Bid fill -> position += qty -> hedge SELL qty
   - Not batched, not netted across fills

2. Size quotes so the limit cannot be breached
   - Bid size <= limit - position - working bid size
   - Ask size <= limit + position - working ask size
   - Working size counts cancel-pending orders, which can still fill
   - Every tracked order filling completely still lands inside the limit

3. Unwind above the soft limit
   - |position| > soft limit -> strategies quote an aggressive
     fill-and-kill order on the reducing side instead of normal quotes
"""

import logging
from typing import Optional, TYPE_CHECKING

from ..errors import LimitBreach
from ..types import Side, Instrument, Quote, HedgeOrder
from .policies import EnginePolicies

if TYPE_CHECKING:
    from ..gateway import Gateway
    from .lifecycle import OrderLifecycleManager
    from .pnl import PnLTracker

logger = logging.getLogger(__name__)


class PositionTracker:
    """
    Signed net position with limit enforcement and fill hedging.

    Single-writer: only the engine's event path calls into this.
    """

    def __init__(
        self,
        lifecycle: "OrderLifecycleManager",
        gateway: "Gateway",
        policies: EnginePolicies,
        pnl: Optional["PnLTracker"] = None,
    ):
        self._lifecycle = lifecycle
        self._gateway = gateway
        self._policies = policies
        self._pnl = pnl

        self._position = 0

        # Hedge order id -> (side, unreported size), dropped once fully filled
        self._hedges: dict[int, tuple[Side, int]] = {}

    @property
    def position(self) -> int:
        return self._position

    @property
    def limit(self) -> int:
        return self._policies.position_limit

    @property
    def open_hedges(self) -> int:
        """Hedges sent whose size is not yet fully reported as filled."""
        return len(self._hedges)

    # -------------------------------------------------------------------------
    # LIMITS
    # -------------------------------------------------------------------------

    def working_qty(self, side: Side) -> int:
        """
        Unfilled size of every tracked order on `side`.

        Includes CANCEL_PENDING orders and the current quote, which a
        replacement cancels but which can still fill before the cancel lands.
        """
        return sum(o.remaining_qty for o in self._lifecycle.outstanding() if o.side == side)

    def max_size(self, side: Side) -> int:
        """Largest new order on `side` that keeps position within the limit if everything fills."""
        if side == Side.BUY:
            return max(0, self.limit - self._position - self.working_qty(side))
        return max(0, self.limit + self._position - self.working_qty(side))

    def check_limit(self, side: Side, size: int) -> bool:
        """False if `size` plus the working orders on `side` would breach the limit when filled."""
        exposure = size + self.working_qty(side)
        projected = self._position + exposure if side == Side.BUY else self._position - exposure
        return -self.limit <= projected <= self.limit

    def clamp(self, quote: Quote) -> Quote:
        """
        Resize a quote to fit within the limit.

        Raises:
            LimitBreach: no size on this side fits
        """
        if self.check_limit(quote.side, quote.size):
            return quote
        allowed = self.max_size(quote.side)
        if allowed <= 0:
            raise LimitBreach(
                f"{quote.side.name} {quote.size}@{quote.price} rejected at position "
                f"{self._position} (limit {self.limit})"
            )
        logger.debug(f"Resized {quote.side.name} quote {quote.size} -> {allowed} (position {self._position})")
        return quote.resized(allowed)

    def unwind_side(self) -> Optional[Side]:
        """Side that reduces position when above the soft limit, else None."""
        soft = self._policies.soft_position_limit
        if soft is None:
            return None
        if self._position > soft:
            return Side.SELL
        if self._position < -soft:
            return Side.BUY
        return None

    # -------------------------------------------------------------------------
    # FILLS
    # -------------------------------------------------------------------------

    def on_fill(self, order_id: int, price: int, qty: int, ts: int = 0) -> Optional[HedgeOrder]:
        """
        Apply a fill on one of our tradable orders and hedge it.

        Returns the hedge sent, or None if the order is not ours.
        """
        side = self._lifecycle.side_of(order_id)
        if side is None:
            logger.warning(f"Fill for unknown order {order_id}: {qty}@{price}, ignoring")
            return None

        if side == Side.SELL:
            self._position -= qty
            hedge_side = Side.BUY
            hedge_price = self._policies.hedge_buy_price
        else:
            self._position += qty
            hedge_side = Side.SELL
            hedge_price = self._policies.hedge_sell_price

        if self._pnl is not None:
            self._pnl.record_fill(ts, Instrument.TRADABLE, side, qty, price, order_id)

        hedge = HedgeOrder(
            order_id=self._lifecycle.next_order_id(),
            side=hedge_side,
            price=hedge_price,
            size=qty,
        )
        self._hedges[hedge.order_id] = (hedge_side, qty)
        self._gateway.send_hedge(hedge)

        logger.info(
            f"FILL {side.name} {qty}@{price} id={order_id} -> position={self._position} | "
            f"HEDGE {hedge_side.name} {qty}@{hedge_price} id={hedge.order_id}"
        )
        if abs(self._position) > self.limit:
            logger.error(f"Position {self._position} outside limit {self.limit} after fill {order_id}")
        return hedge

    def on_hedge_filled(self, order_id: int, price: int, qty: int, ts: int = 0) -> None:
        """Record a hedge execution on the reference instrument."""
        entry = self._hedges.get(order_id)
        if entry is None:
            logger.warning(f"Hedge fill for unknown order {order_id}: {qty}@{price}")
            return
        side, unreported = entry
        if qty >= unreported:
            del self._hedges[order_id]
        else:
            self._hedges[order_id] = (side, unreported - qty)
        if self._pnl is not None:
            self._pnl.record_fill(ts, Instrument.REFERENCE, side, qty, price, order_id)
        logger.info(f"HEDGE FILLED {side.name} {qty}@{price} id={order_id}")
