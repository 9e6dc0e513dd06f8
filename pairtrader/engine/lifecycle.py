"""
Order lifecycle manager.

Owns the mapping from client order ids to RestingOrders and enforces the
one-quote-per-side invariant. It is the single source of truth for "is
this side currently quoted".

State machine:

    PENDING_INSERT --accepted--> LIVE --fill--> PARTIALLY_FILLED
          |                       |                  |
          +-------- cancel sent --+------------------+--> CANCEL_PENDING
          |                       |                  |          |
          +--------------- status(remaining == 0) ---+----------+--> FILLED | CANCELLED

Only PENDING_INSERT / LIVE / PARTIALLY_FILLED hold a side slot. A
CANCEL_PENDING order has lost its slot but stays tracked so that fills
racing the cancel are still attributed to the right side.
"""

import logging
from collections import deque
from typing import Optional, TYPE_CHECKING

from ..errors import InvalidQuote
from ..types import (
    Side,
    Lifespan,
    OrderState,
    RestingOrder,
    InsertOrder,
    CancelOrder,
)

if TYPE_CHECKING:
    from ..gateway import Gateway

logger = logging.getLogger(__name__)

# Terminal orders whose side stays resolvable for late fills
TERMINAL_RETENTION = 1000


class OrderLifecycleManager:
    """
    Tracks every order the engine inserts on the tradable instrument.

    Single-writer: only the engine's event path calls into this.
    """

    def __init__(self, gateway: "Gateway", terminal_retention: int = TERMINAL_RETENTION):
        self._gateway = gateway
        self._terminal_retention = terminal_retention

        # Non-terminal orders (slot holders and cancel-pending)
        self._orders: dict[int, RestingOrder] = {}

        # Slot holder per side (absent = side free)
        self._slots: dict[Side, int] = {}

        # Side per issued id, for late fill attribution. Terminal ids are
        # kept for the last `terminal_retention` terminations only.
        self._sides: dict[int, Side] = {}
        self._retired: deque[int] = deque()

        # Client order id counter; 0 is reserved for "no order"
        self._last_order_id = 0

    # -------------------------------------------------------------------------
    # QUERIES
    # -------------------------------------------------------------------------

    def next_order_id(self) -> int:
        """Allocate the next client order id (shared with hedge orders)."""
        self._last_order_id += 1
        return self._last_order_id

    @property
    def last_order_id(self) -> int:
        return self._last_order_id

    def resting(self, side: Side) -> Optional[RestingOrder]:
        """The slot-holding order on a side, if any."""
        order_id = self._slots.get(side)
        if order_id is None:
            return None
        return self._orders.get(order_id)

    def resting_price(self, side: Side) -> Optional[int]:
        order = self.resting(side)
        return order.price if order else None

    def is_quoted(self, side: Side) -> bool:
        return side in self._slots

    def get(self, order_id: int) -> Optional[RestingOrder]:
        """A non-terminal order by id."""
        return self._orders.get(order_id)

    def side_of(self, order_id: int) -> Optional[Side]:
        """Side of a live order, or of one among the most recent terminal orders."""
        return self._sides.get(order_id)

    def outstanding(self) -> list[RestingOrder]:
        """All non-terminal orders, oldest first."""
        return [self._orders[oid] for oid in sorted(self._orders)]

    def slot_holders(self, side: Side) -> list[RestingOrder]:
        """All orders on a side currently holding a slot (0 or 1)."""
        return [o for o in self._orders.values() if o.side == side and o.holds_slot]

    # -------------------------------------------------------------------------
    # COMMANDS
    # -------------------------------------------------------------------------

    def place_quote(
        self,
        side: Side,
        price: int,
        size: int,
        lifespan: Lifespan = Lifespan.GOOD_FOR_DAY,
    ) -> int:
        """
        Quote a side, replacing any existing quote on it.

        Emits one cancel (if replacing) and one insert.

        Raises:
            InvalidQuote: same price already resting on this side, or
                          non-positive price/size

        Returns:
            The new order id
        """
        if price <= 0 or size <= 0:
            raise InvalidQuote(f"degenerate {side.name} quote {size}@{price}")

        existing = self.resting(side)
        if existing is not None and existing.price == price:
            raise InvalidQuote(
                f"{side.name} already resting at {price} (order {existing.order_id})"
            )

        if existing is not None:
            self._send_cancel(existing)

        order_id = self.next_order_id()
        order = RestingOrder(
            order_id=order_id,
            side=side,
            price=price,
            size=size,
            lifespan=lifespan,
        )
        self._orders[order_id] = order
        self._slots[side] = order_id
        self._sides[order_id] = side

        self._gateway.send_insert(InsertOrder(
            order_id=order_id,
            side=side,
            price=price,
            size=size,
            lifespan=lifespan,
        ))
        logger.debug(f"Inserted {side.name} {size}@{price} {lifespan.name} id={order_id}")
        return order_id

    def cancel(self, side: Side) -> Optional[int]:
        """Cancel the quote on a side. Returns the cancelled id, if any."""
        existing = self.resting(side)
        if existing is None:
            return None
        self._send_cancel(existing)
        return existing.order_id

    def cancel_all(self) -> list[int]:
        return [oid for oid in (self.cancel(Side.BUY), self.cancel(Side.SELL)) if oid]

    def _send_cancel(self, order: RestingOrder) -> None:
        order.state = OrderState.CANCEL_PENDING
        if self._slots.get(order.side) == order.order_id:
            del self._slots[order.side]
        self._gateway.send_cancel(CancelOrder(order_id=order.order_id))
        logger.debug(f"Cancel sent for {order.side.name} id={order.order_id}")

    # -------------------------------------------------------------------------
    # EXCHANGE EVENTS
    # -------------------------------------------------------------------------

    def on_order_accepted(self, order_id: int) -> None:
        """PENDING_INSERT -> LIVE. No-op if already cancelled or unknown."""
        order = self._orders.get(order_id)
        if order is None:
            logger.debug(f"Accept for untracked order {order_id}")
            return
        if order.state == OrderState.PENDING_INSERT:
            order.state = OrderState.LIVE

    def on_fill(self, order_id: int, qty: int) -> Optional[Side]:
        """
        Record a fill against an order.

        Returns the side the order was on, or None for unknown ids.
        """
        side = self._sides.get(order_id)
        order = self._orders.get(order_id)
        if order is not None:
            order.filled_qty += qty
            if order.holds_slot and order.remaining_qty > 0:
                order.state = OrderState.PARTIALLY_FILLED
        return side

    def on_order_status(
        self,
        order_id: int,
        filled_qty: int,
        remaining_qty: int,
        fees: int,
    ) -> Optional[RestingOrder]:
        """
        Apply an order status update.

        remaining_qty == 0 is terminal regardless of cause (fill or cancel):
        the order leaves the outstanding set and frees its side.

        Returns the order, or None if untracked.
        """
        order = self._orders.get(order_id)
        if order is None:
            logger.debug(f"Status for untracked order {order_id}")
            return None

        # Status quantities and fees are cumulative per order
        order.fees = fees
        if filled_qty > order.filled_qty:
            order.filled_qty = filled_qty

        if remaining_qty == 0:
            order.state = OrderState.FILLED if order.filled_qty >= order.size else OrderState.CANCELLED
            del self._orders[order_id]
            if self._slots.get(order.side) == order_id:
                del self._slots[order.side]
            self._retire(order_id)
            logger.debug(f"Order {order_id} terminal: {order.state.name} filled={order.filled_qty}")
            return order

        if order.state == OrderState.PENDING_INSERT:
            order.state = OrderState.LIVE
        if order.holds_slot and order.filled_qty > 0:
            order.state = OrderState.PARTIALLY_FILLED
        return order

    def _retire(self, order_id: int) -> None:
        self._retired.append(order_id)
        while len(self._retired) > self._terminal_retention:
            self._sides.pop(self._retired.popleft(), None)

    def on_error(self, order_id: int, reason: str) -> bool:
        """
        Treat a gateway error on a tracked order as implicit cancellation.

        Returns True if an order was terminated.
        """
        if order_id == 0 or order_id not in self._orders:
            return False
        logger.info(f"Error on order {order_id} ({reason}), treating as terminal")
        self.on_order_status(order_id, 0, 0, self._orders[order_id].fees)
        return True
