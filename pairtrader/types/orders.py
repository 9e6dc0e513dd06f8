"""
Quote and order types.

Quote is what a strategy wants; RestingOrder is what the lifecycle manager
tracks on the exchange.
"""

from dataclasses import dataclass, field, replace

from .core import Side, Lifespan, OrderState


@dataclass(frozen=True, slots=True)
class Quote:
    """
    A desired order on the tradable instrument.

    Immutable: superseded quotes are cancelled and replaced, never edited.
    """
    side: Side
    price: int
    size: int
    lifespan: Lifespan = Lifespan.GOOD_FOR_DAY

    def resized(self, size: int) -> "Quote":
        return replace(self, size=size)


@dataclass(slots=True)
class QuoteDecision:
    """
    Output of a strategy for one event.

    None on a side means "leave that side alone".
    """
    bid: Quote | None = None
    ask: Quote | None = None
    reason_flags: set = field(default_factory=set)

    @classmethod
    def none(cls, reason: str = "") -> "QuoteDecision":
        """Decision with no action on either side."""
        return cls(reason_flags={reason} if reason else set())

    @property
    def is_empty(self) -> bool:
        return self.bid is None and self.ask is None

    def for_side(self, side: Side) -> Quote | None:
        return self.bid if side == Side.BUY else self.ask


SLOT_HOLDING_STATES = (
    OrderState.PENDING_INSERT,
    OrderState.LIVE,
    OrderState.PARTIALLY_FILLED,
)

TERMINAL_STATES = (
    OrderState.FILLED,
    OrderState.CANCELLED,
)


@dataclass(slots=True)
class RestingOrder:
    """
    An order we sent on the tradable instrument.

    Owned exclusively by the OrderLifecycleManager.
    """
    order_id: int
    side: Side
    price: int
    size: int
    lifespan: Lifespan
    state: OrderState = OrderState.PENDING_INSERT
    filled_qty: int = 0
    fees: int = 0

    @property
    def remaining_qty(self) -> int:
        """Remaining unfilled size."""
        return max(0, self.size - self.filled_qty)

    @property
    def holds_slot(self) -> bool:
        """True while this order is the live quote on its side."""
        return self.state in SLOT_HOLDING_STATES

    @property
    def is_terminal(self) -> bool:
        """Check if order is in a terminal state."""
        return self.state in TERMINAL_STATES
