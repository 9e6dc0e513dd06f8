"""
Engine state.

Everything the engine thread owns, bundled so tests and diagnostics can
inspect it in one place.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..errors import GatewayError
from ..indicators import IndicatorStore
from ..types import Instrument, OrderBookSnapshot
from .lifecycle import OrderLifecycleManager
from .pnl import PnLTracker
from .position import PositionTracker


@dataclass
class EngineState:
    """
    Complete engine state.

    Single-writer: mutated only on the engine thread.
    """
    lifecycle: OrderLifecycleManager
    tracker: PositionTracker
    store: IndicatorStore = field(default_factory=IndicatorStore)
    pnl: PnLTracker = field(default_factory=PnLTracker)

    # Latest snapshot per instrument
    books: dict[Instrument, OrderBookSnapshot] = field(default_factory=dict)

    # Counters
    events_processed: int = 0
    decisions_suppressed: int = 0

    # Most recent gateway error, for diagnostics
    last_error: Optional[GatewayError] = None

    @property
    def reference(self) -> Optional[OrderBookSnapshot]:
        return self.books.get(Instrument.REFERENCE)

    @property
    def tradable(self) -> Optional[OrderBookSnapshot]:
        return self.books.get(Instrument.TRADABLE)

    @property
    def position(self) -> int:
        return self.tracker.position
