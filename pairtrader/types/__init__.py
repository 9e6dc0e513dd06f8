"""
Engine types.

This module re-exports all types.
You can import directly from here or from the specific submodules.

Example:
    from pairtrader.types import Instrument, Side, Quote

    # More explicit
    from pairtrader.types.core import Instrument, Side
    from pairtrader.types.utils import ceil_to_tick
"""

# Core enums
from .core import (
    Instrument,
    Side,
    Lifespan,
    OrderState,
    StrategyKind,
    EngineEventType,
    CommandType,
)

# Utility functions
from .utils import (
    now_ms,
    wall_ms,
    ceil_to_tick,
    floor_to_tick,
    fee_adjusted_ask,
    fee_adjusted_bid,
    max_ask_nearest_tick,
    min_bid_nearest_tick,
)

# Market data
from .market_data import OrderBookSnapshot

# Quotes and orders
from .orders import (
    Quote,
    QuoteDecision,
    RestingOrder,
)

# Commands
from .commands import (
    Command,
    InsertOrder,
    CancelOrder,
    HedgeOrder,
)

# Event types
from .events import (
    EngineEvent,
    OrderBookEvent,
    TradeTicksEvent,
    OrderAcceptedEvent,
    OrderStatusEvent,
    OrderFilledEvent,
    HedgeFilledEvent,
    ErrorEvent,
    BarrierEvent,
)

__all__ = [
    # Core enums
    "Instrument",
    "Side",
    "Lifespan",
    "OrderState",
    "StrategyKind",
    "EngineEventType",
    "CommandType",
    # Utility functions
    "now_ms",
    "wall_ms",
    "ceil_to_tick",
    "floor_to_tick",
    "fee_adjusted_ask",
    "fee_adjusted_bid",
    "max_ask_nearest_tick",
    "min_bid_nearest_tick",
    # Market data
    "OrderBookSnapshot",
    # Quotes and orders
    "Quote",
    "QuoteDecision",
    "RestingOrder",
    # Commands
    "Command",
    "InsertOrder",
    "CancelOrder",
    "HedgeOrder",
    # Events
    "EngineEvent",
    "OrderBookEvent",
    "TradeTicksEvent",
    "OrderAcceptedEvent",
    "OrderStatusEvent",
    "OrderFilledEvent",
    "HedgeFilledEvent",
    "ErrorEvent",
    "BarrierEvent",
]
