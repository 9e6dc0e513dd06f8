"""
Event types for the engine's event-driven architecture.

All events inherit from EngineEvent base class.
"""

import threading
from dataclasses import dataclass

from .core import EngineEventType, Instrument
from .market_data import OrderBookSnapshot


@dataclass(slots=True)
class EngineEvent:
    """Base class for engine inbox events."""
    event_type: EngineEventType
    ts_local_ms: int


@dataclass(slots=True)
class OrderBookEvent(EngineEvent):
    """Top-of-book update for one instrument."""
    book: OrderBookSnapshot

    def __post_init__(self):
        self.event_type = EngineEventType.ORDER_BOOK


@dataclass(slots=True)
class TradeTicksEvent(EngineEvent):
    """
    Trade ticks for one instrument.

    Informational only - no decision impact.
    """
    instrument: Instrument
    sequence: int
    ask_prices: list[int]
    ask_volumes: list[int]
    bid_prices: list[int]
    bid_volumes: list[int]

    def __post_init__(self):
        self.event_type = EngineEventType.TRADE_TICKS


@dataclass(slots=True)
class OrderAcceptedEvent(EngineEvent):
    """Order accepted by the exchange."""
    order_id: int

    def __post_init__(self):
        self.event_type = EngineEventType.ORDER_ACCEPTED


@dataclass(slots=True)
class OrderStatusEvent(EngineEvent):
    """
    Order status update.

    remaining_qty == 0 means the order is gone from the book, whether it
    filled completely or was cancelled.
    """
    order_id: int
    filled_qty: int
    remaining_qty: int
    fees: int  # Signed; negative is a rebate

    def __post_init__(self):
        self.event_type = EngineEventType.ORDER_STATUS


@dataclass(slots=True)
class OrderFilledEvent(EngineEvent):
    """One of our tradable orders traded."""
    order_id: int
    price: int
    qty: int

    def __post_init__(self):
        self.event_type = EngineEventType.ORDER_FILLED


@dataclass(slots=True)
class HedgeFilledEvent(EngineEvent):
    """One of our hedge orders traded on the reference instrument."""
    order_id: int
    price: int
    qty: int

    def __post_init__(self):
        self.event_type = EngineEventType.HEDGE_FILLED


@dataclass(slots=True)
class ErrorEvent(EngineEvent):
    """
    Error reported by the gateway.

    order_id is 0 when the error is not related to a specific order.
    """
    order_id: int
    message: str

    def __post_init__(self):
        self.event_type = EngineEventType.ERROR


@dataclass(slots=True)
class BarrierEvent(EngineEvent):
    """
    Test synchronization barrier.

    When the engine processes this event, it sets barrier_processed.
    Tests can use this for deterministic synchronization:
    1. Send barrier event with a threading.Event
    2. Wait for barrier_processed to be set
    3. Know that all events queued BEFORE the barrier have been processed
    """
    barrier_processed: threading.Event = None

    def __post_init__(self):
        self.event_type = EngineEventType.TEST_BARRIER
