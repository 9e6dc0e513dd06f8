"""
Core enums - the fundamental vocabulary of the engine.

These are the basic building blocks used throughout the codebase.
"""

from enum import Enum, auto


class Instrument(Enum):
    """Tradable instruments seen by the engine."""
    REFERENCE = auto()  # Liquid instrument driving prices (and hedges)
    TRADABLE = auto()   # Illiquid instrument we quote and hold inventory in


class Side(Enum):
    """Order side. BUY is the bid side, SELL is the ask side."""
    BUY = auto()
    SELL = auto()

    @property
    def opposite(self) -> "Side":
        return Side.SELL if self is Side.BUY else Side.BUY


class Lifespan(Enum):
    """Order time-in-force."""
    GOOD_FOR_DAY = auto()   # Rests until cancelled
    FILL_AND_KILL = auto()  # Cancelled automatically if not matched immediately


class OrderState(Enum):
    """Resting order lifecycle state."""
    PENDING_INSERT = auto()
    LIVE = auto()
    PARTIALLY_FILLED = auto()
    CANCEL_PENDING = auto()  # Cancel sent, terminal status not yet received
    FILLED = auto()
    CANCELLED = auto()


class StrategyKind(Enum):
    """Available quoting strategy variants."""
    TICK_OFFSET = "tick_offset"
    TREND = "trend"
    STAT_ARB = "stat_arb"
    PEAK = "peak"


class EngineEventType(Enum):
    """Event types processed by the engine."""
    ORDER_BOOK = auto()
    TRADE_TICKS = auto()
    ORDER_ACCEPTED = auto()
    ORDER_STATUS = auto()
    ORDER_FILLED = auto()
    HEDGE_FILLED = auto()
    ERROR = auto()
    TEST_BARRIER = auto()  # For deterministic test synchronization


class CommandType(Enum):
    """Outbound command types."""
    INSERT = auto()
    CANCEL = auto()
    HEDGE = auto()
