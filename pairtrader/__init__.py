"""
pairtrader - Two-instrument quoting and hedging engine.

Turns market-data and execution events for a liquid REFERENCE instrument
and an illiquid TRADABLE one into a bounded set of resting quotes and
hedge orders, within a hard inventory limit.
"""

__version__ = "0.1.0"

# Core types
from .types import (
    # Enums
    Instrument,
    Side,
    Lifespan,
    OrderState,
    StrategyKind,
    # Market data
    OrderBookSnapshot,
    # Quotes and orders
    Quote,
    QuoteDecision,
    RestingOrder,
    # Commands
    InsertOrder,
    CancelOrder,
    HedgeOrder,
    # Events
    OrderBookEvent,
    TradeTicksEvent,
    OrderAcceptedEvent,
    OrderStatusEvent,
    OrderFilledEvent,
    HedgeFilledEvent,
    ErrorEvent,
    BarrierEvent,
)

# Errors
from .errors import (
    PairTraderError,
    InvalidQuote,
    InsufficientSamples,
    LimitBreach,
    GatewayError,
    CodecError,
    ErrorCode,
    normalize_error,
)

# Components
from .config import EngineConfig, configure_logging
from .gateway import Gateway, QueueGateway
from .codec import decode_event, encode_command
from .engine import EngineActor, EnginePolicies
from .strategy import Strategy, StrategyInput, create_strategy

__all__ = [
    "__version__",
    # Enums
    "Instrument",
    "Side",
    "Lifespan",
    "OrderState",
    "StrategyKind",
    # Market data
    "OrderBookSnapshot",
    # Quotes and orders
    "Quote",
    "QuoteDecision",
    "RestingOrder",
    # Commands
    "InsertOrder",
    "CancelOrder",
    "HedgeOrder",
    # Events
    "OrderBookEvent",
    "TradeTicksEvent",
    "OrderAcceptedEvent",
    "OrderStatusEvent",
    "OrderFilledEvent",
    "HedgeFilledEvent",
    "ErrorEvent",
    "BarrierEvent",
    # Errors
    "PairTraderError",
    "InvalidQuote",
    "InsufficientSamples",
    "LimitBreach",
    "GatewayError",
    "CodecError",
    "ErrorCode",
    "normalize_error",
    # Components
    "EngineConfig",
    "configure_logging",
    "Gateway",
    "QueueGateway",
    "decode_event",
    "encode_command",
    "EngineActor",
    "EnginePolicies",
    "Strategy",
    "StrategyInput",
    "create_strategy",
]
