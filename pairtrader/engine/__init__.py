"""
Engine package for the pair-trading decision core.

This package provides:
- One resting quote per side on the tradable instrument
- Hard position limit with immediate hedging of every fill
- Replace-on-price-change reconciliation of strategy decisions

Usage:
    from pairtrader.engine import EngineActor, EnginePolicies
    from pairtrader.strategy import create_strategy

    engine = EngineActor(
        gateway=gateway,
        strategy=create_strategy("tick_offset"),
        policies=EnginePolicies(position_limit=100, tick_size=100),
    )
    engine.start()

The engine uses a unified event stream - market data, acks, fills and
errors flow through a single queue for deterministic ordering.
"""

# Main actor
from .actor import EngineActor

# State types
from .state import EngineState
from .lifecycle import OrderLifecycleManager
from .position import PositionTracker

# Reconciler
from .reconciler import reconcile, EffectBatch

# Policies
from .policies import EnginePolicies, MINIMUM_BID, MAXIMUM_ASK

# PnL and logging
from .pnl import PnLTracker, FillRecord
from .trade_log import TradeLogger

__all__ = [
    # Main actor
    "EngineActor",
    # State
    "EngineState",
    "OrderLifecycleManager",
    "PositionTracker",
    # Reconciler
    "reconcile",
    "EffectBatch",
    # Policies
    "EnginePolicies",
    "MINIMUM_BID",
    "MAXIMUM_ASK",
    # PnL and logging
    "PnLTracker",
    "FillRecord",
    "TradeLogger",
]
