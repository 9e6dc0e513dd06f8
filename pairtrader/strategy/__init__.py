"""
Strategy module for the pair-trading engine.

Strategies look at the two order books, their rolling indicator windows
and the position, and output desired quotes on the tradable instrument.
They never track orders: the engine reconciles each QuoteDecision against
the lifecycle manager.

Public API:
    Strategy: Abstract base class for strategies
    StrategyInput: Input data for strategy computation
    TickOffsetStrategy: Mirror the reference touch with a tick offset
    TrendStrategy: Cloud breakout trend follower
    StatArbStrategy: Gap mean-reversion
    PeakStrategy: Gap local-extrema arbitrage
    create_strategy: Build a strategy from a StrategyKind

Quick Start:
    from pairtrader.strategy import create_strategy
    from pairtrader.types import StrategyKind

    strategy = create_strategy(StrategyKind.TICK_OFFSET)
"""

from typing import Any, Optional

from ..types import StrategyKind

# Base classes
from .base import Strategy, StrategyInput

# Variants
from .tick_offset import TickOffsetStrategy, TickOffsetConfig
from .trend import TrendStrategy, TrendConfig
from .stat_arb import StatArbStrategy, StatArbConfig, stat_arb_signal
from .peak import PeakStrategy, PeakConfig

_STRATEGIES: dict[StrategyKind, type[Strategy]] = {
    StrategyKind.TICK_OFFSET: TickOffsetStrategy,
    StrategyKind.TREND: TrendStrategy,
    StrategyKind.STAT_ARB: StatArbStrategy,
    StrategyKind.PEAK: PeakStrategy,
}


def create_strategy(kind: StrategyKind | str, config: Optional[Any] = None) -> Strategy:
    """
    Build a strategy by kind.

    Args:
        kind: StrategyKind or its string value (e.g. "stat_arb")
        config: Variant config dataclass; None uses the variant defaults

    Raises:
        ValueError: unknown kind
    """
    kind = StrategyKind(kind)
    return _STRATEGIES[kind](config)


__all__ = [
    # Base classes
    "Strategy",
    "StrategyInput",
    # Variants
    "TickOffsetStrategy",
    "TickOffsetConfig",
    "TrendStrategy",
    "TrendConfig",
    "StatArbStrategy",
    "StatArbConfig",
    "stat_arb_signal",
    "PeakStrategy",
    "PeakConfig",
    # Factory
    "create_strategy",
]
