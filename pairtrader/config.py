"""
Engine configuration.

Loads settings from environment variables with sensible defaults.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Optional

from .engine.policies import EnginePolicies, MINIMUM_BID, MAXIMUM_ASK
from .strategy import (
    TickOffsetConfig,
    TrendConfig,
    StatArbConfig,
    PeakConfig,
)
from .types import StrategyKind


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "" or value.strip().lower() == "none":
        return None
    return int(value)


@dataclass
class EngineConfig:
    """Engine configuration."""

    # Strategy
    strategy: str = StrategyKind.TICK_OFFSET.value

    # Limits
    position_limit: int = 100
    soft_position_limit: Optional[int] = None
    unwind_size: int = 30

    # Exchange prices
    tick_size: int = 100
    minimum_bid: int = MINIMUM_BID
    maximum_ask: int = MAXIMUM_ASK

    # Tick-offset
    lot_total: int = 100
    offset_ticks: int = 1
    fee_bps: int = 0
    profit_margin: int = 0

    # Trend
    trend_entry_size: int = 100

    # Statistical arbitrage
    stat_arb_window: int = 30
    max_trade_size: int = 10
    position_buffer: int = 10

    # Peak detection
    peak_fee_bps: int = 1

    # Logging
    log_level: str = "INFO"
    trade_log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load config from environment variables."""
        return cls(
            # Strategy
            strategy=os.getenv("PT_STRATEGY", StrategyKind.TICK_OFFSET.value),

            # Limits
            position_limit=int(os.getenv("PT_POSITION_LIMIT", "100")),
            soft_position_limit=_optional_int(os.getenv("PT_SOFT_POSITION_LIMIT")),
            unwind_size=int(os.getenv("PT_UNWIND_SIZE", "30")),

            # Exchange prices
            tick_size=int(os.getenv("PT_TICK_SIZE", "100")),
            minimum_bid=int(os.getenv("PT_MINIMUM_BID", str(MINIMUM_BID))),
            maximum_ask=int(os.getenv("PT_MAXIMUM_ASK", str(MAXIMUM_ASK))),

            # Tick-offset
            lot_total=int(os.getenv("PT_LOT_TOTAL", "100")),
            offset_ticks=int(os.getenv("PT_OFFSET_TICKS", "1")),
            fee_bps=int(os.getenv("PT_FEE_BPS", "0")),
            profit_margin=int(os.getenv("PT_PROFIT_MARGIN", "0")),

            # Trend
            trend_entry_size=int(os.getenv("PT_TREND_ENTRY_SIZE", "100")),

            # Statistical arbitrage
            stat_arb_window=int(os.getenv("PT_STAT_ARB_WINDOW", "30")),
            max_trade_size=int(os.getenv("PT_MAX_TRADE_SIZE", "10")),
            position_buffer=int(os.getenv("PT_POSITION_BUFFER", "10")),

            # Peak detection
            peak_fee_bps=int(os.getenv("PT_PEAK_FEE_BPS", "1")),

            # Logging
            log_level=os.getenv("PT_LOG_LEVEL", "INFO"),
            trade_log_dir=os.getenv("PT_TRADE_LOG_DIR") or None,
        )

    @classmethod
    def from_env_file(cls, path: str) -> "EngineConfig":
        """
        Load config from .env file, then environment variables.

        Environment variables override file values.
        """
        if os.path.exists(path):
            with open(path) as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    if "=" in line:
                        key, value = line.split("=", 1)
                        key = key.strip()
                        value = value.strip().strip("'\"")
                        # Only set if not already in environment
                        if key not in os.environ:
                            os.environ[key] = value

        return cls.from_env()

    @property
    def strategy_kind(self) -> StrategyKind:
        return StrategyKind(self.strategy)

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.strategy not in {k.value for k in StrategyKind}:
            errors.append(f"PT_STRATEGY must be one of {[k.value for k in StrategyKind]}")

        if self.position_limit <= 0:
            errors.append("PT_POSITION_LIMIT must be positive")

        if self.soft_position_limit is not None and not 0 <= self.soft_position_limit < self.position_limit:
            errors.append("PT_SOFT_POSITION_LIMIT must be in [0, PT_POSITION_LIMIT)")

        if self.unwind_size <= 0:
            errors.append("PT_UNWIND_SIZE must be positive")

        if self.tick_size <= 0:
            errors.append("PT_TICK_SIZE must be positive")

        if self.minimum_bid <= 0 or self.maximum_ask <= self.minimum_bid:
            errors.append("PT_MINIMUM_BID must be positive and below PT_MAXIMUM_ASK")

        if self.lot_total <= 0:
            errors.append("PT_LOT_TOTAL must be positive")

        if self.offset_ticks < 0:
            errors.append("PT_OFFSET_TICKS must be non-negative")

        if not 0 <= self.fee_bps < 10_000 or not 0 <= self.peak_fee_bps < 10_000:
            errors.append("Fee bps must be in [0, 10000)")

        if self.stat_arb_window < 2:
            errors.append("PT_STAT_ARB_WINDOW must be at least 2")

        if self.max_trade_size <= 0:
            errors.append("PT_MAX_TRADE_SIZE must be positive")

        if not 0 <= self.position_buffer < self.position_limit:
            errors.append("PT_POSITION_BUFFER must be in [0, PT_POSITION_LIMIT)")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append("PT_LOG_LEVEL must be a logging level name")

        return errors

    def policies(self) -> EnginePolicies:
        """Engine policies derived from this config."""
        return EnginePolicies(
            position_limit=self.position_limit,
            soft_position_limit=self.soft_position_limit,
            tick_size=self.tick_size,
            minimum_bid=self.minimum_bid,
            maximum_ask=self.maximum_ask,
            unwind_size=self.unwind_size,
        )

    def strategy_config(self) -> Any:
        """Config dataclass for the selected strategy variant."""
        kind = self.strategy_kind
        if kind == StrategyKind.TICK_OFFSET:
            return TickOffsetConfig(
                offset_ticks=self.offset_ticks,
                fee_bps=self.fee_bps,
                profit_margin=self.profit_margin,
                lot_total=self.lot_total,
            )
        if kind == StrategyKind.TREND:
            return TrendConfig(entry_size=self.trend_entry_size)
        if kind == StrategyKind.STAT_ARB:
            return StatArbConfig(
                window=self.stat_arb_window,
                max_trade_size=self.max_trade_size,
                position_buffer=self.position_buffer,
            )
        return PeakConfig(fee_bps=self.peak_fee_bps)


def configure_logging(config: EngineConfig) -> None:
    """Configure root logging for an embedding process."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-5s | %(name)-20s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
