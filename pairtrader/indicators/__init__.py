"""
Rolling indicators.

Fixed-capacity price windows and the statistics derived from them.
"""

from .window import PriceWindow
from .store import IndicatorStore
from .stats import mean, mean_and_std, combined_std, extrema
from .cloud import (
    CloudLevels,
    cloud_levels,
    conversion_line,
    base_line,
    leading_span_a,
    leading_span_b,
    CONVERSION_LOOKBACK,
    BASE_LOOKBACK,
    SPAN_B_LOOKBACK,
)

__all__ = [
    "PriceWindow",
    "IndicatorStore",
    "mean",
    "mean_and_std",
    "combined_std",
    "extrema",
    "CloudLevels",
    "cloud_levels",
    "conversion_line",
    "base_line",
    "leading_span_a",
    "leading_span_b",
    "CONVERSION_LOOKBACK",
    "BASE_LOOKBACK",
    "SPAN_B_LOOKBACK",
]
