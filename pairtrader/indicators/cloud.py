"""
Cloud (Ichimoku-style) trend lines.

Every line is a midpoint of the high/low over a lookback:
    conversion line   9 samples
    base line        26 samples
    leading span B   52 samples
    leading span A   (conversion + base) / 2

The cloud is the band between span A and span B.
Integer arithmetic throughout (floor division), matching price units.
"""

from dataclasses import dataclass

from .stats import extrema
from .window import PriceWindow

CONVERSION_LOOKBACK = 9
BASE_LOOKBACK = 26
SPAN_B_LOOKBACK = 52


def midpoint(window: PriceWindow, lookback: int) -> int:
    """(high + low) // 2 over the most recent `lookback` samples."""
    high, low = extrema(window, lookback)
    return (high + low) // 2


def conversion_line(window: PriceWindow) -> int:
    return midpoint(window, CONVERSION_LOOKBACK)


def base_line(window: PriceWindow) -> int:
    return midpoint(window, BASE_LOOKBACK)


def leading_span_a(conversion: int, base: int) -> int:
    return (conversion + base) // 2


def leading_span_b(window: PriceWindow) -> int:
    return midpoint(window, SPAN_B_LOOKBACK)


@dataclass(frozen=True, slots=True)
class CloudLevels:
    """All cloud lines for one window."""
    conversion: int
    base: int
    span_a: int
    span_b: int

    @property
    def top(self) -> int:
        return max(self.span_a, self.span_b)

    @property
    def bottom(self) -> int:
        return min(self.span_a, self.span_b)

    @property
    def bullish(self) -> bool:
        """Conversion line above base line."""
        return self.conversion > self.base

    @property
    def bearish(self) -> bool:
        """Conversion line below base line."""
        return self.conversion < self.base


def cloud_levels(window: PriceWindow) -> CloudLevels:
    """
    Compute all cloud lines for a window.

    Raises:
        InsufficientSamples: window holds fewer than 52 samples
    """
    conversion = conversion_line(window)
    base = base_line(window)
    return CloudLevels(
        conversion=conversion,
        base=base,
        span_a=leading_span_a(conversion, base),
        span_b=leading_span_b(window),
    )
