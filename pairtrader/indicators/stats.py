"""
Derived statistics over price windows.

All statistics are recomputed from the current window contents on each
call; nothing is cached beyond the window itself.
"""

import math

from ..errors import InsufficientSamples
from .window import PriceWindow


def mean_and_std(window: PriceWindow) -> tuple[float, float]:
    """
    Mean and sample standard deviation (n-1) in a single pass.

    Raises:
        InsufficientSamples: fewer than 2 samples
    """
    n = len(window)
    if n < 2:
        raise InsufficientSamples(needed=2, available=n)

    total = 0
    total_sq = 0
    for price in window:
        total += price
        total_sq += price * price

    mean = total / n
    # Integer sums keep the numerator exact; clamp guards float noise
    variance = (total_sq - total * total / n) / (n - 1)
    return mean, math.sqrt(max(0.0, variance))


def mean(window: PriceWindow) -> float:
    """Arithmetic mean. Raises InsufficientSamples on an empty window."""
    n = len(window)
    if n == 0:
        raise InsufficientSamples(needed=1, available=0)
    return sum(window) / n


def combined_std(window_a: PriceWindow, window_b: PriceWindow) -> float:
    """
    Standard deviation of (A - B) assuming perfect positive correlation.

    sqrt(sA^2 + sB^2 - 2*sA*sB), i.e. |sA - sB|. This is a simplifying
    approximation used to size statistical-arbitrage trades, not a
    covariance estimator.
    """
    _, std_a = mean_and_std(window_a)
    _, std_b = mean_and_std(window_b)
    return math.sqrt(max(0.0, std_a * std_a + std_b * std_b - 2 * std_a * std_b))


def extrema(window: PriceWindow, lookback: int) -> tuple[int, int]:
    """
    Highest and lowest sample over the most recent `lookback` entries.

    Raises:
        InsufficientSamples: window holds fewer than `lookback` samples
    """
    if len(window) < lookback:
        raise InsufficientSamples(needed=lookback, available=len(window))
    recent = window.recent(lookback)
    return max(recent), min(recent)
