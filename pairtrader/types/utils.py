"""
Utility functions for timestamps and fixed-point price arithmetic.

These are pure functions with no dependencies on other types.

Prices are integers in minimum currency units. Fees are integer basis
points. Rounding direction is always chosen so that the quote stays on the
conservative side of the market:
    - ask/sell prices round UP to the tick
    - bid/buy prices round DOWN to the tick
"""

from time import monotonic_ns, time

BPS_DENOMINATOR = 10_000


def now_ms() -> int:
    """Get current monotonic timestamp in milliseconds."""
    return monotonic_ns() // 1_000_000


def wall_ms() -> int:
    """Get current wall clock timestamp in milliseconds."""
    return int(time() * 1000)


def ceil_to_tick(price: int, tick_size: int) -> int:
    """Round price up to the nearest multiple of tick_size."""
    return -(-price // tick_size) * tick_size


def floor_to_tick(price: int, tick_size: int) -> int:
    """Round price down to the nearest multiple of tick_size."""
    return price // tick_size * tick_size


def fee_adjusted_ask(price: int, fee_bps: int, tick_size: int) -> int:
    """
    Mark an ask price up by fee_bps and round up to the tick.

    Computed exactly: ceil(price * (10000 + bps) / 10000), then ceil to tick.
    """
    numer = price * (BPS_DENOMINATOR + fee_bps)
    raw = -(-numer // BPS_DENOMINATOR)
    return ceil_to_tick(raw, tick_size)


def fee_adjusted_bid(price: int, fee_bps: int, tick_size: int) -> int:
    """
    Mark a bid price down by fee_bps and round down to the tick.

    Computed exactly: floor(price * (10000 - bps) / 10000), then floor to tick.
    """
    numer = price * (BPS_DENOMINATOR - fee_bps)
    raw = numer // BPS_DENOMINATOR
    return floor_to_tick(raw, tick_size)


def max_ask_nearest_tick(maximum_ask: int, tick_size: int) -> int:
    """Highest tick-aligned price not above the exchange maximum ask."""
    return maximum_ask // tick_size * tick_size


def min_bid_nearest_tick(minimum_bid: int, tick_size: int) -> int:
    """Lowest tick-aligned price strictly above the exchange minimum bid."""
    return (minimum_bid + tick_size) // tick_size * tick_size
