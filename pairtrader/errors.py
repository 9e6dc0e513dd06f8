"""
Engine errors.

Exception hierarchy for conditions the core absorbs locally, plus
normalized error codes for gateway-reported errors.

None of these are fatal: the engine catches them at the event boundary,
logs them, and carries on with the next event.
"""

from enum import Enum
from typing import Optional


class PairTraderError(Exception):
    """Base class for engine errors."""


class InvalidQuote(PairTraderError):
    """Duplicate or degenerate quote request. Recovered as a no-op."""


class InsufficientSamples(PairTraderError):
    """Indicator requested before its window holds enough samples."""

    def __init__(self, needed: int, available: int):
        super().__init__(f"need {needed} samples, have {available}")
        self.needed = needed
        self.available = available


class LimitBreach(PairTraderError):
    """Candidate quote would push position outside the hard limit."""


class GatewayError(PairTraderError):
    """
    Exchange rejected an order.

    Surfaced as an implicit terminal status for the order; never retried.
    """

    def __init__(self, order_id: int, message: str, code: "ErrorCode"):
        super().__init__(f"order {order_id}: {message} ({code.value})")
        self.order_id = order_id
        self.message = message
        self.code = code


class CodecError(PairTraderError):
    """Inbound gateway message could not be decoded."""


class ErrorCode(Enum):
    """Normalized error codes for gateway errors."""
    ORDER_NOT_FOUND = "order_not_found"
    INVALID_PRICE = "invalid_price"
    INVALID_VOLUME = "invalid_volume"
    POSITION_LIMIT = "position_limit"
    RATE_LIMIT = "rate_limit"
    MARKET_CLOSED = "market_closed"
    UNKNOWN = "unknown"


def normalize_error(error_msg: Optional[str] = None) -> ErrorCode:
    """
    Map raw gateway error strings to normalized codes.

    Args:
        error_msg: Raw error message from the gateway

    Returns:
        Normalized ErrorCode
    """
    msg = (error_msg or "").lower()

    if any(kw in msg for kw in ("not found", "no such order", "unknown order")):
        return ErrorCode.ORDER_NOT_FOUND

    # Rate limiting before generic "limit" matching
    if any(kw in msg for kw in ("rate", "too many", "throttle")):
        return ErrorCode.RATE_LIMIT

    if any(kw in msg for kw in ("position limit", "exceeds limit", "limit")):
        return ErrorCode.POSITION_LIMIT

    if any(kw in msg for kw in ("invalid price", "price out of range", "tick size")):
        return ErrorCode.INVALID_PRICE

    if any(kw in msg for kw in ("invalid volume", "volume", "size")):
        return ErrorCode.INVALID_VOLUME

    if any(kw in msg for kw in ("closed", "not trading", "halted")):
        return ErrorCode.MARKET_CLOSED

    return ErrorCode.UNKNOWN
