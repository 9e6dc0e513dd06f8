"""
Gateway message codec.

Decodes inbound JSON messages into engine events and encodes outbound
commands. The transport that carries these bytes lives outside the core.

Inbound messages carry a "type" field:

    {"type": "order_book", "instrument": "REFERENCE", "sequence": 7,
     "ask_prices": [...], "ask_volumes": [...],
     "bid_prices": [...], "bid_volumes": [...]}
    {"type": "order_filled", "order_id": 3, "price": 10100, "qty": 5}
"""

import logging
from typing import Any, Callable

import orjson

from .errors import CodecError
from .types import (
    Instrument,
    Side,
    Lifespan,
    EngineEventType,
    OrderBookSnapshot,
    EngineEvent,
    OrderBookEvent,
    TradeTicksEvent,
    OrderAcceptedEvent,
    OrderStatusEvent,
    OrderFilledEvent,
    HedgeFilledEvent,
    ErrorEvent,
    Command,
    InsertOrder,
    CancelOrder,
    HedgeOrder,
    now_ms,
)

logger = logging.getLogger(__name__)


def _levels(msg: dict, key: str) -> list[int]:
    return [int(v) for v in msg.get(key) or []]


def _instrument(msg: dict) -> Instrument:
    value = msg["instrument"]
    if isinstance(value, int):
        # 0 = reference, 1 = tradable
        return Instrument.REFERENCE if value == 0 else Instrument.TRADABLE
    return Instrument[str(value).upper()]


def _order_book(msg: dict, ts: int) -> OrderBookEvent:
    book = OrderBookSnapshot(
        instrument=_instrument(msg),
        sequence=int(msg.get("sequence", 0)),
        ask_prices=_levels(msg, "ask_prices"),
        ask_volumes=_levels(msg, "ask_volumes"),
        bid_prices=_levels(msg, "bid_prices"),
        bid_volumes=_levels(msg, "bid_volumes"),
        ts_local_ms=ts,
    )
    return OrderBookEvent(event_type=EngineEventType.ORDER_BOOK, ts_local_ms=ts, book=book)


def _trade_ticks(msg: dict, ts: int) -> TradeTicksEvent:
    return TradeTicksEvent(
        event_type=EngineEventType.TRADE_TICKS,
        ts_local_ms=ts,
        instrument=_instrument(msg),
        sequence=int(msg.get("sequence", 0)),
        ask_prices=_levels(msg, "ask_prices"),
        ask_volumes=_levels(msg, "ask_volumes"),
        bid_prices=_levels(msg, "bid_prices"),
        bid_volumes=_levels(msg, "bid_volumes"),
    )


def _order_accepted(msg: dict, ts: int) -> OrderAcceptedEvent:
    return OrderAcceptedEvent(
        event_type=EngineEventType.ORDER_ACCEPTED,
        ts_local_ms=ts,
        order_id=int(msg["order_id"]),
    )


def _order_status(msg: dict, ts: int) -> OrderStatusEvent:
    return OrderStatusEvent(
        event_type=EngineEventType.ORDER_STATUS,
        ts_local_ms=ts,
        order_id=int(msg["order_id"]),
        filled_qty=int(msg.get("filled_qty", 0)),
        remaining_qty=int(msg["remaining_qty"]),
        fees=int(msg.get("fees", 0)),
    )


def _order_filled(msg: dict, ts: int) -> OrderFilledEvent:
    return OrderFilledEvent(
        event_type=EngineEventType.ORDER_FILLED,
        ts_local_ms=ts,
        order_id=int(msg["order_id"]),
        price=int(msg["price"]),
        qty=int(msg["qty"]),
    )


def _hedge_filled(msg: dict, ts: int) -> HedgeFilledEvent:
    return HedgeFilledEvent(
        event_type=EngineEventType.HEDGE_FILLED,
        ts_local_ms=ts,
        order_id=int(msg["order_id"]),
        price=int(msg["price"]),
        qty=int(msg["qty"]),
    )


def _error(msg: dict, ts: int) -> ErrorEvent:
    return ErrorEvent(
        event_type=EngineEventType.ERROR,
        ts_local_ms=ts,
        order_id=int(msg.get("order_id", 0)),
        message=str(msg.get("message", "")),
    )


_DECODERS: dict[str, Callable[[dict, int], EngineEvent]] = {
    "order_book": _order_book,
    "trade_ticks": _trade_ticks,
    "order_accepted": _order_accepted,
    "order_status": _order_status,
    "order_filled": _order_filled,
    "hedge_filled": _hedge_filled,
    "error": _error,
}


def decode_event(raw: bytes | str | dict, ts_local_ms: int | None = None) -> EngineEvent:
    """
    Decode one inbound gateway message.

    Args:
        raw: JSON bytes/str, or an already-parsed dict
        ts_local_ms: Receive timestamp (defaults to now)

    Raises:
        CodecError: malformed JSON, unknown type, or missing/invalid fields
    """
    if isinstance(raw, dict):
        msg = raw
    else:
        try:
            msg = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise CodecError(f"invalid JSON: {e}") from e

    if not isinstance(msg, dict):
        raise CodecError(f"expected object, got {type(msg).__name__}")

    msg_type = msg.get("type")
    decoder = _DECODERS.get(msg_type)
    if decoder is None:
        raise CodecError(f"unknown message type: {msg_type!r}")

    ts = ts_local_ms if ts_local_ms is not None else now_ms()
    try:
        return decoder(msg, ts)
    except (KeyError, ValueError, TypeError) as e:
        raise CodecError(f"bad {msg_type} message: {e!r}") from e


def command_to_dict(command: Command) -> dict[str, Any]:
    """Plain dict form of an outbound command."""
    if isinstance(command, InsertOrder):
        return {
            "type": "insert",
            "order_id": command.order_id,
            "side": command.side.name,
            "price": command.price,
            "size": command.size,
            "lifespan": command.lifespan.name,
        }
    if isinstance(command, CancelOrder):
        return {"type": "cancel", "order_id": command.order_id}
    if isinstance(command, HedgeOrder):
        return {
            "type": "hedge",
            "order_id": command.order_id,
            "side": command.side.name,
            "price": command.price,
            "size": command.size,
        }
    raise CodecError(f"unknown command: {type(command).__name__}")


def encode_command(command: Command) -> bytes:
    """Serialize an outbound command to JSON bytes."""
    return orjson.dumps(command_to_dict(command))


def decode_command(raw: bytes | str) -> Command:
    """
    Parse an encoded command (for transports and tests).

    Raises:
        CodecError: malformed or unknown command
    """
    try:
        msg = orjson.loads(raw)
        cmd_type = msg["type"]
        if cmd_type == "insert":
            return InsertOrder(
                order_id=int(msg["order_id"]),
                side=Side[msg["side"]],
                price=int(msg["price"]),
                size=int(msg["size"]),
                lifespan=Lifespan[msg["lifespan"]],
            )
        if cmd_type == "cancel":
            return CancelOrder(order_id=int(msg["order_id"]))
        if cmd_type == "hedge":
            return HedgeOrder(
                order_id=int(msg["order_id"]),
                side=Side[msg["side"]],
                price=int(msg["price"]),
                size=int(msg["size"]),
            )
    except (orjson.JSONDecodeError, KeyError, ValueError, TypeError) as e:
        raise CodecError(f"bad command: {e!r}") from e
    raise CodecError(f"unknown command type: {cmd_type!r}")
