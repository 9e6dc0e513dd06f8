"""Tests for gateway message decoding and command encoding."""

import orjson
import pytest

from pairtrader.codec import decode_event, encode_command, decode_command
from pairtrader.errors import CodecError
from pairtrader.types import (
    Instrument,
    Side,
    Lifespan,
    EngineEventType,
    OrderBookEvent,
    TradeTicksEvent,
    OrderAcceptedEvent,
    OrderStatusEvent,
    OrderFilledEvent,
    HedgeFilledEvent,
    ErrorEvent,
    InsertOrder,
    CancelOrder,
    HedgeOrder,
)


class TestDecodeEvent:
    """Tests for decode_event."""

    def test_order_book_from_bytes(self):
        raw = orjson.dumps({
            "type": "order_book",
            "instrument": "REFERENCE",
            "sequence": 7,
            "ask_prices": [10100, 10200],
            "ask_volumes": [5, 8],
            "bid_prices": [9900, 9800],
            "bid_volumes": [4, 2],
        })
        event = decode_event(raw, ts_local_ms=123)

        assert isinstance(event, OrderBookEvent)
        assert event.event_type == EngineEventType.ORDER_BOOK
        assert event.ts_local_ms == 123
        assert event.book.instrument == Instrument.REFERENCE
        assert event.book.sequence == 7
        assert event.book.best_ask == 10100
        assert event.book.best_bid == 9900

    def test_numeric_instrument(self):
        event = decode_event({"type": "order_book", "instrument": 1, "sequence": 1})
        assert event.book.instrument == Instrument.TRADABLE
        assert event.book.best_bid == 0

    def test_trade_ticks_from_str(self):
        event = decode_event('{"type": "trade_ticks", "instrument": "tradable", "sequence": 2, '
                             '"ask_prices": [10100], "ask_volumes": [1], "bid_prices": [], "bid_volumes": []}')
        assert isinstance(event, TradeTicksEvent)
        assert event.instrument == Instrument.TRADABLE
        assert event.ask_prices == [10100]

    @pytest.mark.parametrize("msg,cls", [
        ({"type": "order_accepted", "order_id": 3}, OrderAcceptedEvent),
        ({"type": "order_status", "order_id": 3, "filled_qty": 2, "remaining_qty": 0, "fees": -1}, OrderStatusEvent),
        ({"type": "order_filled", "order_id": 3, "price": 10100, "qty": 2}, OrderFilledEvent),
        ({"type": "hedge_filled", "order_id": 4, "price": 10050, "qty": 2}, HedgeFilledEvent),
        ({"type": "error", "order_id": 3, "message": "invalid price"}, ErrorEvent),
    ])
    def test_execution_events(self, msg, cls):
        event = decode_event(msg)
        assert isinstance(event, cls)
        assert event.order_id == msg["order_id"]

    def test_status_fields(self):
        event = decode_event({"type": "order_status", "order_id": 3, "filled_qty": 2, "remaining_qty": 0, "fees": -1})
        assert (event.filled_qty, event.remaining_qty, event.fees) == (2, 0, -1)

    def test_error_defaults_to_no_order(self):
        event = decode_event({"type": "error", "message": "market halted"})
        assert event.order_id == 0

    def test_unknown_type(self):
        with pytest.raises(CodecError):
            decode_event({"type": "heartbeat"})

    def test_malformed_json(self):
        with pytest.raises(CodecError):
            decode_event(b"{not json")

    def test_not_an_object(self):
        with pytest.raises(CodecError):
            decode_event(b"[1, 2, 3]")

    def test_missing_field(self):
        with pytest.raises(CodecError):
            decode_event({"type": "order_filled", "order_id": 3})

    def test_bad_instrument(self):
        with pytest.raises(CodecError):
            decode_event({"type": "order_book", "instrument": "FUTURES"})


class TestEncodeCommand:
    """Tests for encode_command."""

    def test_insert(self):
        raw = encode_command(InsertOrder(5, Side.SELL, 10100, 10, Lifespan.FILL_AND_KILL))
        assert orjson.loads(raw) == {
            "type": "insert",
            "order_id": 5,
            "side": "SELL",
            "price": 10100,
            "size": 10,
            "lifespan": "FILL_AND_KILL",
        }

    def test_cancel(self):
        assert orjson.loads(encode_command(CancelOrder(5))) == {"type": "cancel", "order_id": 5}

    def test_hedge_parses_back(self):
        hedge = HedgeOrder(6, Side.BUY, 2147483600, 10)
        assert decode_command(encode_command(hedge)) == hedge

    def test_unknown_command(self):
        with pytest.raises(CodecError):
            encode_command("insert")

    def test_decode_bad_command(self):
        with pytest.raises(CodecError):
            decode_command(b'{"type": "amend", "order_id": 1}')
