"""Tests for EngineActor event handling."""

import queue
import threading

import pytest

from pairtrader.engine import EngineActor, EnginePolicies
from pairtrader.errors import ErrorCode
from pairtrader.gateway import QueueGateway
from pairtrader.strategy import Strategy, TickOffsetStrategy, StatArbStrategy
from pairtrader.types import (
    Instrument,
    Side,
    Lifespan,
    StrategyKind,
    EngineEventType,
    OrderState,
    OrderBookSnapshot,
    OrderBookEvent,
    TradeTicksEvent,
    OrderAcceptedEvent,
    OrderStatusEvent,
    OrderFilledEvent,
    HedgeFilledEvent,
    ErrorEvent,
    BarrierEvent,
    InsertOrder,
    CancelOrder,
    HedgeOrder,
    Quote,
    QuoteDecision,
    now_ms,
)


class FullBidStrategy(Strategy):
    """Bids its whole capacity at the reference bid."""

    kind = StrategyKind.TICK_OFFSET

    def decide(self, inp):
        if not inp.is_reference_update:
            return QuoteDecision.none("NOT_REFERENCE")
        return QuoteDecision(bid=Quote(Side.BUY, inp.book.best_bid, inp.bid_capacity))


def book_event(instrument, bid, ask, seq=1) -> OrderBookEvent:
    book = OrderBookSnapshot(
        instrument=instrument,
        sequence=seq,
        ask_prices=[ask] if ask else [],
        ask_volumes=[10] if ask else [],
        bid_prices=[bid] if bid else [],
        bid_volumes=[10] if bid else [],
    )
    return OrderBookEvent(event_type=EngineEventType.ORDER_BOOK, ts_local_ms=0, book=book)


def filled(order_id, price, qty) -> OrderFilledEvent:
    return OrderFilledEvent(
        event_type=EngineEventType.ORDER_FILLED,
        ts_local_ms=0,
        order_id=order_id,
        price=price,
        qty=qty,
    )


def status(order_id, filled_qty, remaining_qty, fees=0) -> OrderStatusEvent:
    return OrderStatusEvent(
        event_type=EngineEventType.ORDER_STATUS,
        ts_local_ms=0,
        order_id=order_id,
        filled_qty=filled_qty,
        remaining_qty=remaining_qty,
        fees=fees,
    )


def wait_for_processing(event_queue: queue.Queue, timeout_s: float = 1.0) -> bool:
    """
    Wait until all events queued before this call have been processed.

    Queues a barrier event and waits for the engine to set it.
    """
    barrier_processed = threading.Event()
    event_queue.put(BarrierEvent(
        event_type=EngineEventType.TEST_BARRIER,
        ts_local_ms=now_ms(),
        barrier_processed=barrier_processed,
    ))
    return barrier_processed.wait(timeout=timeout_s)


@pytest.fixture
def gateway():
    return QueueGateway()


@pytest.fixture
def engine(gateway):
    return EngineActor(
        gateway=gateway,
        strategy=TickOffsetStrategy(),
        policies=EnginePolicies(position_limit=100, soft_position_limit=20, tick_size=100),
    )


class TestOrderBookHandling:
    """Tests for quoting on market data."""

    def test_reference_book_quotes_both_sides(self, engine, gateway):
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))

        assert gateway.drain() == [
            InsertOrder(1, Side.BUY, 9800, 50, Lifespan.GOOD_FOR_DAY),
            InsertOrder(2, Side.SELL, 10200, 50, Lifespan.GOOD_FOR_DAY),
        ]

    def test_unchanged_book_does_not_requote(self, engine, gateway):
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        gateway.drain()
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050, seq=2))
        assert gateway.drain() == []

    def test_price_change_replaces_one_side(self, engine, gateway):
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        gateway.drain()
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10150, seq=2))

        assert gateway.drain() == [
            CancelOrder(2),
            InsertOrder(3, Side.SELL, 10300, 50, Lifespan.GOOD_FOR_DAY),
        ]

    def test_tradable_book_stored_but_not_quoted(self, engine, gateway):
        engine.dispatch(book_event(Instrument.TRADABLE, 9900, 10100))
        assert gateway.drain() == []
        assert engine.state.tradable.best_bid == 9900

    def test_insufficient_samples_suppresses(self, gateway):
        engine = EngineActor(gateway=gateway, strategy=StatArbStrategy())
        engine.dispatch(book_event(Instrument.TRADABLE, 9990, 10010))
        engine.dispatch(book_event(Instrument.REFERENCE, 9990, 10010))

        assert gateway.drain() == []
        assert engine.state.decisions_suppressed == 1


class TestFillHandling:
    """Tests for fills, hedges and unwind."""

    def test_fill_updates_position_and_hedges(self, engine, gateway):
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        gateway.drain()

        engine.dispatch(filled(2, 10200, 15))

        assert engine.state.position == -15
        assert gateway.drain() == [HedgeOrder(3, Side.BUY, 2147483600, 15)]

    def test_hedge_fill_recorded(self, engine, gateway):
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        engine.dispatch(filled(1, 9800, 10))
        engine.dispatch(HedgeFilledEvent(
            event_type=EngineEventType.HEDGE_FILLED, ts_local_ms=0, order_id=3, price=9950, qty=10,
        ))

        pnl = engine.state.pnl
        assert pnl.fill_count == 2
        assert pnl.holdings[Instrument.TRADABLE] == 10
        assert pnl.holdings[Instrument.REFERENCE] == -10

    def test_unwind_above_soft_limit(self, engine, gateway):
        """Position 30 > soft limit 20: next reference book sells aggressively."""
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        engine.dispatch(filled(1, 9800, 30))
        gateway.drain()

        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050, seq=2))

        assert gateway.drain() == [
            CancelOrder(2),
            InsertOrder(4, Side.SELL, 9900, 30, Lifespan.FILL_AND_KILL),
        ]

    def test_position_stays_within_limit(self, gateway):
        """Fully filling every quote never breaches the limit."""
        engine = EngineActor(gateway=gateway, strategy=TickOffsetStrategy(), policies=EnginePolicies(position_limit=100))
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        for i in range(10):
            bid = engine.state.lifecycle.resting(Side.BUY)
            if bid is not None:
                engine.dispatch(filled(bid.order_id, bid.price, bid.remaining_qty))
                engine.dispatch(status(bid.order_id, bid.size, 0))
            assert abs(engine.state.position) <= 100
            engine.dispatch(book_event(Instrument.REFERENCE, 9950 - 100 * i, 10050 - 100 * i, seq=i + 2))
            assert abs(engine.state.position) <= 100

    def test_requote_leaves_room_for_cancel_pending_order(self, gateway):
        """Full-size bid 100 re-priced: the old order may still fill, so nothing is added."""
        engine = EngineActor(gateway=gateway, strategy=FullBidStrategy(), policies=EnginePolicies(position_limit=100))
        engine.dispatch(book_event(Instrument.REFERENCE, 9900, 10100))
        engine.dispatch(book_event(Instrument.REFERENCE, 9800, 10100, seq=2))

        assert gateway.drain() == [
            InsertOrder(1, Side.BUY, 9900, 100, Lifespan.GOOD_FOR_DAY),
            CancelOrder(1),
        ]
        assert engine.state.tracker.working_qty(Side.BUY) == 100

        # Fill racing the cancel, then the cancel lands
        engine.dispatch(filled(1, 9900, 40))
        engine.dispatch(status(1, 40, 0))
        engine.dispatch(book_event(Instrument.REFERENCE, 9800, 10100, seq=3))

        assert gateway.drain() == [
            HedgeOrder(2, Side.SELL, 100, 40),
            InsertOrder(3, Side.BUY, 9800, 60, Lifespan.GOOD_FOR_DAY),
        ]
        engine.dispatch(filled(3, 9800, 60))
        assert engine.state.position == 100


class TestStatusAndErrors:
    """Tests for status updates and gateway errors."""

    def test_accept_and_terminal_status(self, engine, gateway):
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        engine.dispatch(OrderAcceptedEvent(event_type=EngineEventType.ORDER_ACCEPTED, ts_local_ms=0, order_id=1))
        assert engine.state.lifecycle.get(1).state == OrderState.LIVE

        engine.dispatch(status(1, 0, 0, fees=3))
        assert engine.state.lifecycle.get(1) is None
        assert not engine.state.lifecycle.is_quoted(Side.BUY)
        assert engine.state.pnl.fees == 3

    def test_status_fees_are_cumulative(self, engine, gateway):
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        engine.dispatch(status(1, 20, 30, fees=4))
        engine.dispatch(status(1, 50, 0, fees=10))

        assert engine.state.pnl.fees == 10

    def test_error_cancels_order(self, gateway):
        """Resting ask at 10100 + error: order gone, side free, position unchanged."""
        engine = EngineActor(
            gateway=gateway,
            strategy=TickOffsetStrategy(),
            policies=EnginePolicies(tick_size=100),
        )
        engine.dispatch(book_event(Instrument.REFERENCE, 9850, 10000))
        ask = engine.state.lifecycle.resting(Side.SELL)
        assert ask.price == 10100

        engine.dispatch(ErrorEvent(
            event_type=EngineEventType.ERROR, ts_local_ms=0, order_id=ask.order_id, message="invalid price",
        ))

        assert engine.state.lifecycle.get(ask.order_id) is None
        assert not engine.state.lifecycle.is_quoted(Side.SELL)
        assert engine.state.position == 0
        assert engine.state.last_error.order_id == ask.order_id
        assert engine.state.last_error.code == ErrorCode.INVALID_PRICE

    def test_error_without_order(self, engine, gateway):
        engine.dispatch(ErrorEvent(event_type=EngineEventType.ERROR, ts_local_ms=0, order_id=0, message="halted"))
        assert gateway.drain() == []
        assert engine.state.last_error.code == ErrorCode.MARKET_CLOSED

    def test_trade_ticks_ignored(self, engine, gateway):
        engine.dispatch(TradeTicksEvent(
            event_type=EngineEventType.TRADE_TICKS,
            ts_local_ms=0,
            instrument=Instrument.REFERENCE,
            sequence=1,
            ask_prices=[10000],
            ask_volumes=[5],
            bid_prices=[],
            bid_volumes=[],
        ))
        assert gateway.drain() == []


class TestEngineThread:
    """Tests for the threaded event loop."""

    def test_processes_queued_events(self, engine, gateway):
        engine.start()
        try:
            engine.submit(book_event(Instrument.REFERENCE, 9950, 10050))
            assert wait_for_processing(engine.event_queue), "Barrier timed out"
        finally:
            engine.stop()

        assert len(gateway.drain()) == 2
        assert engine.state.events_processed == 2

    def test_trade_log_written(self, gateway, tmp_path):
        engine = EngineActor(gateway=gateway, strategy=TickOffsetStrategy(), trade_log_dir=str(tmp_path))
        engine.dispatch(book_event(Instrument.REFERENCE, 9950, 10050))
        engine.dispatch(filled(1, 9800, 10))
        engine.stop()

        files = list(tmp_path.glob("trades_*.jsonl"))
        assert len(files) == 1
        assert '"kind": "fill"' in files[0].read_text()
