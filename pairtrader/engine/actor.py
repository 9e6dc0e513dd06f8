"""
Engine Actor - the main event processing component.

Single-writer component that owns all trading state.
Processes events from a unified event queue deterministically.

KEY DESIGN PRINCIPLES:

1. Single event stream
   - Market data, acks, statuses, fills and errors go through one queue
   - Deterministic ordering of events

2. Strategy/Reconciler separation
   - Strategy: (books, indicators, position) -> QuoteDecision
   - Reconciler: (decision, resting orders, limits) -> Effects
   - Actor: execute effects via the lifecycle manager

3. Hedge every fill
   - Position tracker hedges synchronously inside the fill handler

4. Errors never escape a handler
   - Gateway errors terminate the order, never retried
   - Duplicate quotes, limit breaches and short windows suppress the
     decision for this event only
"""

import logging
import queue
import threading
from typing import Optional, TYPE_CHECKING

from ..errors import GatewayError, InvalidQuote, InsufficientSamples, normalize_error
from ..indicators import IndicatorStore
from ..types import (
    OrderBookEvent,
    TradeTicksEvent,
    OrderAcceptedEvent,
    OrderStatusEvent,
    OrderFilledEvent,
    HedgeFilledEvent,
    ErrorEvent,
    BarrierEvent,
    EngineEvent,
    QuoteDecision,
    now_ms,
)
from ..strategy import Strategy, StrategyInput
from .lifecycle import OrderLifecycleManager
from .pnl import PnLTracker
from .policies import EnginePolicies
from .position import PositionTracker
from .reconciler import reconcile
from .state import EngineState
from .trade_log import TradeLogger

if TYPE_CHECKING:
    from ..gateway import Gateway

logger = logging.getLogger(__name__)


class EngineActor:
    """
    Main engine actor - single-writer for all trading state.

    Processes events from the unified event queue:
    - OrderBookEvent: run the strategy and reconcile quotes
    - TradeTicksEvent: informational
    - OrderAcceptedEvent / OrderStatusEvent: order lifecycle
    - OrderFilledEvent: position update + hedge
    - HedgeFilledEvent: hedge accounting
    - ErrorEvent: implicit cancellation

    Events can also be handled synchronously with dispatch(), which is
    what the run loop does for each queued event.
    """

    def __init__(
        self,
        gateway: "Gateway",
        strategy: Strategy,
        policies: Optional[EnginePolicies] = None,
        event_queue: Optional[queue.Queue] = None,
        trade_log_dir: Optional[str] = None,
    ):
        """
        Initialize engine.

        Args:
            gateway: Outbound command sink
            strategy: Quoting strategy variant
            policies: Limits and price bounds
            event_queue: Unified inbound queue (created if None)
            trade_log_dir: Directory for the JSONL trade log (None disables it)
        """
        self._gateway = gateway
        self._strategy = strategy
        self._policies = policies or EnginePolicies()
        self._event_queue = event_queue if event_queue is not None else queue.Queue()

        pnl = PnLTracker()
        lifecycle = OrderLifecycleManager(gateway)
        tracker = PositionTracker(lifecycle, gateway, self._policies, pnl)
        self._state = EngineState(
            lifecycle=lifecycle,
            tracker=tracker,
            store=IndicatorStore(),
            pnl=pnl,
        )

        # Trade logger
        self._trade_logger = TradeLogger(trade_log_dir) if trade_log_dir else None

        # Threading
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    @property
    def policies(self) -> EnginePolicies:
        return self._policies

    @property
    def event_queue(self) -> queue.Queue:
        return self._event_queue

    def submit(self, event: EngineEvent) -> None:
        """Queue an event for the engine thread."""
        self._event_queue.put(event)

    def start(self) -> None:
        """Start engine thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("EngineActor already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="Engine-Actor",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"EngineActor started (strategy={self._strategy.kind.value})")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop engine thread."""
        logger.info("EngineActor stopping...")
        self._stop_event.set()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("EngineActor did not stop in time")

        if self._trade_logger:
            self._trade_logger.close()

        logger.info(
            f"EngineActor stopped: position={self._state.position} "
            f"fills={self._state.pnl.fill_count} events={self._state.events_processed}"
        )

    def _run_loop(self) -> None:
        """
        Main event processing loop - SINGLE INPUT STREAM.

        All events come through the unified event queue.
        """
        while not self._stop_event.is_set():
            try:
                event = self._event_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                self.dispatch(event)
            except Exception as e:
                logger.error(f"Engine loop error: {e}", exc_info=True)

    def dispatch(self, event: EngineEvent) -> None:
        """Route event to appropriate handler."""
        self._state.events_processed += 1

        if isinstance(event, OrderBookEvent):
            self._on_order_book(event)
        elif isinstance(event, OrderFilledEvent):
            self._on_order_filled(event)
        elif isinstance(event, OrderStatusEvent):
            self._on_order_status(event)
        elif isinstance(event, OrderAcceptedEvent):
            self._state.lifecycle.on_order_accepted(event.order_id)
        elif isinstance(event, HedgeFilledEvent):
            self._on_hedge_filled(event)
        elif isinstance(event, ErrorEvent):
            self._on_error(event)
        elif isinstance(event, TradeTicksEvent):
            logger.debug(
                f"Trade ticks {event.instrument.name} seq={event.sequence} "
                f"asks={event.ask_prices[:1]} bids={event.bid_prices[:1]}"
            )
        elif isinstance(event, BarrierEvent):
            self._on_test_barrier(event)
        else:
            logger.warning(f"Unknown event type: {type(event)}")

    # -------------------------------------------------------------------------
    # MARKET DATA
    # -------------------------------------------------------------------------

    def _on_order_book(self, event: OrderBookEvent) -> None:
        """Observe the book, decide, and reconcile resting quotes."""
        state = self._state
        book = event.book
        state.books[book.instrument] = book

        self._strategy.observe(book, state.store)

        inp = self._build_input(event)
        try:
            if inp.unwind_side is not None:
                decision = self._strategy.unwind(inp)
            else:
                decision = self._strategy.decide(inp)
        except InsufficientSamples as e:
            state.decisions_suppressed += 1
            logger.debug(f"Decision suppressed: {e}")
            return

        self._apply(decision)

        if event.ts_local_ms > 0:
            latency_ms = now_ms() - event.ts_local_ms
            logger.debug(f"[LATENCY] book_to_quote: {latency_ms}ms (seq={book.sequence})")

    def _build_input(self, event: OrderBookEvent) -> StrategyInput:
        state = self._state
        policies = self._policies
        return StrategyInput(
            book=event.book,
            reference=state.reference,
            tradable=state.tradable,
            indicators=state.store,
            position=state.position,
            position_limit=policies.position_limit,
            tick_size=policies.tick_size,
            aggressive_buy_price=policies.hedge_buy_price,
            aggressive_sell_price=policies.hedge_sell_price,
            unwind_side=state.tracker.unwind_side(),
            unwind_size=policies.unwind_size,
        )

    def _apply(self, decision: QuoteDecision) -> None:
        """Reconcile a decision and execute its effects."""
        lifecycle = self._state.lifecycle
        effects = reconcile(decision, lifecycle, self._state.tracker)

        for reason in effects.suppressed:
            logger.info(f"Quote suppressed: {reason}")

        if effects.is_empty:
            return

        # Execute cancels first
        for side in effects.cancels:
            lifecycle.cancel(side)

        for quote in effects.places:
            try:
                lifecycle.place_quote(quote.side, quote.price, quote.size, quote.lifespan)
            except InvalidQuote as e:
                logger.debug(f"Quote skipped: {e}")

        if decision.reason_flags:
            logger.debug(f"Decision applied: {sorted(decision.reason_flags)}")

    # -------------------------------------------------------------------------
    # EXECUTION EVENTS
    # -------------------------------------------------------------------------

    def _on_order_filled(self, event: OrderFilledEvent) -> None:
        """Attribute the fill, update position, and hedge."""
        state = self._state
        state.lifecycle.on_fill(event.order_id, event.qty)
        hedge = state.tracker.on_fill(event.order_id, event.price, event.qty, event.ts_local_ms)
        if hedge is None:
            return

        if self._trade_logger:
            self._trade_logger.log_fill(
                ts=event.ts_local_ms,
                side=hedge.side.opposite.name,
                size=event.qty,
                price=event.price,
                order_id=event.order_id,
                position=state.position,
                hedge_order_id=hedge.order_id,
                hedge_price=hedge.price,
            )

    def _on_order_status(self, event: OrderStatusEvent) -> None:
        lifecycle = self._state.lifecycle
        tracked = lifecycle.get(event.order_id)
        prior_fees = tracked.fees if tracked is not None else 0

        order = lifecycle.on_order_status(
            event.order_id,
            event.filled_qty,
            event.remaining_qty,
            event.fees,
        )
        if order is not None and order.fees != prior_fees:
            self._state.pnl.record_fees(order.fees - prior_fees)

    def _on_hedge_filled(self, event: HedgeFilledEvent) -> None:
        self._state.tracker.on_hedge_filled(event.order_id, event.price, event.qty, event.ts_local_ms)
        if self._trade_logger:
            self._trade_logger.log_hedge_fill(
                ts=event.ts_local_ms,
                size=event.qty,
                price=event.price,
                order_id=event.order_id,
            )

    def _on_error(self, event: ErrorEvent) -> None:
        """Gateway error: treat as implicit cancellation, never retry."""
        error = GatewayError(event.order_id, event.message, normalize_error(event.message))
        terminated = self._state.lifecycle.on_error(event.order_id, error.code.value)
        if terminated:
            logger.warning(f"Order rejected, {error}")
        else:
            logger.warning(f"Gateway error, {error}")
        self._state.last_error = error

    def _on_test_barrier(self, event: BarrierEvent) -> None:
        """
        Handle test barrier event.

        Sets the barrier_processed event to signal the test that
        all events queued before this barrier have been processed.
        """
        if event.barrier_processed:
            event.barrier_processed.set()
