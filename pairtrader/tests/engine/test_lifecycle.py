"""Tests for the order lifecycle manager."""

import pytest
from unittest.mock import Mock

from pairtrader.errors import InvalidQuote
from pairtrader.engine import OrderLifecycleManager
from pairtrader.gateway import Gateway
from pairtrader.types import (
    Side,
    Lifespan,
    OrderState,
    InsertOrder,
    CancelOrder,
)


@pytest.fixture
def gateway():
    return Mock(spec=Gateway)


@pytest.fixture
def lifecycle(gateway):
    return OrderLifecycleManager(gateway)


class TestPlaceQuote:
    """Tests for place_quote."""

    def test_first_quote_inserts(self, lifecycle, gateway):
        order_id = lifecycle.place_quote(Side.SELL, 10100, 10)

        assert order_id == 1
        gateway.send_insert.assert_called_once_with(
            InsertOrder(order_id=1, side=Side.SELL, price=10100, size=10, lifespan=Lifespan.GOOD_FOR_DAY)
        )
        gateway.send_cancel.assert_not_called()
        assert lifecycle.resting(Side.SELL).state == OrderState.PENDING_INSERT
        assert lifecycle.is_quoted(Side.SELL)
        assert not lifecycle.is_quoted(Side.BUY)

    def test_same_price_is_rejected(self, lifecycle, gateway):
        """Placing the same price twice sends exactly one insert."""
        lifecycle.place_quote(Side.BUY, 9900, 10)
        with pytest.raises(InvalidQuote):
            lifecycle.place_quote(Side.BUY, 9900, 20)

        assert gateway.send_insert.call_count == 1

    def test_new_price_replaces(self, lifecycle, gateway):
        """Replacing emits one cancel then one insert."""
        first = lifecycle.place_quote(Side.BUY, 9900, 10)
        second = lifecycle.place_quote(Side.BUY, 9800, 10)

        assert second > first
        gateway.send_cancel.assert_called_once_with(CancelOrder(order_id=first))
        assert gateway.send_insert.call_count == 2
        assert lifecycle.get(first).state == OrderState.CANCEL_PENDING
        assert lifecycle.resting(Side.BUY).order_id == second

    def test_one_slot_holder_per_side(self, lifecycle):
        for price in (9900, 9800, 9700, 9600):
            lifecycle.place_quote(Side.BUY, price, 10)
            assert len(lifecycle.slot_holders(Side.BUY)) == 1
        assert len(lifecycle.outstanding()) == 4

    @pytest.mark.parametrize("price,size", [(0, 10), (-100, 10), (9900, 0)])
    def test_degenerate_quote(self, lifecycle, gateway, price, size):
        with pytest.raises(InvalidQuote):
            lifecycle.place_quote(Side.BUY, price, size)
        gateway.send_insert.assert_not_called()

    def test_ids_strictly_increase(self, lifecycle):
        ids = [lifecycle.place_quote(Side.SELL, 10100 + i * 100, 5) for i in range(5)]
        ids.append(lifecycle.next_order_id())
        assert ids == sorted(set(ids))
        assert ids[0] == 1


class TestCancel:
    """Tests for cancel / cancel_all."""

    def test_cancel_frees_side(self, lifecycle, gateway):
        order_id = lifecycle.place_quote(Side.SELL, 10100, 10)
        assert lifecycle.cancel(Side.SELL) == order_id

        gateway.send_cancel.assert_called_once_with(CancelOrder(order_id=order_id))
        assert not lifecycle.is_quoted(Side.SELL)
        assert lifecycle.get(order_id).state == OrderState.CANCEL_PENDING

    def test_cancel_empty_side(self, lifecycle, gateway):
        assert lifecycle.cancel(Side.BUY) is None
        gateway.send_cancel.assert_not_called()

    def test_cancel_all(self, lifecycle):
        bid = lifecycle.place_quote(Side.BUY, 9900, 10)
        ask = lifecycle.place_quote(Side.SELL, 10100, 10)
        assert sorted(lifecycle.cancel_all()) == [bid, ask]


class TestExchangeEvents:
    """Tests for accept / fill / status / error handling."""

    def test_accept_moves_to_live(self, lifecycle):
        order_id = lifecycle.place_quote(Side.BUY, 9900, 10)
        lifecycle.on_order_accepted(order_id)
        assert lifecycle.get(order_id).state == OrderState.LIVE

    def test_accept_after_cancel_is_noop(self, lifecycle):
        order_id = lifecycle.place_quote(Side.BUY, 9900, 10)
        lifecycle.cancel(Side.BUY)
        lifecycle.on_order_accepted(order_id)
        assert lifecycle.get(order_id).state == OrderState.CANCEL_PENDING

    def test_partial_fill(self, lifecycle):
        order_id = lifecycle.place_quote(Side.SELL, 10100, 10)
        lifecycle.on_order_accepted(order_id)

        assert lifecycle.on_fill(order_id, 4) == Side.SELL
        order = lifecycle.get(order_id)
        assert order.state == OrderState.PARTIALLY_FILLED
        assert order.remaining_qty == 6

    def test_status_remaining_zero_after_full_fill(self, lifecycle):
        order_id = lifecycle.place_quote(Side.SELL, 10100, 10)
        lifecycle.on_fill(order_id, 10)
        order = lifecycle.on_order_status(order_id, 10, 0, 2)

        assert order.state == OrderState.FILLED
        assert order.fees == 2
        assert lifecycle.get(order_id) is None
        assert not lifecycle.is_quoted(Side.SELL)

    def test_status_fees_are_cumulative(self, lifecycle):
        order_id = lifecycle.place_quote(Side.SELL, 10100, 10)
        lifecycle.on_order_status(order_id, 4, 6, 4)
        assert lifecycle.get(order_id).fees == 4

        order = lifecycle.on_order_status(order_id, 10, 0, 10)
        assert order.fees == 10
        assert order.filled_qty == 10

    def test_status_remaining_zero_without_fill_is_cancel(self, lifecycle):
        order_id = lifecycle.place_quote(Side.BUY, 9900, 10)
        order = lifecycle.on_order_status(order_id, 3, 0, 0)
        assert order.state == OrderState.CANCELLED
        assert order.filled_qty == 3

    def test_status_with_remaining_keeps_order(self, lifecycle):
        order_id = lifecycle.place_quote(Side.BUY, 9900, 10)
        lifecycle.on_order_status(order_id, 0, 10, 0)
        assert lifecycle.get(order_id).state == OrderState.LIVE
        assert lifecycle.is_quoted(Side.BUY)

    def test_fill_racing_cancel_is_attributed(self, lifecycle):
        """A fill on a cancel-pending order still resolves to its side."""
        old = lifecycle.place_quote(Side.BUY, 9900, 10)
        lifecycle.place_quote(Side.BUY, 9800, 10)

        assert lifecycle.on_fill(old, 5) == Side.BUY
        assert lifecycle.get(old).state == OrderState.CANCEL_PENDING

    def test_side_of_terminal_order(self, lifecycle):
        order_id = lifecycle.place_quote(Side.SELL, 10100, 10)
        lifecycle.on_order_status(order_id, 0, 0, 0)
        assert lifecycle.get(order_id) is None
        assert lifecycle.side_of(order_id) == Side.SELL
        assert lifecycle.side_of(999) is None

    def test_terminal_sides_are_bounded(self, gateway):
        lifecycle = OrderLifecycleManager(gateway, terminal_retention=2)
        ids = [lifecycle.place_quote(Side.BUY, 9900 - 100 * i, 10) for i in range(3)]
        for order_id in ids:
            lifecycle.on_order_status(order_id, 0, 0, 0)

        assert lifecycle.side_of(ids[0]) is None
        assert lifecycle.side_of(ids[1]) == Side.BUY
        assert lifecycle.side_of(ids[2]) == Side.BUY

    def test_live_order_side_survives_retention(self, gateway):
        lifecycle = OrderLifecycleManager(gateway, terminal_retention=1)
        live = lifecycle.place_quote(Side.SELL, 10100, 10)
        for price in (9900, 9800):
            order_id = lifecycle.place_quote(Side.BUY, price, 10)
            lifecycle.on_order_status(order_id, 0, 0, 0)

        assert lifecycle.side_of(live) == Side.SELL

    def test_stale_status_for_replaced_order_keeps_new_slot(self, lifecycle):
        old = lifecycle.place_quote(Side.BUY, 9900, 10)
        new = lifecycle.place_quote(Side.BUY, 9800, 10)
        lifecycle.on_order_status(old, 0, 0, 0)
        assert lifecycle.resting(Side.BUY).order_id == new

    def test_error_terminates_order(self, lifecycle):
        """Ask resting at 10100, gateway error -> CANCELLED and side free."""
        order_id = lifecycle.place_quote(Side.SELL, 10100, 10)
        lifecycle.on_order_accepted(order_id)

        assert lifecycle.on_error(order_id, "invalid_price") is True
        assert lifecycle.get(order_id) is None
        assert not lifecycle.is_quoted(Side.SELL)
        assert lifecycle.outstanding() == []

    def test_error_keeps_recorded_fees(self, lifecycle):
        order_id = lifecycle.place_quote(Side.BUY, 9900, 10)
        lifecycle.on_order_status(order_id, 2, 8, 3)
        order = lifecycle.get(order_id)
        lifecycle.on_error(order_id, "invalid_volume")

        assert lifecycle.get(order_id) is None
        assert order.state == OrderState.CANCELLED
        assert order.fees == 3

    def test_error_unknown_or_zero_id(self, lifecycle):
        assert lifecycle.on_error(0, "unknown") is False
        assert lifecycle.on_error(42, "unknown") is False
