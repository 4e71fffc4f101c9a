"""Tests for the Order aggregate."""

import json

import pytest
from ordering.order.events import OrderPlaced, OrderStatusChanged
from ordering.order.order import ORDER_STATUSES, Order, OrderStatus
from protean.exceptions import ValidationError

ITEMS = [
    {"item_name": "Pizza", "unit_price": 12.99, "quantity": 1},
    {"item_name": "Salade", "unit_price": 8.99, "quantity": 1},
]


def _make_order(order_number=1):
    return Order.place(order_number=order_number, items_data=ITEMS, total=21.98)


class TestOrderPlacement:
    def test_placed_order_is_pending(self):
        order = _make_order()
        assert order.order_number == 1
        assert order.status == OrderStatus.PENDING.value
        assert order.total == 21.98
        assert order.created_at is not None
        assert order.created_at == order.updated_at

    def test_order_lines_are_copied(self):
        order = _make_order()
        assert order.line_items() == ITEMS

    def test_order_number_must_be_positive(self):
        with pytest.raises(ValidationError):
            _make_order(0)

    def test_placement_raises_event(self):
        order = _make_order()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_number == 1
        assert event.item_count == 2
        assert json.loads(event.items) == ITEMS


class TestOrderStatus:
    @pytest.mark.parametrize("status", ORDER_STATUSES)
    def test_every_status_is_accepted(self, status):
        order = _make_order()
        order.change_status(status)
        assert order.status == status

    def test_any_status_may_follow_any_other(self):
        order = _make_order()
        order.change_status("delivered")
        order.change_status("preparing")
        assert order.status == "preparing"

    def test_unknown_status_is_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError) as exc:
            order.change_status("shipped")
        assert "status" in exc.value.messages
        assert order.status == "pending"

    def test_status_change_raises_event(self):
        order = _make_order()
        order.change_status("confirmed")
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "pending"
        assert event.new_status == "confirmed"

    def test_status_change_touches_updated_at(self):
        order = _make_order()
        before = order.updated_at
        order.change_status("ready")
        assert order.updated_at >= before
