"""Application tests for order number allocation and placement retries."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.order import placement
from ordering.order.ledger import OrderLedger
from ordering.order.order import Order
from ordering.order.placement import MAX_ALLOCATION_ATTEMPTS, PlaceOrder
from ordering.sequence.sequence import SequenceAllocator, sequence_allocator
from protean import current_domain
from protean.exceptions import ValidationError
from shared.errors import DuplicateOrderNumber, SequenceContentionError

ITEMS = [{"item_name": "Burger", "unit_price": 10.0, "quantity": 1}]


def _place():
    return placement.place(ITEMS, 10.0)


@pytest.fixture()
def no_backoff(monkeypatch):
    monkeypatch.setattr(placement.time, "sleep", lambda _: None)


class TestSequenceAllocator:
    def test_first_value_is_one(self):
        assert sequence_allocator.current() == 0
        assert sequence_allocator.next() == 1
        assert sequence_allocator.current() == 1

    def test_values_strictly_increase(self):
        values = [sequence_allocator.next() for _ in range(5)]
        assert values == [1, 2, 3, 4, 5]

    def test_named_sequences_are_independent(self):
        kitchen = SequenceAllocator(name="kitchen")
        sequence_allocator.next()
        sequence_allocator.next()
        assert kitchen.next() == 1

    def test_advance_to(self):
        sequence_allocator.advance_to(40)
        assert sequence_allocator.next() == 41

    def test_concurrent_allocation_yields_every_number_once(self):
        def _allocate(_):
            with ordering.domain_context():
                return sequence_allocator.next()

        with ThreadPoolExecutor(max_workers=8) as pool:
            values = list(pool.map(_allocate, range(50)))

        assert sorted(values) == list(range(1, 51))


class TestConcurrentPlacement:
    def test_concurrent_placements_get_every_number_once(self):
        def _place_cart(_):
            with ordering.domain_context():
                cart = Cart.create()
                cart.add_item("Pizza", 12.99)
                return OrderLedger().place_order(cart)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(_place_cart, range(40)))

        assert all(result.success for result in results), [r.cause for r in results if r.failed]
        assert sorted(r.value.order_number for r in results) == list(range(1, 41))
        assert current_domain.repository_for(Order)._dao.query.all().total == 40
        assert sequence_allocator.current() == 40


class TestPlacementRetries:
    def test_collision_advances_past_stored_orders(self, no_backoff):
        repo = current_domain.repository_for(Order)
        for number in (1, 2, 3):
            repo.add(Order.place(order_number=number, items_data=ITEMS, total=10.0))

        assert _place() == 4
        assert sequence_allocator.current() == 4

    def test_contention_after_max_attempts(self, no_backoff, monkeypatch):
        repo = current_domain.repository_for(Order)
        repo.add(Order.place(order_number=1, items_data=ITEMS, total=10.0))
        monkeypatch.setattr(placement.sequence_allocator, "next", lambda: 1)

        with pytest.raises(SequenceContentionError) as exc:
            _place()
        assert exc.value.attempts == MAX_ALLOCATION_ATTEMPTS

    def test_backoff_grows_exponentially(self, monkeypatch):
        delays = []
        monkeypatch.setattr(placement.time, "sleep", delays.append)
        repo = current_domain.repository_for(Order)
        repo.add(Order.place(order_number=1, items_data=ITEMS, total=10.0))
        monkeypatch.setattr(placement.sequence_allocator, "next", lambda: 1)

        with pytest.raises(SequenceContentionError):
            _place()
        assert delays == [placement.SEQUENCE_BACKOFF_SECONDS * 2**n for n in range(MAX_ALLOCATION_ATTEMPTS)]

    def test_empty_items_do_not_consume_a_number(self):
        with pytest.raises(ValidationError):
            placement.place([], 0)
        assert sequence_allocator.current() == 0


class TestPlaceOrderCommand:
    def test_handler_stores_the_given_number(self):
        number = current_domain.process(
            PlaceOrder(order_number=7, items=json.dumps(ITEMS), total=10.0), asynchronous=False
        )
        assert number == 7
        assert current_domain.repository_for(Order).get(7).status == "pending"

    def test_handler_rejects_a_taken_number(self):
        repo = current_domain.repository_for(Order)
        repo.add(Order.place(order_number=3, items_data=ITEMS, total=10.0))

        with pytest.raises(DuplicateOrderNumber):
            current_domain.process(PlaceOrder(order_number=3, items=json.dumps(ITEMS), total=10.0), asynchronous=False)
