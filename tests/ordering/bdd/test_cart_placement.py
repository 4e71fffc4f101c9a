"""BDD tests for cart accumulation and order placement."""

import pytest
from ordering.cart.cart import Cart, round_total
from ordering.order.ledger import OrderLedger
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from shared.results import ErrorKind

scenarios("features/cart_placement.feature")


@pytest.fixture()
def error():
    return {"exc": None}


@pytest.fixture()
def placement():
    return {"result": None}


# ---------------------------------------------------------------------------
# Given / When steps
# ---------------------------------------------------------------------------
@given("a new cart", target_fixture="cart")
def new_cart():
    return Cart.create()


@given(parsers.cfparse('"{name}" priced {price:f} is added'))
@when(parsers.cfparse('"{name}" priced {price:f} is added'))
def add_item(cart, name, price, error):
    try:
        cart.add_item(name, price)
    except ValidationError as exc:
        error["exc"] = exc


@given(parsers.cfparse("a {percent:d} percent promotion is applied"))
@when(parsers.cfparse("a {percent:d} percent promotion is applied"))
def apply_promotion(cart, percent):
    cart.apply_promotion(percent)


@given("the cart is placed")
@when("the cart is placed")
def place_cart(cart, placement):
    placement["result"] = OrderLedger().place_order(cart)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart total is {total:f}"))
def cart_total_is(cart, total):
    assert cart.total == total


@then(parsers.cfparse("the cart total rounds to {total:f}"))
def cart_total_rounds_to(cart, total):
    assert round_total(cart.total) == total


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_lines(cart, count):
    assert len(cart.lines or []) == count


@then(parsers.cfparse("the order number is {number:d}"))
def order_number_is(placement, number):
    assert placement["result"].success
    assert placement["result"].value.order_number == number


@then(parsers.cfparse("the order total is {total:f}"))
def order_total_is(placement, total):
    assert placement["result"].value.total == total


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(placement, status):
    assert placement["result"].value.status == status


@then("the cart is empty")
def cart_is_empty(cart):
    assert cart.is_empty()
    assert cart.total == 0.0


@then("the placement fails with a validation error")
def placement_fails(placement):
    assert placement["result"].failed
    assert placement["result"].error == ErrorKind.VALIDATION


@then("no order is stored")
def no_order_stored():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0


@then("the item is rejected")
def item_rejected(error):
    assert isinstance(error["exc"], ValidationError)
