"""OrderLedger: public surface of the ordering context.

Every method returns a :class:`shared.results.Result`; domain exceptions
never cross this boundary. Methods must be called inside the ordering
domain context.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, round_total
from ordering.order import placement
from ordering.order.order import Order
from ordering.order.status import UpdateOrderStatus
from shared.queries import fetch_all
from shared.results import Result, attempt

logger = structlog.get_logger(__name__)


def _get_order(order_number) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_number)
    except ObjectNotFoundError:
        raise ObjectNotFoundError(f"Order {order_number} not found") from None


class OrderLedger:
    def place_order(self, cart: Cart) -> Result:
        """Persist the cart as a new pending order and clear the cart.

        The cart is cleared only after the order is stored; a failed
        placement leaves it exactly as it was. The cart's events are drained
        and logged against the new order number.
        """

        def _place():
            payload = cart.snapshot()
            order_number = placement.place(payload["items"], payload["total"])
            cart.clear()
            events = cart.collect_events()
            logger.debug(
                "Cart placed",
                order_number=order_number,
                cart_events=[type(event).__name__ for event in events],
            )
            return _get_order(order_number)

        return attempt(_place, operation="place_order", message="Order placed")

    def create(self, items: list[dict], total) -> Result:
        """Place an order from an explicit list of ``{item_name, unit_price, quantity}``."""

        def _create():
            order_number = placement.place(items, round_total(total))
            return _get_order(order_number)

        return attempt(_create, operation="create_order", message="Order placed")

    def get(self, order_number) -> Result:
        return attempt(lambda: _get_order(order_number), operation="get_order")

    def update_status(self, order_number, status) -> Result:
        def _update():
            current_domain.process(
                UpdateOrderStatus(order_number=order_number, status=status),
                asynchronous=False,
            )
            return _get_order(order_number)

        return attempt(_update, operation="update_order_status", message="Order status updated")

    def list_all(self) -> Result:
        """All orders, newest first."""

        def _list():
            query = current_domain.repository_for(Order)._dao.query.order_by("-order_number")
            return sorted(fetch_all(query), key=lambda o: (o.created_at, o.order_number), reverse=True)

        return attempt(_list, operation="list_orders")
