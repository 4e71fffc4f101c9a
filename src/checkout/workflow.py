"""Checkout workflow: coordinates the Ordering → Payments → Fulfillment flow.

The three contexts share nothing but the order number and there is no
transaction spanning them. Each step commits on its own inside its own
domain context; when a later step fails, the failure is reported together
with the order number that was already placed so the caller can reconcile.

Flow:
    1. OrderLedger.place_order(cart)            (ordering)
    2. PaymentLedger.record(order, total)       (payments)
    3. FulfillmentTracker.create(order, ...)    (fulfillment)
"""

import structlog

from fulfillment.domain import fulfillment as fulfillment_domain
from fulfillment.tracking.tracker import FulfillmentTracker
from fulfillment.tracking.tracking import PAYMENT_METHODS
from ordering.domain import ordering as ordering_domain
from ordering.order.ledger import OrderLedger
from payments.domain import payments as payments_domain
from payments.payment.ledger import PaymentLedger
from payments.payment.payment import DEFAULT_PAYMENT_METHOD
from shared.logging import bind_order, clear_context
from shared.results import ErrorKind, Result

logger = structlog.get_logger(__name__)


class CheckoutWorkflow:
    def __init__(self, ordering=None, payments=None, fulfillment=None):
        self.ordering = ordering or ordering_domain
        self.payments = payments or payments_domain
        self.fulfillment = fulfillment or fulfillment_domain

        self.orders = OrderLedger()
        self.ledger = PaymentLedger()
        self.tracker = FulfillmentTracker()

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def place(self, cart) -> Result:
        """Place the cart as an order, then open kitchen tracking for it."""
        with self.ordering.domain_context():
            placed = self.orders.place_order(cart)
            items = placed.value.line_items() if placed.success else None
        if placed.failed:
            return placed

        tracked = self.start_tracking(placed.value, items)
        if tracked.failed:
            return self._partial(placed.value.order_number, "tracking", tracked)
        return placed

    def start_tracking(self, order, items, payment_method=None) -> Result:
        """Open tracking for ``order``. ``items`` are its line dicts, read in the ordering context."""
        with self.fulfillment.domain_context():
            result = self.tracker.create(order.order_number, items, order.total)
            if result.success and payment_method in PAYMENT_METHODS:
                result = self.tracker.set_payment_method(order.order_number, payment_method)
        return result

    def checkout(self, cart, payment_method=DEFAULT_PAYMENT_METHOD) -> Result:
        """Place the order, pay for its total and start tracking.

        The value is ``{"order", "transaction_id", "tracking"}``.
        """
        with self.ordering.domain_context():
            placed = self.orders.place_order(cart)
            items = placed.value.line_items() if placed.success else None
        if placed.failed:
            return placed

        order = placed.value
        bind_order(order.order_number)
        try:
            with self.payments.domain_context():
                paid = self.ledger.record(order.order_number, order.total, payment_method)
            if paid.failed:
                return self._partial(order.order_number, "payment", paid)

            tracked = self.start_tracking(order, items, payment_method)
            if tracked.failed:
                return self._partial(order.order_number, "tracking", tracked)

            logger.info("Checkout completed", total=order.total, transaction_id=paid.value)
            return Result.ok(
                {"order": order, "transaction_id": paid.value, "tracking": tracked.value},
                message="Checkout completed",
            )
        finally:
            clear_context()

    # -------------------------------------------------------------------
    # Recovery and views
    # -------------------------------------------------------------------
    def reconcile(self, order_number) -> Result:
        """Create the tracking record of an order that has none yet."""
        with self.ordering.domain_context():
            found = self.orders.get(order_number)
            items = found.value.line_items() if found.success else None
        if found.failed:
            return found

        with self.fulfillment.domain_context():
            return self.tracker.ensure(order_number, items, found.value.total)

    def status_board(self, order_number) -> Result:
        """Order, latest payment and tracking status side by side."""
        with self.ordering.domain_context():
            found = self.orders.get(order_number)
        if found.failed:
            return found

        with self.payments.domain_context():
            payment = self.ledger.latest_status(order_number)
        with self.fulfillment.domain_context():
            tracking = self.tracker.get(order_number)

        for step in (payment, tracking):
            if step.failed and step.error != ErrorKind.NOT_FOUND:
                return step

        return Result.ok(
            {
                "order_number": order_number,
                "order_status": found.value.status,
                "payment_status": payment.value["status"] if payment.success else None,
                "tracking_status": tracking.value.status if tracking.success else None,
            }
        )

    @staticmethod
    def _partial(order_number, step, failure: Result) -> Result:
        logger.warning(
            "Checkout step failed after order was placed",
            order_number=order_number,
            step=step,
            error=failure.error.value if failure.error else None,
            reason=failure.message,
        )
        return Result.fail(
            failure.error,
            f"Order {order_number} placed but {step} failed: {failure.message}",
            cause=failure.cause,
        )
