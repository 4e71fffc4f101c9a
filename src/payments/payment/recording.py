"""Record a payment attempt: command and handler.

``created_at`` is strictly increasing per order: when two payments for the
same order land within the same clock tick, the newer one is nudged one
microsecond past the latest existing record so "latest" stays well defined.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from payments.domain import payments
from payments.payment.payment import DEFAULT_PAYMENT_METHOD, Payment
from shared.errors import DuplicateTransactionId
from shared.queries import fetch_all, fetch_first

logger = structlog.get_logger(__name__)

TICK = timedelta(microseconds=1)


@payments.command(part_of="Payment")
class RecordPayment:
    order_number = Integer(required=True)
    amount = Float(required=True)
    payment_method = String(max_length=50, default=DEFAULT_PAYMENT_METHOD)


def _order_query(order_number):
    return current_domain.repository_for(Payment)._dao.query.filter(order_number=order_number).order_by("-created_at")


def payments_for(order_number) -> list[Payment]:
    """All records for an order, newest first."""
    return fetch_all(_order_query(order_number))


def latest_payment(order_number) -> Payment | None:
    return fetch_first(_order_query(order_number))


def _next_timestamp(order_number) -> datetime:
    now = datetime.now(UTC)
    latest = latest_payment(order_number)
    if latest and latest.created_at >= now:
        return latest.created_at + TICK
    return now


@payments.command_handler(part_of=Payment)
class RecordPaymentHandler:
    @handle(RecordPayment)
    def record_payment(self, command):
        payment = Payment.record(
            order_number=command.order_number,
            amount=command.amount,
            payment_method=command.payment_method,
            recorded_at=_next_timestamp(command.order_number),
        )

        repo = current_domain.repository_for(Payment)
        clash = repo._dao.query.filter(transaction_id=payment.transaction_id).all().first
        if clash is not None:
            raise DuplicateTransactionId(payment.transaction_id)

        repo.add(payment)
        logger.info(
            "Payment recorded",
            order_number=payment.order_number,
            amount=payment.amount,
            transaction_id=payment.transaction_id,
        )
        return payment.transaction_id
