"""PaymentLedger: public surface of the payments context.

Methods return :class:`shared.results.Result` and must be called inside the
payments domain context.
"""

from protean.utils.globals import current_domain

from payments.payment.payment import DEFAULT_PAYMENT_METHOD
from payments.payment.recording import RecordPayment, payments_for
from payments.payment.status import UpdatePaymentStatus, find_target
from shared.results import Result, attempt


class PaymentLedger:
    def record(self, order_number, amount, payment_method=DEFAULT_PAYMENT_METHOD) -> Result:
        """Append a validated payment record; the value is its transaction id."""
        return attempt(
            lambda: current_domain.process(
                RecordPayment(order_number=order_number, amount=amount, payment_method=payment_method),
                asynchronous=False,
            ),
            operation="record_payment",
            message="Payment recorded",
        )

    def latest_status(self, order_number) -> Result:
        """Status summary of the most recent record for the order."""
        return attempt(lambda: find_target(order_number).summary(), operation="payment_status")

    def update_status(self, order_number, status, transaction_id=None) -> Result:
        def _update():
            current_domain.process(
                UpdatePaymentStatus(order_number=order_number, status=status, transaction_id=transaction_id),
                asynchronous=False,
            )
            return find_target(order_number, transaction_id).summary()

        return attempt(_update, operation="update_payment_status", message="Payment status updated")

    def history(self, order_number) -> Result:
        """Every record for the order, newest first. Empty when there are none."""
        return attempt(lambda: payments_for(order_number), operation="payment_history")
