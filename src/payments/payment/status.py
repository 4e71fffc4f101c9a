"""Payment status update: command and handler.

With a ``transaction_id`` the named record is updated; without one the
newest record for the order is.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from payments.domain import payments
from payments.payment.payment import Payment
from payments.payment.recording import latest_payment


@payments.command(part_of="Payment")
class UpdatePaymentStatus:
    order_number = Integer(required=True)
    status = String(required=True, max_length=20)
    transaction_id = String(max_length=64)


def find_target(order_number, transaction_id=None) -> Payment:
    if transaction_id:
        repo = current_domain.repository_for(Payment)
        payment = repo._dao.query.filter(order_number=order_number, transaction_id=transaction_id).all().first
        if payment is None:
            raise ObjectNotFoundError(f"Payment {transaction_id} not found for order {order_number}")
        return payment

    payment = latest_payment(order_number)
    if payment is None:
        raise ObjectNotFoundError(f"No payment found for order {order_number}")
    return payment


@payments.command_handler(part_of=Payment)
class UpdatePaymentStatusHandler:
    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        payment = find_target(command.order_number, command.transaction_id)
        payment.change_status(command.status)
        current_domain.repository_for(Payment).add(payment)
        return payment.transaction_id
