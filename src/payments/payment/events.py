"""Domain events for the Payment aggregate.

Each payment attempt produces its own ``PaymentRecorded`` event; status
changes on an existing record produce ``PaymentStatusChanged``.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from payments.domain import payments


@payments.event(part_of="Payment")
class PaymentRecorded:
    """A payment attempt was appended to the ledger for an order."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_number = Integer(required=True)
    amount = Float(required=True)
    payment_method = String(required=True)
    status = String(required=True)
    transaction_id = String(required=True)
    recorded_at = DateTime(required=True)


@payments.event(part_of="Payment")
class PaymentStatusChanged:
    """An existing payment record moved to a new status."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_number = Integer(required=True)
    transaction_id = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
