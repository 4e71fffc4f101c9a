"""Payment aggregate (CQRS): one append-only ledger entry per payment attempt.

Many payments may reference the same order number: retries, split payments
and refunds are all separate records. Records are never deleted; after
creation only ``status`` and ``updated_at`` change.

Status vocabulary:
    pending, validated, failed, refunded
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from payments.domain import payments
from payments.payment.events import PaymentRecorded, PaymentStatusChanged

DEFAULT_PAYMENT_METHOD = "card"


class PaymentStatus(Enum):
    PENDING = "pending"
    VALIDATED = "validated"
    FAILED = "failed"
    REFUNDED = "refunded"


PAYMENT_STATUSES = tuple(s.value for s in PaymentStatus)


def new_transaction_id(now: datetime) -> str:
    """Mint a transaction id: epoch milliseconds plus 48 random bits."""
    return f"TRX-{int(now.timestamp() * 1000)}-{uuid4().hex[:12].upper()}"


@payments.aggregate
class Payment:
    order_number = Integer(required=True, min_value=1)
    amount = Float(required=True)
    payment_method = String(max_length=50, default=DEFAULT_PAYMENT_METHOD)
    status = String(
        max_length=20,
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    transaction_id = String(required=True, max_length=64, unique=True)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def record(cls, order_number, amount, payment_method=DEFAULT_PAYMENT_METHOD, recorded_at=None):
        """Create a validated payment record.

        ``recorded_at`` lets the caller keep ``created_at`` strictly
        increasing within one order; it defaults to now.
        """
        if not order_number or order_number < 1 or amount is None or amount <= 0:
            raise ValidationError({"payment": ["Invalid order number or amount"]})

        now = recorded_at or datetime.now(UTC)
        payment = cls(
            order_number=order_number,
            amount=amount,
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            status=PaymentStatus.VALIDATED.value,
            transaction_id=new_transaction_id(now),
            created_at=now,
            updated_at=now,
        )
        payment.raise_(
            PaymentRecorded(
                payment_id=str(payment.id),
                order_number=order_number,
                amount=payment.amount,
                payment_method=payment.payment_method,
                status=payment.status,
                transaction_id=payment.transaction_id,
                recorded_at=now,
            )
        )
        return payment

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        if new_status not in PAYMENT_STATUSES:
            raise ValidationError(
                {"status": [f"Invalid payment status '{new_status}'. Expected one of: {', '.join(PAYMENT_STATUSES)}"]}
            )

        previous = self.status
        now = datetime.now(UTC)
        self.status = new_status
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                payment_id=str(self.id),
                order_number=self.order_number,
                transaction_id=self.transaction_id,
                previous_status=previous,
                new_status=new_status,
                changed_at=now,
            )
        )

    def summary(self) -> dict:
        return {
            "status": self.status,
            "amount": self.amount,
            "transaction_id": self.transaction_id,
            "created_at": self.created_at,
        }
