"""Tracking aggregate (CQRS): kitchen progress for a single order.

There is at most one tracking record per order number, and the order number
is its identity.

State Machine:
    PREPARATION ⇄ READY → DELIVERED
    {PREPARATION, READY} → CANCELLED → {PREPARATION, READY}
    DELIVERED is terminal

Any state except DELIVERED may move to any other state.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String

from fulfillment.domain import fulfillment
from fulfillment.tracking.events import (
    EstimatedTimeUpdated,
    NoteAdded,
    PaymentMethodSet,
    TrackingCancelled,
    TrackingStarted,
    TrackingStatusChanged,
)

DEFAULT_ESTIMATED_TIME = 30


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class TrackingStatus(Enum):
    PREPARATION = "preparation"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CARD = "card"
    CASH = "cash"


TRACKING_STATUSES = tuple(s.value for s in TrackingStatus)
PAYMENT_METHODS = tuple(m.value for m in PaymentMethod)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@fulfillment.entity(part_of="Tracking")
class TrackedItem:
    """Snapshot of an order line as the kitchen received it."""

    item_name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=1)


@fulfillment.entity(part_of="Tracking")
class TrackingNote:
    text = String(required=True, max_length=1000)
    position = Integer(required=True, min_value=1)
    added_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@fulfillment.aggregate
class Tracking:
    order_number = Integer(identifier=True, required=True, min_value=1)
    status = String(
        max_length=20,
        choices=TrackingStatus,
        default=TrackingStatus.PREPARATION.value,
    )
    items = HasMany(TrackedItem)
    total = Float(required=True, min_value=0.0)
    payment_method = String(max_length=10, choices=PaymentMethod)
    estimated_time_minutes = Integer(default=DEFAULT_ESTIMATED_TIME, min_value=0)
    notes = HasMany(TrackingNote)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def start(cls, order_number: int, items_data: list[dict], total: float):
        """Open tracking for an order in the preparation state."""
        now = datetime.now(UTC)
        tracking = cls(
            order_number=order_number,
            status=TrackingStatus.PREPARATION.value,
            total=total,
            estimated_time_minutes=DEFAULT_ESTIMATED_TIME,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            tracking.add_items(
                TrackedItem(
                    item_name=item_data["item_name"],
                    unit_price=item_data["unit_price"],
                    quantity=item_data.get("quantity", 1),
                )
            )
        tracking.raise_(
            TrackingStarted(
                order_number=order_number,
                items=json.dumps(items_data),
                total=total,
                estimated_time_minutes=DEFAULT_ESTIMATED_TIME,
                started_at=now,
            )
        )
        return tracking

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_not_delivered(self, action: str) -> None:
        if TrackingStatus(self.status) == TrackingStatus.DELIVERED:
            raise ValidationError({"status": [f"Cannot {action} order {self.order_number}: already delivered"]})

    def change_status(self, new_status: str) -> None:
        if new_status not in TRACKING_STATUSES:
            raise ValidationError(
                {"status": [f"Invalid tracking status '{new_status}'. Expected one of: {', '.join(TRACKING_STATUSES)}"]}
            )
        if new_status == TrackingStatus.CANCELLED.value:
            self.cancel()
            return
        self._assert_not_delivered("change status of")

        previous = self.status
        now = datetime.now(UTC)
        self.status = new_status
        self.updated_at = now
        self.raise_(
            TrackingStatusChanged(
                order_number=self.order_number,
                previous_status=previous,
                new_status=new_status,
                changed_at=now,
            )
        )

    def cancel(self) -> None:
        """Cancel preparation. Delivered orders cannot be cancelled."""
        self._assert_not_delivered("cancel")

        previous = self.status
        now = datetime.now(UTC)
        self.status = TrackingStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            TrackingCancelled(
                order_number=self.order_number,
                previous_status=previous,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_estimated_time(self, minutes: int) -> None:
        if minutes is None or minutes < 0:
            raise ValidationError({"estimated_time_minutes": ["Estimated time must be zero or more minutes"]})

        now = datetime.now(UTC)
        self.estimated_time_minutes = minutes
        self.updated_at = now
        self.raise_(
            EstimatedTimeUpdated(
                order_number=self.order_number,
                estimated_time_minutes=minutes,
                updated_at=now,
            )
        )

    def add_note(self, note: str) -> None:
        if not note or not note.strip():
            raise ValidationError({"note": ["Note cannot be empty"]})

        now = datetime.now(UTC)
        self.add_notes(TrackingNote(text=note, position=len(self.notes or []) + 1, added_at=now))
        self.updated_at = now
        self.raise_(NoteAdded(order_number=self.order_number, note=note, added_at=now))

    def set_payment_method(self, method: str) -> None:
        if method not in PAYMENT_METHODS:
            raise ValidationError(
                {"payment_method": [f"Invalid payment method '{method}'. Expected one of: {', '.join(PAYMENT_METHODS)}"]}
            )

        now = datetime.now(UTC)
        self.payment_method = method
        self.updated_at = now
        self.raise_(PaymentMethodSet(order_number=self.order_number, payment_method=method, set_at=now))

    # -------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------
    def note_texts(self) -> list[str]:
        """Notes in the order they were added."""
        return [n.text for n in sorted(self.notes or [], key=lambda n: n.position)]

    def line_items(self) -> list[dict]:
        return [
            {"item_name": item.item_name, "unit_price": item.unit_price, "quantity": item.quantity}
            for item in self.items or []
        ]
