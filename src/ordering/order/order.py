"""Order aggregate (CQRS): the record of a placed order.

An order is keyed by its order number. Items and total are fixed at
placement; only the status field changes afterwards.

Status vocabulary:
    pending, confirmed, preparing, ready, delivered

Any value of the vocabulary may follow any other. The kitchen-facing
fulfillment status lives in the Fulfillment context and is tracked
separately.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"


ORDER_STATUSES = tuple(s.value for s in OrderStatus)


@ordering.entity(part_of="Order")
class OrderLine:
    """One line of a placed order, copied from the cart at placement time."""

    item_name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=1)


@ordering.aggregate
class Order:
    order_number = Integer(identifier=True, required=True, min_value=1)
    items = HasMany(OrderLine)
    total = Float(required=True, min_value=0.0)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, order_number, items_data, total):
        """Create a pending order.

        Args:
            order_number: Number handed out by the sequence allocator.
            items_data: List of dicts with item_name, unit_price, quantity.
            total: Order total, already rounded to two decimals.
        """
        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            total=total,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(
                OrderLine(
                    item_name=item_data["item_name"],
                    unit_price=item_data["unit_price"],
                    quantity=item_data.get("quantity", 1),
                )
            )

        order.raise_(
            OrderPlaced(
                order_number=order_number,
                items=json.dumps(items_data),
                item_count=len(items_data),
                total=total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        if new_status not in ORDER_STATUSES:
            raise ValidationError(
                {"status": [f"Invalid order status '{new_status}'. Expected one of: {', '.join(ORDER_STATUSES)}"]}
            )

        previous = self.status
        now = datetime.now(UTC)
        self.status = new_status
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_number=self.order_number,
                previous_status=previous,
                new_status=new_status,
                changed_at=now,
            )
        )

    def line_items(self) -> list[dict]:
        return [
            {"item_name": line.item_name, "unit_price": line.unit_price, "quantity": line.quantity}
            for line in self.items or []
        ]
