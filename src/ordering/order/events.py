"""Domain events for the Order aggregate.

Events are versioned, immutable facts. They are written to the event store
when the aggregate is persisted.
"""

from protean.fields import DateTime, Float, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A new order was placed with a freshly allocated order number."""

    __version__ = 1

    order_number = Integer(required=True)
    items = Text(required=True)  # JSON: list of {item_name, unit_price, quantity}
    item_count = Integer(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order's own status field moved to a new value."""

    __version__ = 1

    order_number = Integer(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
