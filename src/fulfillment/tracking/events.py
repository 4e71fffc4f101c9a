"""Domain events for the Tracking aggregate."""

from protean.fields import DateTime, Float, Integer, String, Text

from fulfillment.domain import fulfillment


@fulfillment.event(part_of="Tracking")
class TrackingStarted:
    """The kitchen started preparing an order."""

    __version__ = 1

    order_number = Integer(required=True)
    items = Text(required=True)  # JSON: list of {item_name, unit_price, quantity}
    total = Float(required=True)
    estimated_time_minutes = Integer(required=True)
    started_at = DateTime(required=True)


@fulfillment.event(part_of="Tracking")
class TrackingStatusChanged:
    __version__ = 1

    order_number = Integer(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@fulfillment.event(part_of="Tracking")
class TrackingCancelled:
    __version__ = 1

    order_number = Integer(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@fulfillment.event(part_of="Tracking")
class EstimatedTimeUpdated:
    __version__ = 1

    order_number = Integer(required=True)
    estimated_time_minutes = Integer(required=True)
    updated_at = DateTime(required=True)


@fulfillment.event(part_of="Tracking")
class NoteAdded:
    __version__ = 1

    order_number = Integer(required=True)
    note = String(required=True)
    added_at = DateTime(required=True)


@fulfillment.event(part_of="Tracking")
class PaymentMethodSet:
    __version__ = 1

    order_number = Integer(required=True)
    payment_method = String(required=True)
    set_at = DateTime(required=True)
