"""FulfillmentTracker: public surface of the fulfillment context.

Methods return :class:`shared.results.Result` and must be called inside the
fulfillment domain context.
"""

import json

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from fulfillment.tracking.creation import StartTracking
from fulfillment.tracking.details import AddTrackingNote, SetPaymentMethod, UpdateEstimatedTime
from fulfillment.tracking.progress import CancelTracking, ChangeTrackingStatus
from fulfillment.tracking.tracking import Tracking
from shared.errors import TrackingAlreadyExists
from shared.results import Result, attempt


def _not_found(order_number) -> ObjectNotFoundError:
    return ObjectNotFoundError(f"Tracking for order {order_number} not found")


def _get_tracking(order_number) -> Tracking:
    try:
        return current_domain.repository_for(Tracking).get(order_number)
    except ObjectNotFoundError:
        raise _not_found(order_number) from None


def _process(command) -> Tracking:
    try:
        order_number = current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError:
        raise _not_found(command.order_number) from None
    return _get_tracking(order_number)


class FulfillmentTracker:
    def create(self, order_number, items: list[dict], total) -> Result:
        """Open tracking in ``preparation`` with the default 30 minute estimate."""
        return attempt(
            lambda: _process(StartTracking(order_number=order_number, items=json.dumps(items), total=total)),
            operation="create_tracking",
            message="Tracking created",
        )

    def ensure(self, order_number, items: list[dict], total) -> Result:
        """Like :meth:`create`, but an existing record is returned unchanged."""

        def _ensure():
            try:
                return _process(StartTracking(order_number=order_number, items=json.dumps(items), total=total))
            except TrackingAlreadyExists:
                return _get_tracking(order_number)

        return attempt(_ensure, operation="ensure_tracking")

    def set_status(self, order_number, status) -> Result:
        return attempt(
            lambda: _process(ChangeTrackingStatus(order_number=order_number, status=status)),
            operation="update_tracking_status",
            message="Tracking status updated",
        )

    def cancel(self, order_number) -> Result:
        """Cancel an order that has not been delivered yet."""
        return attempt(
            lambda: _process(CancelTracking(order_number=order_number)),
            operation="cancel_tracking",
            message="Order cancelled",
        )

    def set_estimated_time(self, order_number, minutes) -> Result:
        return attempt(
            lambda: _process(UpdateEstimatedTime(order_number=order_number, minutes=minutes)),
            operation="update_estimated_time",
        )

    def add_note(self, order_number, note) -> Result:
        return attempt(
            lambda: _process(AddTrackingNote(order_number=order_number, note=note)),
            operation="add_tracking_note",
        )

    def set_payment_method(self, order_number, payment_method) -> Result:
        return attempt(
            lambda: _process(SetPaymentMethod(order_number=order_number, payment_method=payment_method)),
            operation="set_payment_method",
        )

    def get(self, order_number) -> Result:
        return attempt(lambda: _get_tracking(order_number), operation="get_tracking")
