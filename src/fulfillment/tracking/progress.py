"""Kitchen progress: status changes and cancellation."""

from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from fulfillment.domain import fulfillment
from fulfillment.tracking.tracking import Tracking


@fulfillment.command(part_of="Tracking")
class ChangeTrackingStatus:
    order_number = Integer(required=True, min_value=1)
    status = String(required=True, max_length=20)


@fulfillment.command(part_of="Tracking")
class CancelTracking:
    order_number = Integer(required=True, min_value=1)


@fulfillment.command_handler(part_of=Tracking)
class TrackingProgressHandler:
    @handle(ChangeTrackingStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Tracking)
        tracking = repo.get(command.order_number)
        tracking.change_status(command.status)
        repo.add(tracking)
        return tracking.order_number

    @handle(CancelTracking)
    def cancel(self, command):
        repo = current_domain.repository_for(Tracking)
        tracking = repo.get(command.order_number)
        tracking.cancel()
        repo.add(tracking)
        return tracking.order_number
