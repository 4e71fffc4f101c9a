"""Tracking details: estimated time, notes and payment method."""

from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from fulfillment.domain import fulfillment
from fulfillment.tracking.tracking import Tracking


@fulfillment.command(part_of="Tracking")
class UpdateEstimatedTime:
    order_number = Integer(required=True, min_value=1)
    minutes = Integer(required=True)


@fulfillment.command(part_of="Tracking")
class AddTrackingNote:
    order_number = Integer(required=True, min_value=1)
    note = String(required=True, max_length=1000)


@fulfillment.command(part_of="Tracking")
class SetPaymentMethod:
    order_number = Integer(required=True, min_value=1)
    payment_method = String(required=True, max_length=10)


@fulfillment.command_handler(part_of=Tracking)
class TrackingDetailsHandler:
    @handle(UpdateEstimatedTime)
    def update_estimated_time(self, command):
        repo = current_domain.repository_for(Tracking)
        tracking = repo.get(command.order_number)
        tracking.update_estimated_time(command.minutes)
        repo.add(tracking)
        return tracking.order_number

    @handle(AddTrackingNote)
    def add_note(self, command):
        repo = current_domain.repository_for(Tracking)
        tracking = repo.get(command.order_number)
        tracking.add_note(command.note)
        repo.add(tracking)
        return tracking.order_number

    @handle(SetPaymentMethod)
    def set_payment_method(self, command):
        repo = current_domain.repository_for(Tracking)
        tracking = repo.get(command.order_number)
        tracking.set_payment_method(command.payment_method)
        repo.add(tracking)
        return tracking.order_number
