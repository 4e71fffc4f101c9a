"""Tracking creation: command and handler.

Opens the kitchen tracking record for a placed order. A second request for
the same order number is rejected with ``TrackingAlreadyExists``.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, Text
from protean.utils.globals import current_domain

from fulfillment.domain import fulfillment
from fulfillment.tracking.tracking import Tracking
from shared.errors import TrackingAlreadyExists

logger = structlog.get_logger(__name__)


@fulfillment.command(part_of="Tracking")
class StartTracking:
    order_number = Integer(required=True, min_value=1)
    items = Text(required=True)  # JSON: list of {item_name, unit_price, quantity}
    total = Float(required=True, min_value=0.0)


def tracking_exists(repo, order_number) -> bool:
    try:
        repo.get(order_number)
    except ObjectNotFoundError:
        return False
    return True


@fulfillment.command_handler(part_of=Tracking)
class StartTrackingHandler:
    @handle(StartTracking)
    def start_tracking(self, command):
        repo = current_domain.repository_for(Tracking)
        if tracking_exists(repo, command.order_number):
            raise TrackingAlreadyExists(command.order_number)

        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        tracking = Tracking.start(order_number=command.order_number, items_data=items_data, total=command.total)
        repo.add(tracking)
        logger.info("Tracking started", order_number=command.order_number, items=len(items_data))
        return tracking.order_number
