"""Order placement: number allocation, command and handler.

The order number is allocated before the command is processed. The
allocator commits the counter while it still holds its lock; run inside the
handler, that commit would be deferred to the handler's unit of work and
concurrent placements would race on the counter.

If the allocated number is already taken (the counter fell behind orders
written elsewhere), allocation re-reads the highest stored number, moves the
counter past it and retries with exponential backoff.
"""

import json
import time

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.fields import Float, Integer, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.sequence.sequence import sequence_allocator
from shared.errors import DuplicateOrderNumber, SequenceContentionError
from shared.queries import fetch_first

logger = structlog.get_logger(__name__)

MAX_ALLOCATION_ATTEMPTS = 5
SEQUENCE_BACKOFF_SECONDS = 0.01


@ordering.command(part_of="Order")
class PlaceOrder:
    order_number = Integer(required=True, min_value=1)
    items = Text(required=True)  # JSON: list of {item_name, unit_price, quantity}
    total = Float(required=True, min_value=0.0)


def _is_taken(repo, order_number) -> bool:
    try:
        repo.get(order_number)
    except ObjectNotFoundError:
        return False
    return True


def highest_order_number(repo) -> int:
    latest = fetch_first(repo._dao.query.order_by("-order_number"))
    return latest.order_number if latest else 0


def allocate_order_number() -> int:
    """Next free order number. Call outside any unit of work."""
    repo = current_domain.repository_for(Order)
    for attempt in range(MAX_ALLOCATION_ATTEMPTS):
        try:
            order_number = sequence_allocator.next()
        except ExpectedVersionError:
            # Another process moved the counter between our read and write
            logger.warning("Order sequence changed concurrently", attempt=attempt + 1)
            time.sleep(SEQUENCE_BACKOFF_SECONDS * 2**attempt)
            continue

        if not _is_taken(repo, order_number):
            return order_number

        logger.warning("Order number collision", order_number=order_number, attempt=attempt + 1)
        sequence_allocator.advance_to(highest_order_number(repo))
        time.sleep(SEQUENCE_BACKOFF_SECONDS * 2**attempt)

    raise SequenceContentionError(MAX_ALLOCATION_ATTEMPTS)


def place(items_data: list[dict], total: float) -> int:
    """Allocate a number and store a pending order under it."""
    if not items_data:
        raise ValidationError({"items": ["An order needs at least one item"]})

    return current_domain.process(
        PlaceOrder(order_number=allocate_order_number(), items=json.dumps(items_data), total=total),
        asynchronous=False,
    )


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        repo = current_domain.repository_for(Order)
        if _is_taken(repo, command.order_number):
            raise DuplicateOrderNumber(command.order_number)

        order = Order.place(order_number=command.order_number, items_data=items_data, total=command.total)
        repo.add(order)
        logger.info("Order placed", order_number=order.order_number, total=command.total, items=len(items_data))
        return order.order_number
