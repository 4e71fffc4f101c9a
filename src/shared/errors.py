"""Error taxonomy shared by the ordering, payments and fulfillment contexts.

Validation and not-found conditions use Protean's own exceptions
(``ValidationError`` and ``ObjectNotFoundError``). The classes below cover the
cases Protean has no exception for.
"""


class AlreadyExistsError(Exception):
    """A record with the same natural key is already stored."""


class DuplicateOrderNumber(AlreadyExistsError):
    def __init__(self, order_number: int):
        self.order_number = order_number
        super().__init__(f"Order number {order_number} is already taken")


class DuplicateTransactionId(AlreadyExistsError):
    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} is already recorded")


class TrackingAlreadyExists(AlreadyExistsError):
    def __init__(self, order_number: int):
        self.order_number = order_number
        super().__init__(f"Tracking for order {order_number} already exists")


class SequenceContentionError(Exception):
    """Order number allocation kept colliding and ran out of attempts."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate an order number after {attempts} attempts")
