"""Order number sequence: a dedicated counter aggregate and its allocator.

Order numbers are handed out by incrementing a single ``OrderSequence``
record. The read-increment-write runs under a process-wide lock, so
concurrent placements in one process never see the same value. Collisions
with numbers written by another process are caught at insert time by the
placement allocation, which calls :meth:`SequenceAllocator.advance_to` and
retries.
"""

import threading
from datetime import UTC, datetime

import structlog
from protean import UnitOfWork
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering

logger = structlog.get_logger(__name__)

DEFAULT_SEQUENCE = "orders"


@ordering.aggregate
class OrderSequence:
    name = String(identifier=True, required=True, max_length=50)
    last_value = Integer(default=0, min_value=0)
    updated_at = DateTime()

    @classmethod
    def start(cls, name=DEFAULT_SEQUENCE):
        return cls(name=name, last_value=0, updated_at=datetime.now(UTC))

    def increment(self) -> int:
        self.last_value = (self.last_value or 0) + 1
        self.updated_at = datetime.now(UTC)
        return self.last_value

    def advance_to(self, value: int) -> None:
        """Move the counter forward so the next value is above ``value``."""
        if value < 0:
            raise ValidationError({"last_value": ["Sequence values cannot be negative"]})
        if value > (self.last_value or 0):
            self.last_value = value
            self.updated_at = datetime.now(UTC)


class SequenceAllocator:
    """Hands out strictly increasing, unique order numbers."""

    def __init__(self, name: str = DEFAULT_SEQUENCE):
        self.name = name
        self._lock = threading.Lock()

    def _load(self):
        repo = current_domain.repository_for(OrderSequence)
        try:
            return repo, repo.get(self.name)
        except ObjectNotFoundError:
            return repo, OrderSequence.start(self.name)

    def next(self) -> int:
        # Committed before the lock is released, provided no outer unit of work is active.
        with self._lock, UnitOfWork():
            repo, sequence = self._load()
            value = sequence.increment()
            repo.add(sequence)
        logger.debug("Order number allocated", sequence=self.name, order_number=value)
        return value

    def advance_to(self, value: int) -> None:
        with self._lock, UnitOfWork():
            repo, sequence = self._load()
            previous = sequence.last_value or 0
            sequence.advance_to(value)
            repo.add(sequence)
        if value > previous:
            logger.warning("Order sequence was behind stored orders", sequence=self.name, moved_to=value)

    def current(self) -> int:
        with self._lock:
            _, sequence = self._load()
            return sequence.last_value or 0


sequence_allocator = SequenceAllocator()
