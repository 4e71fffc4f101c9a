"""Ordering bounded context: order numbering, session carts and the order ledger.

Orders are plain CQRS aggregates keyed by their order number. Carts are
session-scoped aggregates that are never persisted; they only produce the
payload consumed by order placement.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
