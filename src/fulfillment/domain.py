"""Fulfillment bounded context: kitchen-to-customer tracking.

Holds one mutable tracking record per order number. Its status vocabulary
is independent of the order's own status field.
"""

import structlog
from protean.domain import Domain

fulfillment = Domain(name="fulfillment")

logger = structlog.get_logger(__name__)
