"""Payments bounded context: append-only payment ledger.

Every payment attempt against an order is its own record. Records are never
deleted; only their status changes.
"""

import structlog
from protean.domain import Domain

payments = Domain(name="payments")

logger = structlog.get_logger(__name__)
