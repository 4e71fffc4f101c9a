"""Fixtures for cross-context checkout tests.

Tests run outside any domain context; the checkout workflow pushes the
context of each step itself.
"""

import pytest


@pytest.fixture()
def beds(ordering_bed, payments_bed, fulfillment_bed):
    return (ordering_bed, payments_bed, fulfillment_bed)


@pytest.fixture(autouse=True)
def _reset(beds):
    """Wipe every repository and event store after each test."""
    yield

    from protean import current_domain

    for bed in beds:
        with bed.domain_context():
            for _, provider in current_domain.providers.items():
                provider._data_reset()
            current_domain.event_store.store._data_reset()


@pytest.fixture()
def workflow(beds):
    from checkout.workflow import CheckoutWorkflow

    return CheckoutWorkflow()
