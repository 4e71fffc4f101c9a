"""Tests for the OrderSequence counter aggregate."""

import pytest
from ordering.sequence.sequence import DEFAULT_SEQUENCE, OrderSequence
from protean.exceptions import ValidationError


class TestOrderSequence:
    def test_starts_at_zero(self):
        sequence = OrderSequence.start()
        assert sequence.name == DEFAULT_SEQUENCE
        assert sequence.last_value == 0

    def test_increment_returns_next_value(self):
        sequence = OrderSequence.start()
        assert sequence.increment() == 1
        assert sequence.increment() == 2
        assert sequence.last_value == 2

    def test_advance_moves_forward_only(self):
        sequence = OrderSequence.start()
        sequence.advance_to(10)
        assert sequence.last_value == 10
        sequence.advance_to(3)
        assert sequence.last_value == 10
        assert sequence.increment() == 11

    def test_advance_rejects_negative_values(self):
        with pytest.raises(ValidationError):
            OrderSequence.start().advance_to(-1)
