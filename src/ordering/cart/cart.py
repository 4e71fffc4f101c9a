"""Session Cart aggregate: ephemeral line-item accumulator.

A cart belongs to exactly one ordering session and is never added to a
repository. It collects ``(name, price)`` pairs handed over by the menu
catalog, keeps a running total and produces the snapshot that order
placement persists. Each session creates its own cart; nothing here is
shared between sessions.

Totals are computed with ``Decimal`` so that sums are exact to the cent and
then stored as floats on the aggregate.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String

from ordering.cart.events import CartCleared, CartItemAdded, PromotionApplied
from ordering.domain import ordering
from ordering.order.order import OrderStatus

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    return Decimal(str(value))


def round_total(value) -> float:
    """Round a total half-up to two decimals."""
    return float(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


@ordering.entity(part_of="Cart")
class CartLine:
    item_name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=1)
    added_at = DateTime()


@ordering.aggregate
class Cart:
    session_id = String(max_length=255)
    lines = HasMany(CartLine)
    total = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, session_id=None):
        now = datetime.now(UTC)
        return cls(session_id=session_id, total=0.0, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, item_name, unit_price):
        """Append ``item_name`` as a new line with quantity 1.

        Adding the same item twice produces two lines; lines are never merged.
        """
        if not item_name or not str(item_name).strip():
            raise ValidationError({"item_name": ["Item name is required"]})
        if unit_price is None or to_decimal(unit_price) < 0:
            raise ValidationError({"unit_price": ["Price must be zero or positive"]})

        now = datetime.now(UTC)
        line = CartLine(item_name=item_name, unit_price=float(unit_price), quantity=1, added_at=now)
        self.add_lines(line)
        self.recompute_total()

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                line_id=str(line.id),
                item_name=item_name,
                unit_price=line.unit_price,
                quantity=line.quantity,
                new_total=self.total,
            )
        )
        return list(self.lines)

    def recompute_total(self):
        """Reset the total to the exact sum of price x quantity over all lines.

        Any promotion applied earlier is discarded.
        """
        subtotal = sum(
            (to_decimal(line.unit_price) * line.quantity for line in (self.lines or [])),
            Decimal("0"),
        )
        self.total = float(subtotal)
        self.updated_at = datetime.now(UTC)
        return self.total

    # -------------------------------------------------------------------
    # Promotions
    # -------------------------------------------------------------------
    def apply_promotion(self, discount_percent):
        """Reduce the current total by ``discount_percent`` percent.

        Not idempotent: two 10% promotions leave 81% of the original total.
        """
        if discount_percent is None or not 0 <= to_decimal(discount_percent) <= 100:
            raise ValidationError({"discount_percent": ["Discount must be between 0 and 100 percent"]})

        previous = to_decimal(self.total or 0.0)
        factor = Decimal("1") - to_decimal(discount_percent) / Decimal("100")
        self.total = float(previous * factor)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PromotionApplied(
                cart_id=str(self.id),
                discount_percent=float(discount_percent),
                previous_total=float(previous),
                new_total=self.total,
            )
        )
        return self.total

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    def is_empty(self) -> bool:
        return not self.lines

    def snapshot(self) -> dict:
        """Payload for order placement: lines, rounded total and initial status."""
        if self.is_empty():
            raise ValidationError({"cart": ["Cannot place an order from an empty cart"]})

        return {
            "items": [
                {
                    "item_name": line.item_name,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                }
                for line in self.lines
            ],
            "total": round_total(self.total or 0.0),
            "status": OrderStatus.PENDING.value,
        }

    def clear(self):
        """Empty the cart and reset the total to 0."""
        line_count = len(self.lines or [])
        for line in list(self.lines or []):
            self.remove_lines(line)
        self.total = 0.0
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), line_count=line_count))

    # -------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------
    def collect_events(self) -> list:
        """Return the events raised so far and empty the buffer.

        The cart never passes through a repository, so nothing else
        dispatches or clears them.
        """
        events = list(self._events)
        self._events.clear()
        return events
