"""Domain events for the session Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemAdded:
    """A menu item was appended to the cart as a new line."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    item_name = String(required=True)
    unit_price = Float(required=True)
    quantity = Integer(required=True)
    new_total = Float(required=True)


@ordering.event(part_of="Cart")
class PromotionApplied:
    """A percentage discount was applied to the current cart total.

    Promotions compound: each one reduces whatever total the cart had at the
    time, so the event carries both totals.
    """

    __version__ = 1

    cart_id = Identifier(required=True)
    discount_percent = Float(required=True)
    previous_total = Float(required=True)
    new_total = Float(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """The cart was emptied, usually after its order was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_count = Integer(required=True)
