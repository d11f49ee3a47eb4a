"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """An order was created for one cart line after a successful payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    transaction_id = String(required=True)
    customer_id = Identifier(required=True)
    artist_id = Identifier(required=True)
    product_id = Identifier(required=True)
    total = Integer(required=True)
    placed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderStatusChanged:
    """An order moved to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
