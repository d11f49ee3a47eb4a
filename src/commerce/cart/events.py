"""Domain events for the Cart aggregate."""

from protean.fields import Boolean, Identifier, Integer, Text

from commerce.domain import commerce


@commerce.event(part_of="Cart")
class CartItemAdded:
    """A line was added to the cart, or an existing line was replaced."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    replaced = Boolean(default=False)


@commerce.event(part_of="Cart")
class CartItemUpdated:
    """Fields of an existing cart line were changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: names of the changed fields


@commerce.event(part_of="Cart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.event(part_of="Cart")
class CartCleared:
    """Every line was removed from the cart, usually after a successful checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
