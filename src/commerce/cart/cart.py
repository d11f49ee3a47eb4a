"""Cart aggregate — the buyer's pending selections before checkout.

The cart holds at most one line per product. Adding a product that is already
in the cart replaces that line wholesale (no field merging); quantities and
add-ons come from the catalogue selection exactly as given.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from commerce.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from commerce.domain import commerce
from commerce.shared.money import CartTotals


class ServiceType(Enum):
    HOME_VISIT = "home-visit"
    DIGITAL = "digital"


CART_ITEM_FIELDS = (
    "product_id",
    "title",
    "image",
    "price",
    "artist_id",
    "artist_name",
    "service_type",
    "scheduled_date",
    "scheduled_time",
    "quantity",
    "add_ons",
)

# product_id is the line's key and cannot be changed through an update
UPDATABLE_FIELDS = tuple(name for name in CART_ITEM_FIELDS if name != "product_id")


@commerce.value_object
class AddOn:
    """An optional priced extra chosen alongside a product."""

    addon_id = String(max_length=50)
    name = String(required=True, max_length=255)
    price = Integer(required=True, min_value=0)


def encode_add_ons(add_ons) -> str:
    """Serialize a list of AddOn value objects or dicts to the JSON column format."""
    encoded = []
    for add_on in add_ons or []:
        if not isinstance(add_on, AddOn):
            add_on = AddOn(addon_id=add_on.get("id"), name=add_on.get("name"), price=add_on.get("price"))
        encoded.append({"id": add_on.addon_id, "name": add_on.name, "price": add_on.price})
    return json.dumps(encoded)


@commerce.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    image = String(max_length=1000)
    price = Integer(required=True, min_value=0)
    artist_id = Identifier(required=True)
    artist_name = String(max_length=255)
    service_type = String(choices=ServiceType, default=ServiceType.DIGITAL.value)
    scheduled_date = String(max_length=10)  # ISO date
    scheduled_time = String(max_length=20)
    quantity = Integer(min_value=1, default=1)
    add_ons = Text(default="[]")  # JSON: list of {id, name, price}

    @classmethod
    def from_snapshot(cls, data: dict) -> "CartItem":
        values = {name: data[name] for name in CART_ITEM_FIELDS if data.get(name) is not None}
        values["add_ons"] = encode_add_ons(data.get("add_ons"))
        return cls(**values)

    def to_snapshot(self) -> dict:
        snapshot = {name: getattr(self, name) for name in CART_ITEM_FIELDS}
        snapshot["add_ons"] = self.add_on_list()
        return snapshot

    def add_on_list(self) -> list[dict]:
        return json.loads(self.add_ons) if self.add_ons else []

    @property
    def add_on_total(self) -> int:
        return sum(add_on["price"] for add_on in self.add_on_list())

    @property
    def line_subtotal(self) -> int:
        return (self.price + self.add_on_total) * self.quantity

    @property
    def is_home_visit(self) -> bool:
        return self.service_type == ServiceType.HOME_VISIT.value


@commerce.aggregate
class Cart:
    items = HasMany(CartItem)
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, lines=None):
        """Build a cart, optionally restoring previously persisted lines in order."""
        cart = cls(updated_at=datetime.now(UTC))
        for line in lines or []:
            cart._put_line(line)
        return cart

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def _put_line(self, item):
        """Append ``item`` or overwrite the line for its product. Returns the replaced line, if any."""
        existing = self.line_for(item.product_id)
        if existing is not None:
            for name in UPDATABLE_FIELDS:
                setattr(existing, name, getattr(item, name))
        else:
            self.add_items(item)
        return existing

    def add_item(self, item):
        """Append a line, or replace the existing line for the same product."""
        existing = self._put_line(item)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                replaced=existing is not None,
            )
        )

    def update_item(self, product_id, changes):
        """Merge ``changes`` into the line for ``product_id``. No-op when absent."""
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError({name: ["Field cannot be updated on a cart line"] for name in unknown})

        existing = self.line_for(product_id)
        if existing is None:
            return False

        # Validate the merged line as a whole before touching the live one
        merged = CartItem.from_snapshot({**existing.to_snapshot(), **changes})
        for name in changes:
            setattr(existing, name, getattr(merged, name))

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                changes=json.dumps(sorted(changes)),
            )
        )
        return True

    def remove_item(self, product_id):
        """Remove the line for ``product_id``. No-op when absent."""
        existing = self.line_for(product_id)
        if existing is None:
            return False

        self.remove_items(existing)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=existing.quantity,
            )
        )
        return True

    def clear(self):
        lines = list(self.items)
        for line in lines:
            self.remove_items(line)

        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=len(lines)))

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def totals(self) -> CartTotals:
        return CartTotals.from_subtotal(sum(item.line_subtotal for item in self.items))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
