"""CartStore — owns the buyer's in-flight cart and keeps it durable.

Every mutating call updates the Cart aggregate and then rewrites the full
cart snapshot before returning. A missing or corrupt snapshot on start-up
yields an empty cart.
"""

import structlog
from protean.exceptions import ValidationError

from commerce.cart.cart import Cart, CartItem
from commerce.shared.money import CartTotals
from commerce.shared.persistence import CART_KEY, SnapshotStore

logger = structlog.get_logger(__name__)


class CartStore:
    def __init__(self, store: SnapshotStore) -> None:
        self._store = store
        self._cart = Cart.create(lines=self._load_lines())

    def _load_lines(self) -> list[CartItem]:
        records = self._store.load(CART_KEY, default=[], expected_type=list)
        try:
            return [CartItem.from_snapshot(record) for record in records]
        except (ValidationError, AttributeError, TypeError) as exc:
            logger.warning("Discarding unusable cart snapshot", error=str(exc))
            return []

    def _persist(self) -> None:
        self._store.save(CART_KEY, [item.to_snapshot() for item in self._cart.items])
        for event in self._cart._events:
            logger.debug("Cart event recorded", event_type=event.__class__.__name__)
        self._cart._events.clear()

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items(self) -> list[CartItem]:
        return list(self._cart.items)

    @property
    def item_count(self) -> int:
        return self._cart.item_count

    def is_empty(self) -> bool:
        return not self._cart.items

    def get(self, product_id) -> CartItem | None:
        return self._cart.line_for(product_id)

    def get_total(self) -> CartTotals:
        """Recompute subtotal, tax and total from the current lines."""
        return self._cart.totals()

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, item: CartItem | dict) -> None:
        if isinstance(item, dict):
            item = CartItem.from_snapshot(item)
        self._cart.add_item(item)
        self._persist()
        logger.info("Cart line added", product_id=str(item.product_id), item_count=self.item_count)

    def remove_item(self, product_id) -> None:
        if self._cart.remove_item(product_id):
            self._persist()
            logger.info("Cart line removed", product_id=str(product_id), item_count=self.item_count)

    def update_item(self, product_id, **changes) -> None:
        if self._cart.update_item(product_id, changes):
            self._persist()
            logger.info("Cart line updated", product_id=str(product_id), fields=sorted(changes))

    def clear(self) -> None:
        self._cart.clear()
        self._persist()
        logger.info("Cart cleared")
