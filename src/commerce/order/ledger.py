"""OrderLedger — owns the order collection and keeps it durable.

Orders are held newest-first, as they are persisted. The collection is
rewritten in full after every mutation. When nothing has been persisted yet,
a seed collection supplied by the caller (for example demo data) becomes the
initial collection; the ledger never invents orders of its own.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from commerce.identity.user import Role
from commerce.order.order import Order, OrderStatus
from commerce.shared.persistence import ORDERS_KEY, SnapshotStore

logger = structlog.get_logger(__name__)


class OrderLedger:
    def __init__(self, store: SnapshotStore, seed: list[dict] | None = None) -> None:
        self._store = store
        self._orders: list[Order] = self._load(seed or [])

    def _load(self, seed: list[dict]) -> list[Order]:
        records = self._store.load(ORDERS_KEY, default=None, expected_type=list)
        seeded = records is None
        if seeded:
            records = seed

        try:
            orders = [Order.from_snapshot(record) for record in records]
        except (ValidationError, AttributeError, TypeError, ValueError) as exc:
            logger.warning("Discarding unusable order snapshot", error=str(exc))
            return []

        if seeded and orders:
            self._store.save(ORDERS_KEY, [order.to_snapshot() for order in orders])
            logger.info("Order ledger seeded", count=len(orders))
        return orders

    def _persist(self, touched: list[Order]) -> None:
        self._store.save(ORDERS_KEY, [order.to_snapshot() for order in self._orders])
        for order in touched:
            for event in order._events:
                logger.debug("Order event recorded", event_type=event.__class__.__name__, order_id=str(order.id))
            order._events.clear()

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    def get(self, order_id) -> Order:
        order = next((o for o in self._orders if str(o.id) == str(order_id)), None)
        if order is None:
            raise ObjectNotFoundError(f"Order {order_id} does not exist")
        return order

    def orders_for(self, role, identity_id) -> list[Order]:
        """Orders placed by a customer, or received by an artist, newest first."""
        role = Role(role)
        if role is Role.ARTIST:
            return [o for o in self._orders if str(o.artist_id) == str(identity_id)]
        return [o for o in self._orders if str(o.customer_id) == str(identity_id)]

    def pending_for_artist(self, artist_id) -> list[Order]:
        """Orders awaiting the artist's accept/decline decision."""
        return [o for o in self.orders_for(Role.ARTIST, artist_id) if o.status == OrderStatus.CONFIRMED.value]

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def create_orders_for_checkout(self, cart_lines, transaction_id, customer_id, address) -> list[Order]:
        """Create one Confirmed order per cart line, all sharing ``transaction_id``.

        Lines are processed in cart order; each new order is placed at the head
        of the collection, and the whole batch is persisted in one write.
        """
        created = [Order.place(line, transaction_id, customer_id, address) for line in cart_lines]
        for order in created:
            self._orders.insert(0, order)
        self._persist(created)

        logger.info(
            "Orders created for checkout",
            transaction_id=transaction_id,
            customer_id=str(customer_id),
            count=len(created),
        )
        return created

    def set_status(self, order_id, new_status) -> Order:
        order = self.get(order_id)
        order.set_status(new_status)
        self._persist([order])
        logger.info("Order status set", order_id=str(order_id), status=order.status)
        return order

    def accept(self, order_id) -> Order:
        order = self.get(order_id)
        order.accept()
        self._persist([order])
        logger.info("Order accepted", order_id=str(order_id))
        return order

    def decline(self, order_id) -> Order:
        order = self.get(order_id)
        order.decline()
        self._persist([order])
        logger.info("Order declined", order_id=str(order_id))
        return order
