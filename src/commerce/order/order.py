"""Order aggregate — one durable record per fulfilled cart line.

Orders are created in the Confirmed state by a successful checkout and are
never deleted. The seller moves them on by accepting (Scheduled) or
declining (Cancelled); an unconditional status write is also available to
collaborators that own other transitions.

State Machine (caller-driven transitions):
    CONFIRMED → SCHEDULED   (seller accepts)
    CONFIRMED → CANCELLED   (seller declines)
"""

import json
import time
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from commerce.cart.cart import ServiceType
from commerce.domain import commerce
from commerce.order.events import OrderPlaced, OrderStatusChanged
from commerce.shared.money import GST_RATE, round_half_up


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: set(),
    OrderStatus.CONFIRMED: {OrderStatus.SCHEDULED, OrderStatus.CANCELLED},
    OrderStatus.SCHEDULED: set(),
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

ORDER_FIELDS = (
    "id",
    "transaction_id",
    "customer_id",
    "artist_id",
    "product_id",
    "product_title",
    "product_image",
    "service_type",
    "scheduled_date",
    "scheduled_time",
    "status",
    "price",
    "add_ons",
    "tax",
    "total",
    "address",
    "created_at",
)


def new_order_id() -> str:
    # lines of one checkout share the millisecond, so the suffix alone separates them
    return f"ORD-{int(time.time() * 1000)}-{uuid4().hex[:12].upper()}"


def line_pricing(price: int, add_on_prices) -> tuple[int, int]:
    """Per-line tax and total for an order.

    Tax applies to the unit price only and add-ons are added after tax, so
    the sum over lines can differ from the cart's aggregate tax and total.
    """
    tax = round_half_up(Decimal(price) * GST_RATE)
    total = round_half_up(Decimal(price) * (1 + GST_RATE) + sum(add_on_prices))
    return tax, total


@commerce.aggregate
class Order:
    transaction_id = String(required=True, max_length=100)
    customer_id = Identifier(required=True)
    artist_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_title = String(max_length=255)
    product_image = String(max_length=1000)
    service_type = String(choices=ServiceType, default=ServiceType.DIGITAL.value)
    scheduled_date = String(max_length=10)
    scheduled_time = String(max_length=20)
    status = String(choices=OrderStatus, default=OrderStatus.CONFIRMED.value)
    price = Integer(required=True, min_value=0)
    add_ons = Text(default="[]")  # JSON: list of {name, price}
    tax = Integer(default=0)
    total = Integer(default=0)
    address = String(max_length=1000)
    created_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, line, transaction_id, customer_id, address):
        """Create a Confirmed order from one cart line."""
        add_ons = [{"name": a["name"], "price": a["price"]} for a in line.add_on_list()]
        tax, total = line_pricing(line.price, [a["price"] for a in add_ons])
        now = datetime.now(UTC)

        order = cls(
            id=new_order_id(),
            transaction_id=transaction_id,
            customer_id=customer_id,
            artist_id=line.artist_id,
            product_id=line.product_id,
            product_title=line.title,
            product_image=line.image,
            service_type=line.service_type,
            scheduled_date=line.scheduled_date or None,
            scheduled_time=line.scheduled_time or None,
            status=OrderStatus.CONFIRMED.value,
            price=line.price,
            add_ons=json.dumps(add_ons),
            tax=tax,
            total=total,
            address=address,
            created_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                transaction_id=transaction_id,
                customer_id=str(customer_id),
                artist_id=str(line.artist_id),
                product_id=str(line.product_id),
                total=total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------
    @classmethod
    def from_snapshot(cls, data: dict) -> "Order":
        values = {name: data[name] for name in ORDER_FIELDS if data.get(name) is not None}
        values["add_ons"] = json.dumps(data.get("add_ons") or [])
        if isinstance(values.get("created_at"), str):
            values["created_at"] = datetime.fromisoformat(values["created_at"])
        return cls(**values)

    def to_snapshot(self) -> dict:
        snapshot = {name: getattr(self, name) for name in ORDER_FIELDS}
        snapshot["id"] = str(self.id)
        snapshot["add_ons"] = self.add_on_list()
        snapshot["created_at"] = self.created_at.isoformat() if self.created_at else None
        return snapshot

    def add_on_list(self) -> list[dict]:
        return json.loads(self.add_ons) if self.add_ons else []

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def set_status(self, new_status):
        """Write a new status without checking the transition map."""
        try:
            target = OrderStatus(new_status)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from exc

        previous = self.status
        self.status = target.value
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=datetime.now(UTC),
            )
        )

    def accept(self):
        """Seller accepts a confirmed order and schedules it."""
        self._assert_can_transition(OrderStatus.SCHEDULED)
        self.set_status(OrderStatus.SCHEDULED)

    def decline(self):
        """Seller declines a confirmed order."""
        self._assert_can_transition(OrderStatus.CANCELLED)
        self.set_status(OrderStatus.CANCELLED)
