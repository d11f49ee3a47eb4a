"""Integer money arithmetic shared by the cart and the order ledger."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

GST_RATE = Decimal("0.05")


def round_half_up(value) -> int:
    """Round to the nearest whole currency unit, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def tax_on(amount: int) -> int:
    return round_half_up(Decimal(amount) * GST_RATE)


@dataclass(frozen=True)
class CartTotals:
    """Subtotal, tax and grand total of a cart, in whole currency units."""

    subtotal: int = 0
    tax: int = 0
    total: int = 0

    @classmethod
    def from_subtotal(cls, subtotal: int) -> "CartTotals":
        tax = tax_on(subtotal)
        return cls(subtotal=subtotal, tax=tax, total=subtotal + tax)

    def to_dict(self) -> dict:
        return {"subtotal": self.subtotal, "tax": self.tax, "total": self.total}
