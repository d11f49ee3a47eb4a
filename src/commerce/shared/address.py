"""DeliveryAddress value object shared by the session and the checkout."""

from protean.fields import String

from commerce.domain import commerce

REQUIRED_ADDRESS_FIELDS = ("line1", "city", "state", "pincode")
ADDRESS_FIELDS = ("line1", "line2", "city", "state", "pincode", "phone")


@commerce.value_object
class DeliveryAddress:
    """Where a home visit takes place or a digital product is delivered.

    Captured on every order as a flattened string, so later edits to the
    buyer's saved address do not rewrite past orders.
    """

    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=20)
    phone = String(max_length=20)

    @classmethod
    def from_dict(cls, data: dict) -> "DeliveryAddress":
        return cls(**{name: data.get(name) for name in ADDRESS_FIELDS if data.get(name) not in (None, "")})

    def flattened(self) -> str:
        return f"{self.line1}, {self.line2 or ''}, {self.city}, {self.state} - {self.pincode}"

    def as_dict(self) -> dict:
        return {name: getattr(self, name) or "" for name in ADDRESS_FIELDS}


def missing_address_fields(data: dict | None) -> list[str]:
    """Names of required address fields that are absent or blank."""
    data = data or {}
    return [name for name in REQUIRED_ADDRESS_FIELDS if not str(data.get(name) or "").strip()]
