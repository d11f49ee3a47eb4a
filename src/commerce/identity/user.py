"""User aggregate — the signed-in identity the checkout reads and credits.

Customers carry a saved delivery address. Artists carry their public profile
and the earnings record: cumulative earnings (never decreases), the pending
payout balance (reset by a payout request) and the count of credited orders.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import Boolean, Float, Integer, String, Text, ValueObject

from commerce.domain import commerce
from commerce.identity.events import EarningsCredited, PayoutRequested, UserSignedUp
from commerce.shared.address import DeliveryAddress


class Role(Enum):
    CUSTOMER = "customer"
    ARTIST = "artist"


PROFILE_FIELDS = ("name", "phone", "avatar", "address", "bio", "languages", "location")

_SNAPSHOT_FIELDS = (
    "email",
    "name",
    "phone",
    "role",
    "avatar",
    "bio",
    "verified",
    "rating",
    "total_orders",
    "earnings",
    "pending_payout",
    "location",
    "sample_id",
)


@commerce.aggregate
class User:
    email = String(required=True, max_length=254)
    name = String(required=True, max_length=255)
    phone = String(max_length=20)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    avatar = String(max_length=1000)
    address = ValueObject(DeliveryAddress)

    # Artist profile and earnings record
    bio = Text()
    verified = Boolean(default=False)
    rating = Float(default=0.0)
    total_orders = Integer(default=0, min_value=0)
    earnings = Integer(default=0, min_value=0)
    pending_payout = Integer(default=0, min_value=0)
    languages = Text(default="[]")  # JSON: list of language names
    location = String(max_length=255)
    sample_id = String(max_length=255)

    @classmethod
    def sign_up(cls, user_id, email, name, phone, role, bio="", sample_id=""):
        user = cls(
            id=user_id,
            email=email,
            name=name,
            phone=phone,
            role=Role(role).value,
            avatar=f"https://api.dicebear.com/7.x/avataaars/svg?seed={email}",
            bio=bio,
            sample_id=sample_id,
        )
        user.raise_(
            UserSignedUp(
                user_id=str(user.id),
                email=email,
                role=user.role,
                signed_up_at=datetime.now(UTC),
            )
        )
        return user

    # -------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------
    @classmethod
    def from_snapshot(cls, data: dict) -> "User":
        values = {name: data[name] for name in _SNAPSHOT_FIELDS if data.get(name) is not None}
        values["id"] = data["id"]
        values["languages"] = json.dumps(data.get("languages") or [])
        if data.get("address"):
            values["address"] = DeliveryAddress.from_dict(data["address"])
        return cls(**values)

    def to_snapshot(self) -> dict:
        snapshot = {"id": str(self.id)}
        snapshot.update({name: getattr(self, name) for name in _SNAPSHOT_FIELDS})
        snapshot["languages"] = self.language_list()
        snapshot["address"] = self.address.as_dict() if self.address else None
        return snapshot

    def language_list(self) -> list[str]:
        return json.loads(self.languages) if self.languages else []

    @property
    def is_artist(self) -> bool:
        return self.role == Role.ARTIST.value

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(self, changes: dict) -> None:
        unknown = sorted(set(changes) - set(PROFILE_FIELDS))
        if unknown:
            raise ValidationError({name: ["Field cannot be updated on a profile"] for name in unknown})

        for name, value in changes.items():
            if name == "address" and isinstance(value, dict):
                value = DeliveryAddress.from_dict(value)
            elif name == "languages" and not isinstance(value, str):
                value = json.dumps(list(value or []))
            setattr(self, name, value)

    # -------------------------------------------------------------------
    # Earnings
    # -------------------------------------------------------------------
    def _assert_artist(self) -> None:
        if not self.is_artist:
            raise InvalidOperationError("Only artists have an earnings balance")

    def credit_earnings(self, amount: int) -> None:
        """Credit one order's earnings to both balances."""
        self._assert_artist()
        if amount is None or amount < 0:
            raise ValidationError({"amount": ["Credited amount must be a non-negative number"]})

        self.earnings = (self.earnings or 0) + amount
        self.pending_payout = (self.pending_payout or 0) + amount
        self.total_orders = (self.total_orders or 0) + 1
        self.raise_(
            EarningsCredited(
                user_id=str(self.id),
                amount=amount,
                earnings=self.earnings,
                pending_payout=self.pending_payout,
                total_orders=self.total_orders,
            )
        )

    def request_payout(self) -> int:
        """Withdraw the pending balance. Cumulative earnings are unaffected."""
        self._assert_artist()
        amount = self.pending_payout or 0
        self.pending_payout = 0
        if amount:
            self.raise_(
                PayoutRequested(
                    user_id=str(self.id),
                    amount=amount,
                    requested_at=datetime.now(UTC),
                )
            )
        return amount
