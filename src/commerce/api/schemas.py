"""Pydantic request/response schemas for the commerce API.

These are external contracts, separate from the Protean domain elements.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddOnSchema(BaseModel):
    id: str | None = None
    name: str
    price: int = Field(ge=0)


class AddressSchema(BaseModel):
    line1: str = ""
    line2: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    phone: str = ""


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)
    name: str
    phone: str = ""
    role: Literal["customer", "artist"] = "customer"
    bio: str = ""
    sample_id: str = ""


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    phone: str | None = None
    role: str
    avatar: str | None = None
    address: AddressSchema | None = None
    bio: str | None = None
    verified: bool | None = None
    rating: float | None = None
    total_orders: int | None = None
    earnings: int | None = None
    pending_payout: int | None = None
    languages: list[str] = []
    location: str | None = None


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class CartItemSchema(BaseModel):
    product_id: str
    title: str
    image: str | None = None
    price: int = Field(ge=0)
    artist_id: str
    artist_name: str | None = None
    service_type: Literal["home-visit", "digital"] = "digital"
    scheduled_date: str | None = None
    scheduled_time: str | None = None
    quantity: int = Field(ge=1, default=1)
    add_ons: list[AddOnSchema] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-mehendi-01",
                    "title": "Bridal Mehendi",
                    "price": 4500,
                    "artist_id": "artist-001",
                    "artist_name": "Priya Sharma",
                    "service_type": "home-visit",
                    "scheduled_date": "2026-11-02",
                    "scheduled_time": "10:00 AM",
                    "quantity": 1,
                    "add_ons": [{"id": "addon-1", "name": "Feet design", "price": 800}],
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    title: str | None = None
    image: str | None = None
    price: int | None = Field(default=None, ge=0)
    service_type: Literal["home-visit", "digital"] | None = None
    scheduled_date: str | None = None
    scheduled_time: str | None = None
    quantity: int | None = Field(default=None, ge=1)
    add_ons: list[AddOnSchema] | None = None


class CartTotalsResponse(BaseModel):
    subtotal: int
    tax: int
    total: int


class CartResponse(BaseModel):
    items: list[CartItemSchema]
    item_count: int
    totals: CartTotalsResponse


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    address: AddressSchema
    method: Literal["card", "upi", "netbanking", "cod"] = "card"
    simulate_failure: bool = False


class CheckoutResponse(BaseModel):
    transaction_id: str


# ---------------------------------------------------------------------------
# Orders and earnings
# ---------------------------------------------------------------------------
class OrderAddOnSchema(BaseModel):
    name: str
    price: int


class OrderResponse(BaseModel):
    id: str
    transaction_id: str
    customer_id: str
    artist_id: str
    product_id: str
    product_title: str | None = None
    product_image: str | None = None
    service_type: str
    scheduled_date: str | None = None
    scheduled_time: str | None = None
    status: str
    price: int
    add_ons: list[OrderAddOnSchema] = []
    tax: int
    total: int
    address: str | None = None
    created_at: str | None = None


class EarningsResponse(BaseModel):
    earnings: int
    pending_payout: int
    total_orders: int


class PayoutResponse(BaseModel):
    amount: int
    earnings: int
    pending_payout: int
