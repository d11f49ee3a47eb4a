"""FastAPI routes for the commerce domain — session, cart, checkout, orders, earnings."""

from fastapi import APIRouter, Depends, HTTPException, Request

from commerce.api.schemas import (
    CartItemSchema,
    CartResponse,
    CartTotalsResponse,
    CheckoutRequest,
    CheckoutResponse,
    EarningsResponse,
    LoginRequest,
    OrderResponse,
    PayoutResponse,
    SignupRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UserResponse,
)
from commerce.services import CommerceServices


def get_services(request: Request) -> CommerceServices:
    return request.app.state.services


def _user_response(user) -> UserResponse:
    return UserResponse(**user.to_snapshot())


def _cart_response(services: CommerceServices) -> CartResponse:
    totals = services.cart.get_total()
    return CartResponse(
        items=[CartItemSchema(**item.to_snapshot()) for item in services.cart.items],
        item_count=services.cart.item_count,
        totals=CartTotalsResponse(**totals.to_dict()),
    )


# ---------------------------------------------------------------------------
# Session Router
# ---------------------------------------------------------------------------
session_router = APIRouter(prefix="/session", tags=["session"])


@session_router.get("", response_model=UserResponse)
async def current_identity(services: CommerceServices = Depends(get_services)) -> UserResponse:
    if services.session.current is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return _user_response(services.session.current)


@session_router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest, services: CommerceServices = Depends(get_services)) -> UserResponse:
    return _user_response(services.session.login(body.email, body.password))


@session_router.post("/signup", status_code=201, response_model=UserResponse)
async def signup(body: SignupRequest, services: CommerceServices = Depends(get_services)) -> UserResponse:
    user = services.session.signup(**body.model_dump())
    return _user_response(user)


@session_router.post("/logout", response_model=StatusResponse)
async def logout(services: CommerceServices = Depends(get_services)) -> StatusResponse:
    services.session.logout()
    return StatusResponse(status="signed_out")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(services: CommerceServices = Depends(get_services)) -> CartResponse:
    return _cart_response(services)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: CartItemSchema, services: CommerceServices = Depends(get_services)) -> CartResponse:
    services.cart.add_item(body.model_dump())
    return _cart_response(services)


@cart_router.patch("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateCartItemRequest,
    services: CommerceServices = Depends(get_services),
) -> CartResponse:
    services.cart.update_item(product_id, **body.model_dump(exclude_unset=True))
    return _cart_response(services)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, services: CommerceServices = Depends(get_services)) -> CartResponse:
    services.cart.remove_item(product_id)
    return _cart_response(services)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(services: CommerceServices = Depends(get_services)) -> CartResponse:
    services.cart.clear()
    return _cart_response(services)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
async def checkout(body: CheckoutRequest, services: CommerceServices = Depends(get_services)) -> CheckoutResponse:
    """Charge the cart total and turn every cart line into an order.

    Waits for the simulated payment to resolve before responding.
    """
    transaction_id = await services.checkout.checkout(
        body.address.model_dump(),
        method=body.method,
        simulate_failure=body.simulate_failure,
    )
    return CheckoutResponse(transaction_id=transaction_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _own_order(services: CommerceServices, order_id: str):
    user = services.session.require_current()
    order = services.orders.get(order_id)
    if not user.is_artist or str(order.artist_id) != str(user.id):
        raise HTTPException(status_code=403, detail="Only the order's artist can act on it")
    return order


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(services: CommerceServices = Depends(get_services)) -> list[OrderResponse]:
    user = services.session.require_current()
    return [OrderResponse(**order.to_snapshot()) for order in services.orders.orders_for(user.role, user.id)]


@order_router.post("/{order_id}/accept", response_model=OrderResponse)
async def accept_order(order_id: str, services: CommerceServices = Depends(get_services)) -> OrderResponse:
    _own_order(services, order_id)
    return OrderResponse(**services.orders.accept(order_id).to_snapshot())


@order_router.post("/{order_id}/decline", response_model=OrderResponse)
async def decline_order(order_id: str, services: CommerceServices = Depends(get_services)) -> OrderResponse:
    _own_order(services, order_id)
    return OrderResponse(**services.orders.decline(order_id).to_snapshot())


# ---------------------------------------------------------------------------
# Earnings Router
# ---------------------------------------------------------------------------
earnings_router = APIRouter(prefix="/earnings", tags=["earnings"])


@earnings_router.get("", response_model=EarningsResponse)
async def get_earnings(services: CommerceServices = Depends(get_services)) -> EarningsResponse:
    balance = services.earnings.balance()
    return EarningsResponse(
        earnings=balance.earnings,
        pending_payout=balance.pending_payout,
        total_orders=balance.total_orders,
    )


@earnings_router.post("/payout", response_model=PayoutResponse)
async def request_payout(services: CommerceServices = Depends(get_services)) -> PayoutResponse:
    amount = services.earnings.request_payout()
    balance = services.earnings.balance()
    return PayoutResponse(amount=amount, earnings=balance.earnings, pending_payout=balance.pending_payout)
