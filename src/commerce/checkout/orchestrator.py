"""CheckoutOrchestrator — turns the cart into orders through one payment.

Flow:
    1. Validate the identity, the cart and the delivery address
    2. Start the payment for the cart total
    3a. Success → create one order per cart line (one transaction id),
        credit the signed-in artist for their own lines, clear the cart
    3b. Failure → nothing changes; the next attempt resets the payment

Orders are only ever created from the payment's success callback, all lines
from that single event, so no partial order set is persisted.
"""

import asyncio
from collections.abc import Callable

import structlog
from protean.exceptions import ValidationError

from commerce.cart.booking import is_iso_date
from commerce.cart.store import CartStore
from commerce.earnings.ledger import EarningsLedger
from commerce.identity.session import IdentitySession
from commerce.identity.user import User
from commerce.notifications.adapters import LogNotifier
from commerce.notifications.port import NoticeVariant, NotifierPort
from commerce.order.ledger import OrderLedger
from commerce.payment.simulator import PaymentMethod, PaymentSimulator, PaymentStatus
from commerce.shared.address import DeliveryAddress, missing_address_fields
from commerce.shared.exceptions import CheckoutCancelled, TransactionFailure

logger = structlog.get_logger(__name__)


class CheckoutOrchestrator:
    def __init__(
        self,
        cart: CartStore,
        orders: OrderLedger,
        earnings: EarningsLedger,
        session: IdentitySession,
        payment: PaymentSimulator,
        notifier: NotifierPort | None = None,
    ) -> None:
        self.cart = cart
        self.orders = orders
        self.earnings = earnings
        self.session = session
        self.payment = payment
        self.notifier = notifier or LogNotifier()
        self.last_transaction_id: str | None = None

    # -------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------
    def validate(self, address: dict) -> DeliveryAddress:
        """Check everything needed before a payment may start."""
        self.session.require_current()
        if self.cart.is_empty():
            raise ValidationError({"cart": ["Your cart is empty"]})

        errors = {}
        missing = missing_address_fields(address)
        if missing:
            errors["address"] = [f"Missing {', '.join(missing)}"]

        for line in self.cart.items:
            if not line.is_home_visit:
                continue
            if not line.scheduled_date or not line.scheduled_time:
                errors.setdefault("schedule", []).append(f"Select date & time for {line.title}")
            elif not is_iso_date(line.scheduled_date):
                errors.setdefault("schedule", []).append(f"Invalid date for {line.title}")

        if errors:
            raise ValidationError(errors)
        return DeliveryAddress.from_dict(address)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def begin(
        self,
        address: dict,
        method: PaymentMethod | str = PaymentMethod.CARD,
        on_complete: Callable[[str], None] | None = None,
        simulate_failure: bool | None = None,
    ) -> int:
        """Validate and start the payment. Returns the amount being charged.

        A finished previous attempt (failed or success) is reset here first,
        so a retry after a decline needs no separate reset call.
        """
        delivery = self.validate(address)
        customer = self.session.require_current()

        if self.payment.status in (PaymentStatus.FAILED, PaymentStatus.SUCCESS):
            self.payment.reset()

        amount = self.cart.get_total().total
        self.payment.start(
            method,
            amount,
            on_success=lambda transaction_id: self._complete(transaction_id, customer, delivery, on_complete),
            on_failure=self._declined,
            simulate_failure=simulate_failure,
        )
        logger.info("Checkout started", customer_id=str(customer.id), amount=amount, lines=len(self.cart.items))
        return amount

    async def checkout(
        self,
        address: dict,
        method: PaymentMethod | str = PaymentMethod.CARD,
        simulate_failure: bool | None = None,
    ) -> str:
        """Run a checkout to completion and return its transaction id.

        Raises ValidationError before any payment starts, TransactionFailure
        when the payment is declined and CheckoutCancelled when the flow is
        torn down mid-payment. Cancelling the awaiting coroutine tears
        the payment down as well.
        """
        self.begin(address, method, simulate_failure=simulate_failure)
        try:
            outcome = await self.payment.wait()
        except asyncio.CancelledError:
            # The caller is gone; the payment must not complete on its own
            self.teardown()
            raise

        if outcome.cancelled:
            raise CheckoutCancelled()
        if outcome.status is PaymentStatus.FAILED:
            raise TransactionFailure(outcome.failure_reason or "Payment failed")
        return outcome.transaction_id

    def teardown(self) -> None:
        """Abort an in-flight payment; its result is discarded."""
        self.payment.teardown()

    # -------------------------------------------------------------------
    # Payment callbacks
    # -------------------------------------------------------------------
    def _complete(self, transaction_id: str, customer: User, delivery: DeliveryAddress, on_complete=None) -> None:
        lines = self.cart.items
        created = self.orders.create_orders_for_checkout(
            lines,
            transaction_id=transaction_id,
            customer_id=str(customer.id),
            address=delivery.flattened(),
        )

        # Self-fulfilment demo: the signed-in artist is credited for their own lines
        current = self.session.current
        if current is not None and current.is_artist:
            for line in lines:
                if str(line.artist_id) == str(current.id):
                    self.earnings.credit(line.price)

        self.cart.clear()
        self.last_transaction_id = transaction_id
        logger.info("Checkout completed", transaction_id=transaction_id, orders=len(created))
        self.notifier.notify("Payment Successful!", f"Your order is being processed ({transaction_id})")

        if on_complete is not None:
            on_complete(transaction_id)

    def _declined(self, reason: str) -> None:
        logger.info("Checkout payment declined", reason=reason)
        self.notifier.notify("Payment Failed", "Please try again with different details", NoticeVariant.DESTRUCTIVE)
