"""Wiring of the commerce services for one session.

Each call builds fresh, independent instances over one data directory; nothing
here is a module-level singleton.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from commerce.cart.store import CartStore
from commerce.checkout.orchestrator import CheckoutOrchestrator
from commerce.config import CommerceSettings
from commerce.earnings.ledger import EarningsLedger
from commerce.identity.session import IdentitySession
from commerce.notifications.adapters import LogNotifier
from commerce.notifications.port import NotifierPort
from commerce.order.ledger import OrderLedger
from commerce.payment.gateway import PaymentGateway, build_gateway
from commerce.payment.simulator import PaymentSimulator
from commerce.shared.persistence import SnapshotStore

logger = structlog.get_logger(__name__)


@dataclass
class CommerceServices:
    store: SnapshotStore
    session: IdentitySession
    cart: CartStore
    orders: OrderLedger
    earnings: EarningsLedger
    payment: PaymentSimulator
    checkout: CheckoutOrchestrator


def load_seed_orders(settings: CommerceSettings) -> list[dict]:
    """Seed orders from the JSON file named in the settings, if any."""
    if settings.seed_orders is None:
        return []
    seed_store = SnapshotStore(settings.seed_orders.parent)
    return seed_store.load(settings.seed_orders.stem, default=[], expected_type=list)


def build_services(
    settings: CommerceSettings,
    accounts: Iterable[dict] = (),
    gateway: PaymentGateway | None = None,
    notifier: NotifierPort | None = None,
) -> CommerceServices:
    store = SnapshotStore(settings.data_dir)
    session = IdentitySession(store, accounts=accounts)
    cart = CartStore(store)
    orders = OrderLedger(store, seed=load_seed_orders(settings))
    earnings = EarningsLedger(session)
    payment = PaymentSimulator(
        gateway=gateway or build_gateway(),
        processing_delay=settings.payment_delay,
        confirmation_delay=settings.confirmation_delay,
        currency=settings.currency,
    )
    checkout = CheckoutOrchestrator(
        cart=cart,
        orders=orders,
        earnings=earnings,
        session=session,
        payment=payment,
        notifier=notifier or LogNotifier(),
    )

    logger.info("Commerce services ready", data_dir=str(settings.data_dir))
    return CommerceServices(
        store=store,
        session=session,
        cart=cart,
        orders=orders,
        earnings=earnings,
        payment=payment,
        checkout=checkout,
    )
