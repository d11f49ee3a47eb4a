import pytest
from commerce.cart.cart import CartItem
from commerce.cart.store import CartStore
from commerce.checkout.orchestrator import CheckoutOrchestrator
from commerce.earnings.ledger import EarningsLedger
from commerce.identity.session import IdentitySession
from commerce.notifications.adapters import RecordingNotifier
from commerce.order.ledger import OrderLedger
from commerce.payment.gateway import SimulatedGateway
from commerce.payment.simulator import PaymentSimulator
from commerce.shared.persistence import SnapshotStore
from protean.integrations.pytest import DomainFixture

CUSTOMER_ACCOUNT = {
    "id": "customer-001",
    "email": "customer@kalakart.demo",
    "password": "customer123",
    "name": "Ananya Rao",
    "phone": "+91 98765 43210",
    "role": "customer",
    "address": {
        "line1": "12 MG Road",
        "line2": "Near City Mall",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    },
}

ARTIST_ACCOUNT = {
    "id": "artist-001",
    "email": "artist@kalakart.demo",
    "password": "artist123",
    "name": "Priya Sharma",
    "phone": "+91 91234 56789",
    "role": "artist",
    "bio": "Mehendi and rangoli artist",
    "verified": True,
    "rating": 4.8,
    "total_orders": 3,
    "earnings": 5000,
    "pending_payout": 2000,
    "languages": ["Hindi", "English"],
    "location": "Jaipur",
}

ADDRESS = {
    "line1": "12 MG Road",
    "line2": "Near City Mall",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560001",
    "phone": "+91 98765 43210",
}


@pytest.fixture(scope="session")
def commerce_bed():
    from commerce.domain import commerce

    bed = DomainFixture(commerce)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(commerce_bed):
    with commerce_bed.domain_context():
        yield


def _make_line(product_id="prod-001", price=1000, quantity=1, add_ons=None, **overrides):
    """Build a cart line with sensible digital-product defaults."""
    values = {
        "product_id": product_id,
        "title": f"Artwork {product_id}",
        "image": f"https://img.kalakart.demo/{product_id}.jpg",
        "price": price,
        "artist_id": "artist-001",
        "artist_name": "Priya Sharma",
        "service_type": "digital",
        "quantity": quantity,
        "add_ons": add_ons or [],
    }
    values.update(overrides)
    return CartItem.from_snapshot(values)


def _make_home_visit(product_id="prod-visit", price=2500, date="2026-11-02", time="10:00 AM", **overrides):
    return _make_line(
        product_id=product_id,
        price=price,
        service_type="home-visit",
        scheduled_date=date,
        scheduled_time=time,
        **overrides,
    )


@pytest.fixture()
def make_line():
    return _make_line


@pytest.fixture()
def make_home_visit():
    return _make_home_visit


@pytest.fixture()
def store(tmp_path):
    return SnapshotStore(tmp_path / "data")


@pytest.fixture()
def accounts():
    return [CUSTOMER_ACCOUNT, ARTIST_ACCOUNT]


@pytest.fixture()
def session(store, accounts):
    return IdentitySession(store, accounts=accounts)


@pytest.fixture()
def cart(store):
    return CartStore(store)


@pytest.fixture()
def orders(store):
    return OrderLedger(store)


@pytest.fixture()
def earnings(session):
    return EarningsLedger(session)


@pytest.fixture()
def gateway():
    return SimulatedGateway()


@pytest.fixture()
def payment(gateway):
    return PaymentSimulator(gateway=gateway, processing_delay=0.01, confirmation_delay=0.01)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def orchestrator(cart, orders, earnings, session, payment, notifier):
    return CheckoutOrchestrator(
        cart=cart,
        orders=orders,
        earnings=earnings,
        session=session,
        payment=payment,
        notifier=notifier,
    )


@pytest.fixture()
def address():
    return dict(ADDRESS)
