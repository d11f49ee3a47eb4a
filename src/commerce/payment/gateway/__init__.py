"""Payment gateway factory.

The simulated gateway is the only adapter shipped; a real provider adapter
is selected here through the PAYMENT_GATEWAY environment variable.
"""

import os

from commerce.payment.gateway.port import ChargeResult, PaymentGateway
from commerce.payment.gateway.simulated import SimulatedGateway

__all__ = ["ChargeResult", "PaymentGateway", "SimulatedGateway", "build_gateway"]


def build_gateway(adapter: str | None = None) -> PaymentGateway:
    """Return a new gateway adapter. Defaults to SimulatedGateway."""
    adapter = adapter or os.environ.get("PAYMENT_GATEWAY", "simulated")
    if adapter == "simulated":
        return SimulatedGateway()
    raise ValueError(f"Unknown payment gateway adapter: {adapter}")
