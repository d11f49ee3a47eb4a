"""Payment gateway port (abstract interface).

Defines the contract a payment gateway adapter must implement: an amount and
a payment method in, a transaction id or a failure reason out. The simulated
gateway used by the demo sits behind the same interface a real provider
would, so the simulator, the order ledger and the earnings ledger do not
change when it is swapped.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeResult:
    """Result of a payment charge attempt."""

    success: bool
    gateway_transaction_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_method_type: str,
        idempotency_key: str,
    ) -> ChargeResult:
        """Create a charge via the payment gateway."""
        ...
