"""Simulated payment gateway for the demo checkout and for tests.

Succeeds or fails according to a runtime switch that is read at charge time,
standing in for a real provider's decline signal. Transaction ids are
time-based with a random suffix so two charges in the same millisecond never
collide.
"""

import time
from uuid import uuid4

from commerce.payment.gateway.port import ChargeResult, PaymentGateway


def new_transaction_id() -> str:
    return f"TXN-DEMO-{int(time.time() * 1000)}-{uuid4().hex[:6].upper()}"


class SimulatedGateway(PaymentGateway):
    """Configurable simulated payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment declined"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_method_type: str,
        idempotency_key: str,
    ) -> ChargeResult:
        self.calls.append(
            {
                "amount": amount,
                "currency": currency,
                "payment_method_type": payment_method_type,
                "idempotency_key": idempotency_key,
            }
        )

        if self.should_succeed:
            return ChargeResult(
                success=True,
                gateway_transaction_id=new_transaction_id(),
                gateway_status="succeeded",
            )
        return ChargeResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )
