"""PaymentSimulator — the state machine standing in for a payment gateway flow.

State Machine:
    IDLE → PROCESSING → SUCCESS | FAILED
    FAILED → IDLE (explicit reset only)
    SUCCESS → IDLE (explicit reset, before the next checkout)

A started payment resolves on an asyncio task after a fixed processing
delay. The outcome comes from the gateway, consulted at resolution time. On
success the success callback runs once, after a short confirmation delay.

Every attempt carries a generation number. ``teardown()`` advances the
generation and cancels the task, and the task re-checks its generation before
each state change and before the callback, so a torn-down attempt can never
mutate state or call back afterwards.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import InvalidOperationError, ValidationError

from commerce.payment.gateway import PaymentGateway, SimulatedGateway

logger = structlog.get_logger(__name__)


class PaymentStatus(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


class PaymentMethod(Enum):
    CARD = "card"
    UPI = "upi"
    NETBANKING = "netbanking"
    COD = "cod"


@dataclass(frozen=True)
class PaymentOutcome:
    """How one payment attempt ended."""

    status: PaymentStatus
    transaction_id: str | None = None
    failure_reason: str | None = None
    cancelled: bool = False


class PaymentSimulator:
    def __init__(
        self,
        gateway: PaymentGateway | None = None,
        processing_delay: float = 2.0,
        confirmation_delay: float = 1.5,
        currency: str = "INR",
    ) -> None:
        self.gateway = gateway or SimulatedGateway()
        self.processing_delay = processing_delay
        self.confirmation_delay = confirmation_delay
        self.currency = currency

        self._status = PaymentStatus.IDLE
        self._generation = 0
        self._task: asyncio.Task | None = None
        self.method: PaymentMethod | None = None
        self.amount: int | None = None
        self.transaction_id: str | None = None
        self.failure_reason: str | None = None

    @property
    def status(self) -> PaymentStatus:
        return self._status

    # -------------------------------------------------------------------
    # Failure toggle
    # -------------------------------------------------------------------
    @property
    def simulate_failure(self) -> bool:
        return isinstance(self.gateway, SimulatedGateway) and not self.gateway.should_succeed

    @simulate_failure.setter
    def simulate_failure(self, value: bool) -> None:
        if not isinstance(self.gateway, SimulatedGateway):
            raise InvalidOperationError("Failure simulation is only available with the simulated gateway")
        self.gateway.configure(should_succeed=not value)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def start(
        self,
        method: PaymentMethod | str,
        amount: int,
        on_success: Callable[[str], None],
        on_failure: Callable[[str], None] | None = None,
        simulate_failure: bool | None = None,
    ) -> None:
        """Begin a payment attempt. Must be called with an event loop running."""
        if self._status is not PaymentStatus.IDLE:
            raise InvalidOperationError(f"Cannot start a payment while {self._status.value}")
        try:
            method = PaymentMethod(method)
        except ValueError as exc:
            raise ValidationError({"method": [f"Unsupported payment method: {method}"]}) from exc
        if amount is None or amount < 0:
            raise ValidationError({"amount": ["Amount must be a non-negative number"]})

        if simulate_failure is not None:
            self.simulate_failure = simulate_failure

        loop = asyncio.get_running_loop()
        self._generation += 1
        self.method = method
        self.amount = amount
        self.transaction_id = None
        self.failure_reason = None
        self._status = PaymentStatus.PROCESSING
        self._task = loop.create_task(self._resolve(self._generation, on_success, on_failure))

        logger.info("Payment processing", method=method.value, amount=amount, attempt=self._generation)

    async def _resolve(self, generation, on_success, on_failure) -> PaymentOutcome:
        await asyncio.sleep(self.processing_delay)
        if generation != self._generation:
            return PaymentOutcome(status=PaymentStatus.IDLE, cancelled=True)

        result = self.gateway.create_charge(
            amount=self.amount,
            currency=self.currency,
            payment_method_type=self.method.value,
            idempotency_key=f"attempt-{generation}",
        )

        if not result.success:
            self._status = PaymentStatus.FAILED
            self.failure_reason = result.failure_reason
            logger.info("Payment failed", reason=result.failure_reason, attempt=generation)
            if on_failure is not None:
                on_failure(result.failure_reason)
            return PaymentOutcome(status=PaymentStatus.FAILED, failure_reason=result.failure_reason)

        self.transaction_id = result.gateway_transaction_id
        self._status = PaymentStatus.SUCCESS
        logger.info("Payment succeeded", transaction_id=self.transaction_id, attempt=generation)

        await asyncio.sleep(self.confirmation_delay)
        if generation != self._generation:
            return PaymentOutcome(status=PaymentStatus.IDLE, cancelled=True)

        on_success(result.gateway_transaction_id)
        return PaymentOutcome(status=PaymentStatus.SUCCESS, transaction_id=result.gateway_transaction_id)

    async def wait(self) -> PaymentOutcome:
        """Wait for the current attempt to finish and report how it ended."""
        task = self._task
        if task is None:
            raise InvalidOperationError("No payment has been started")

        await asyncio.wait({task})
        if task.cancelled():
            return PaymentOutcome(status=PaymentStatus.IDLE, cancelled=True)
        return task.result()

    def reset(self) -> None:
        """Return a finished attempt to IDLE so another payment can start."""
        if self._status is PaymentStatus.PROCESSING:
            raise InvalidOperationError("Cannot reset a payment that is still processing")
        if self._status is PaymentStatus.IDLE:
            return
        self._clear()

    def teardown(self) -> None:
        """Abandon the current attempt. Its result is discarded and no callback fires."""
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.info("Payment attempt torn down", status=self._status.value)
        self._clear()

    def _clear(self) -> None:
        self._status = PaymentStatus.IDLE
        self.method = None
        self.amount = None
        self.transaction_id = None
        self.failure_reason = None
