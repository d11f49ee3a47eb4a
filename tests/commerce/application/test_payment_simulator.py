"""Tests for PaymentSimulator: the asynchronous payment state machine."""

import asyncio

import pytest
from commerce.payment.simulator import PaymentSimulator, PaymentStatus
from protean.exceptions import InvalidOperationError, ValidationError


class _Callbacks:
    def __init__(self):
        self.succeeded = []
        self.failed = []

    def on_success(self, transaction_id):
        self.succeeded.append(transaction_id)

    def on_failure(self, reason):
        self.failed.append(reason)


@pytest.fixture()
def callbacks():
    return _Callbacks()


class TestStart:
    @pytest.mark.asyncio
    async def test_start_enters_processing(self, payment, callbacks):
        payment.start("card", 1050, callbacks.on_success)
        assert payment.status is PaymentStatus.PROCESSING
        assert payment.amount == 1050
        await payment.wait()

    @pytest.mark.asyncio
    async def test_cannot_start_twice(self, payment, callbacks):
        payment.start("card", 1050, callbacks.on_success)
        with pytest.raises(InvalidOperationError):
            payment.start("upi", 1050, callbacks.on_success)
        await payment.wait()

    @pytest.mark.asyncio
    async def test_unknown_method_is_rejected(self, payment, callbacks):
        with pytest.raises(ValidationError):
            payment.start("cheque", 1050, callbacks.on_success)
        assert payment.status is PaymentStatus.IDLE

    @pytest.mark.asyncio
    async def test_negative_amount_is_rejected(self, payment, callbacks):
        with pytest.raises(ValidationError):
            payment.start("card", -1, callbacks.on_success)

    def test_start_needs_running_loop(self, payment, callbacks):
        with pytest.raises(RuntimeError):
            payment.start("card", 100, callbacks.on_success)


class TestResolution:
    @pytest.mark.asyncio
    async def test_success_calls_back_once(self, payment, callbacks):
        payment.start("upi", 1050, callbacks.on_success, callbacks.on_failure)
        outcome = await payment.wait()

        assert outcome.status is PaymentStatus.SUCCESS
        assert payment.status is PaymentStatus.SUCCESS
        assert callbacks.succeeded == [outcome.transaction_id]
        assert outcome.transaction_id.startswith("TXN-DEMO-")
        assert callbacks.failed == []

    @pytest.mark.asyncio
    async def test_failure_never_calls_success(self, payment, callbacks):
        payment.start("card", 1050, callbacks.on_success, callbacks.on_failure, simulate_failure=True)
        outcome = await payment.wait()

        assert outcome.status is PaymentStatus.FAILED
        assert payment.status is PaymentStatus.FAILED
        assert payment.transaction_id is None
        assert callbacks.succeeded == []
        assert callbacks.failed == ["Payment declined"]

    @pytest.mark.asyncio
    async def test_failure_flag_is_read_at_resolution(self, payment, callbacks):
        payment.start("card", 1050, callbacks.on_success, simulate_failure=False)
        payment.simulate_failure = True
        outcome = await payment.wait()
        assert outcome.status is PaymentStatus.FAILED

    @pytest.mark.asyncio
    async def test_gateway_is_charged_the_amount(self, payment, gateway, callbacks):
        payment.start("netbanking", 2520, callbacks.on_success)
        await payment.wait()
        assert gateway.calls[0]["amount"] == 2520
        assert gateway.calls[0]["currency"] == "INR"
        assert gateway.calls[0]["payment_method_type"] == "netbanking"

    @pytest.mark.asyncio
    async def test_each_attempt_gets_a_new_transaction_id(self, payment, callbacks):
        payment.start("card", 100, callbacks.on_success)
        await payment.wait()
        payment.reset()
        payment.start("card", 100, callbacks.on_success)
        await payment.wait()
        assert len(set(callbacks.succeeded)) == 2


class TestReset:
    @pytest.mark.asyncio
    async def test_reset_after_failure_allows_retry(self, payment, callbacks):
        payment.start("card", 100, callbacks.on_success, simulate_failure=True)
        await payment.wait()
        payment.reset()
        assert payment.status is PaymentStatus.IDLE

        payment.start("card", 100, callbacks.on_success, simulate_failure=False)
        outcome = await payment.wait()
        assert outcome.status is PaymentStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_cannot_reset_while_processing(self, payment, callbacks):
        payment.start("card", 100, callbacks.on_success)
        with pytest.raises(InvalidOperationError):
            payment.reset()
        await payment.wait()

    def test_reset_when_idle_is_noop(self, payment):
        payment.reset()
        assert payment.status is PaymentStatus.IDLE


class TestTeardown:
    @pytest.mark.asyncio
    async def test_teardown_while_processing_discards_result(self, payment, callbacks):
        payment.start("card", 100, callbacks.on_success, callbacks.on_failure)
        payment.teardown()
        outcome = await payment.wait()
        await asyncio.sleep(0.05)

        assert outcome.cancelled
        assert payment.status is PaymentStatus.IDLE
        assert callbacks.succeeded == []
        assert callbacks.failed == []

    @pytest.mark.asyncio
    async def test_teardown_during_confirmation_skips_callback(self, gateway, callbacks):
        payment = PaymentSimulator(gateway=gateway, processing_delay=0.01, confirmation_delay=0.3)
        payment.start("card", 100, callbacks.on_success)
        await asyncio.sleep(0.1)
        assert payment.status is PaymentStatus.SUCCESS

        payment.teardown()
        await asyncio.sleep(0.4)
        assert callbacks.succeeded == []
        assert payment.status is PaymentStatus.IDLE

    @pytest.mark.asyncio
    async def test_new_attempt_after_teardown(self, payment, callbacks):
        payment.start("card", 100, callbacks.on_success)
        payment.teardown()
        payment.start("card", 200, callbacks.on_success)
        outcome = await payment.wait()
        assert outcome.status is PaymentStatus.SUCCESS
        assert len(callbacks.succeeded) == 1

    @pytest.mark.asyncio
    async def test_wait_without_attempt(self, payment):
        with pytest.raises(InvalidOperationError):
            await payment.wait()
