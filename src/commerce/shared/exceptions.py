"""Checkout and persistence failures that are not field validation errors."""


class TransactionFailure(Exception):
    """The payment gateway declined the charge. Cart and ledgers are untouched."""

    def __init__(self, reason: str = "Payment failed") -> None:
        super().__init__(reason)
        self.reason = reason


class CheckoutCancelled(TransactionFailure):
    """The checkout flow was torn down while the payment was still resolving."""

    def __init__(self, reason: str = "Checkout was cancelled") -> None:
        super().__init__(reason)


class PersistenceError(Exception):
    """A durable snapshot could not be read or decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Snapshot '{key}' is unusable: {reason}")
        self.key = key
        self.reason = reason
