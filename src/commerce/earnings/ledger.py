"""EarningsLedger — the signed-in artist's earnings and withdrawable balance.

Scoped to the current identity only: credits go to whoever is signed in,
provided they are an artist.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import InvalidOperationError

from commerce.identity.session import IdentitySession
from commerce.identity.user import User

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EarningsBalance:
    earnings: int
    pending_payout: int
    total_orders: int


class EarningsLedger:
    def __init__(self, session: IdentitySession) -> None:
        self._session = session

    def _artist(self) -> User:
        user = self._session.current
        if user is None or not user.is_artist:
            raise InvalidOperationError("Earnings are only available to a signed-in artist")
        return user

    def balance(self) -> EarningsBalance:
        user = self._artist()
        return EarningsBalance(
            earnings=user.earnings or 0,
            pending_payout=user.pending_payout or 0,
            total_orders=user.total_orders or 0,
        )

    def credit(self, amount: int) -> EarningsBalance:
        """Credit one order to the artist: both balances grow, order count +1."""
        user = self._artist()
        self._session.update_earnings(amount)
        logger.info("Earnings credited", user_id=str(user.id), amount=amount)
        return self.balance()

    def request_payout(self) -> int:
        """Withdraw the whole pending payout. Returns the amount withdrawn."""
        user = self._artist()
        amount = self._session.request_payout()
        logger.info("Payout requested", user_id=str(user.id), amount=amount)
        return amount
