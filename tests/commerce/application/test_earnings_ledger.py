"""Tests for EarningsLedger: the signed-in artist's balances."""

import pytest
from commerce.identity.session import IdentitySession
from protean.exceptions import InvalidOperationError


class TestEarningsLedger:
    def test_balance(self, session, earnings):
        session.login("artist@kalakart.demo", "artist123")
        balance = earnings.balance()
        assert (balance.earnings, balance.pending_payout, balance.total_orders) == (5000, 2000, 3)

    def test_credit(self, session, earnings):
        session.login("artist@kalakart.demo", "artist123")
        balance = earnings.credit(1000)
        assert (balance.earnings, balance.pending_payout, balance.total_orders) == (6000, 3000, 4)

    def test_payout_keeps_cumulative_earnings(self, session, earnings):
        session.login("artist@kalakart.demo", "artist123")
        assert earnings.request_payout() == 2000
        balance = earnings.balance()
        assert balance.pending_payout == 0
        assert balance.earnings == 5000

    def test_balances_are_persisted(self, store, session, earnings, accounts):
        session.login("artist@kalakart.demo", "artist123")
        earnings.credit(500)
        earnings.request_payout()
        restored = IdentitySession(store, accounts=accounts).current
        assert restored.earnings == 5500
        assert restored.pending_payout == 0

    def test_customer_has_no_earnings(self, session, earnings):
        session.login("customer@kalakart.demo", "customer123")
        with pytest.raises(InvalidOperationError):
            earnings.balance()
        with pytest.raises(InvalidOperationError):
            earnings.credit(100)

    def test_signed_out_has_no_earnings(self, earnings):
        with pytest.raises(InvalidOperationError):
            earnings.request_payout()
