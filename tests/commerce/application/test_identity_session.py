"""Tests for IdentitySession: sign-in, registration and the current identity."""

import pytest
from commerce.identity.session import IdentitySession
from commerce.shared.persistence import USER_KEY, USERS_KEY
from protean.exceptions import ValidationError


class TestLogin:
    def test_no_identity_by_default(self, session):
        assert session.current is None
        with pytest.raises(ValidationError):
            session.require_current()

    def test_demo_customer_login(self, session):
        user = session.login("customer@kalakart.demo", "customer123")
        assert str(user.id) == "customer-001"
        assert user.address.city == "Bengaluru"
        assert not user.is_artist

    def test_wrong_password(self, session):
        with pytest.raises(ValidationError) as exc_info:
            session.login("customer@kalakart.demo", "nope")
        assert "credentials" in exc_info.value.messages
        assert session.current is None

    def test_identity_survives_restart(self, store, session, accounts):
        session.login("artist@kalakart.demo", "artist123")
        restored = IdentitySession(store, accounts=accounts)
        assert str(restored.current.id) == "artist-001"
        assert restored.current.earnings == 5000

    def test_logout(self, store, session):
        session.login("customer@kalakart.demo", "customer123")
        session.logout()
        assert session.current is None
        assert not store.exists(USER_KEY)

    def test_corrupt_session_snapshot_is_discarded(self, store, accounts):
        store.save(USER_KEY, {"name": "no id"})
        assert IdentitySession(store, accounts=accounts).current is None


class TestSignup:
    def test_signup_signs_in(self, session):
        user = session.signup("meera@kalakart.demo", "pa55word", "Meera", "+91 90000 00000", role="artist")
        assert session.current is user
        assert str(user.id).startswith("user-")
        assert user.is_artist

    def test_password_is_stored_hashed(self, store, session):
        session.signup("meera@kalakart.demo", "pa55word", "Meera", "")
        (record,) = store.load(USERS_KEY)
        assert "password" not in record
        assert record["password_hash"].startswith("pbkdf2_sha256$")

    def test_registered_account_can_login_again(self, session):
        session.signup("meera@kalakart.demo", "pa55word", "Meera", "")
        session.logout()
        assert session.login("meera@kalakart.demo", "pa55word").name == "Meera"

    def test_duplicate_email_is_rejected(self, session):
        with pytest.raises(ValidationError) as exc_info:
            session.signup("customer@kalakart.demo", "x", "Someone", "")
        assert "email" in exc_info.value.messages

    def test_empty_password_is_rejected(self, session):
        with pytest.raises(ValidationError):
            session.signup("meera@kalakart.demo", "", "Meera", "")


class TestCurrentIdentity:
    def test_update_user_is_persisted(self, store, session, accounts):
        session.login("customer@kalakart.demo", "customer123")
        session.update_user(phone="+91 99999 99999")
        assert IdentitySession(store, accounts=accounts).current.phone == "+91 99999 99999"

    def test_update_user_requires_identity(self, session):
        with pytest.raises(ValidationError):
            session.update_user(phone="1")

    def test_update_earnings_ignored_for_customer(self, session):
        user = session.login("customer@kalakart.demo", "customer123")
        session.update_earnings(1000)
        assert user.earnings == 0
        assert session.request_payout() == 0

    def test_update_earnings_ignored_when_signed_out(self, session):
        session.update_earnings(1000)
        assert session.request_payout() == 0
