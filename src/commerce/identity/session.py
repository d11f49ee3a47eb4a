"""IdentitySession — the signed-in identity and the locally registered accounts.

The checkout only reads the current identity (id, role, address) and calls
``update_earnings`` / ``request_payout`` on it. Sign-in, sign-up and profile
edits live here too so the current identity can be established and
persisted. Demo accounts are supplied by the caller; accounts created with
``signup`` are stored with a salted password hash.
"""

import hmac
import time
from collections.abc import Iterable

import structlog
from protean.exceptions import ValidationError

from commerce.identity.credentials import hash_password, verify_password
from commerce.identity.user import Role, User
from commerce.shared.persistence import USER_KEY, USERS_KEY, SnapshotStore

logger = structlog.get_logger(__name__)


class IdentitySession:
    def __init__(self, store: SnapshotStore, accounts: Iterable[dict] = ()) -> None:
        self._store = store
        self._accounts = list(accounts)
        self._current: User | None = self._load_current()

    def _load_current(self) -> User | None:
        record = self._store.load(USER_KEY, default=None, expected_type=dict)
        if record is None:
            return None
        try:
            return User.from_snapshot(record)
        except (ValidationError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding unusable session snapshot", error=str(exc))
            return None

    def _persist(self) -> None:
        if self._current is None:
            self._store.delete(USER_KEY)
            return
        self._store.save(USER_KEY, self._current.to_snapshot())
        self._current._events.clear()

    def _registered(self) -> list[dict]:
        return self._store.load(USERS_KEY, default=[], expected_type=list)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current(self) -> User | None:
        return self._current

    def require_current(self) -> User:
        if self._current is None:
            raise ValidationError({"identity": ["Please login to continue"]})
        return self._current

    # -------------------------------------------------------------------
    # Sign-in / sign-up
    # -------------------------------------------------------------------
    def login(self, email: str, password: str) -> User:
        for account in self._accounts:
            if account.get("email") == email and hmac.compare_digest(str(account.get("password", "")), password):
                return self._sign_in(User.from_snapshot(account))

        for account in self._registered():
            if account.get("email") == email and verify_password(password, account.get("password_hash", "")):
                return self._sign_in(User.from_snapshot(account))

        logger.info("Login rejected", email=email)
        raise ValidationError({"credentials": ["Invalid email or password"]})

    def signup(
        self,
        email: str,
        password: str,
        name: str,
        phone: str,
        role: Role | str = Role.CUSTOMER,
        bio: str = "",
        sample_id: str = "",
    ) -> User:
        registered = self._registered()
        known = {a.get("email") for a in self._accounts} | {a.get("email") for a in registered}
        if email in known:
            raise ValidationError({"email": ["Email already registered"]})
        if not password:
            raise ValidationError({"password": ["Password is required"]})

        user = User.sign_up(
            user_id=f"user-{int(time.time() * 1000)}",
            email=email,
            name=name,
            phone=phone,
            role=Role(role).value,
            bio=bio,
            sample_id=sample_id,
        )
        registered.append({**user.to_snapshot(), "password_hash": hash_password(password)})
        self._store.save(USERS_KEY, registered)

        logger.info("Identity registered", user_id=str(user.id), role=user.role)
        return self._sign_in(user)

    def _sign_in(self, user: User) -> User:
        self._current = user
        self._persist()
        logger.info("Signed in", user_id=str(user.id), role=user.role)
        return user

    def logout(self) -> None:
        self._current = None
        self._persist()

    # -------------------------------------------------------------------
    # Mutations on the current identity
    # -------------------------------------------------------------------
    def update_user(self, **changes) -> User:
        user = self.require_current()
        user.update_profile(changes)
        self._persist()
        return user

    def update_earnings(self, amount: int) -> None:
        """Credit an artist's balances. Silently ignored for anyone else."""
        if self._current is None or not self._current.is_artist:
            return
        self._current.credit_earnings(amount)
        self._persist()

    def request_payout(self) -> int:
        """Zero an artist's pending payout. Silently ignored for anyone else."""
        if self._current is None or not self._current.is_artist:
            return 0
        amount = self._current.request_payout()
        self._persist()
        return amount
