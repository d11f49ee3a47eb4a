"""Durable JSON snapshots for the cart, the order collection and the session.

Each key maps to one JSON file under the data directory. Every write goes to
a temporary file in the same directory which then replaces the target, so a
crash mid-write leaves the previous snapshot intact.
"""

import json
import os
import tempfile
from pathlib import Path

import structlog

from commerce.shared.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

CART_KEY = "cart"
ORDERS_KEY = "orders"
USER_KEY = "user"
USERS_KEY = "users"


class SnapshotStore:
    """Key → JSON document store backed by files in ``root``."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def read(self, key: str, expected_type: type | None = None):
        """Read and decode a snapshot, raising PersistenceError when unusable.

        Returns None when no snapshot has been written for ``key``.
        """
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise PersistenceError(key, f"not UTF-8 text ({exc.reason})") from exc
        except OSError as exc:
            raise PersistenceError(key, str(exc)) from exc

        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(key, f"invalid JSON ({exc.msg})") from exc

        if expected_type is not None and value is not None and not isinstance(value, expected_type):
            raise PersistenceError(key, f"expected {expected_type.__name__}, found {type(value).__name__}")
        return value

    def load(self, key: str, default=None, expected_type: type | None = None):
        """Read a snapshot, falling back to ``default`` when missing or corrupt."""
        try:
            value = self.read(key, expected_type=expected_type)
        except PersistenceError as exc:
            logger.warning("Discarding unusable snapshot", key=key, reason=exc.reason)
            return default

        if value is None:
            return default
        return value

    def save(self, key: str, value) -> None:
        """Atomically replace the snapshot for ``key``."""
        path = self.path_for(key)
        payload = json.dumps(value, ensure_ascii=False, indent=2)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}-", suffix=".tmp", dir=self.root)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Snapshot written", key=key, path=str(path))

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
