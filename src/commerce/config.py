"""Runtime settings for the commerce services, read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommerceSettings:
    """Settings shared by the stores, the payment simulator and the API."""

    data_dir: Path = Path(".kalakart")
    payment_delay: float = 2.0
    confirmation_delay: float = 1.5
    currency: str = "INR"
    seed_orders: Path | None = None
    log_dir: Path | None = None
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "CommerceSettings":
        seed = os.getenv("KALAKART_SEED_ORDERS")
        log_dir = os.getenv("KALAKART_LOG_DIR")
        return cls(
            data_dir=Path(os.getenv("KALAKART_DATA_DIR", ".kalakart")),
            payment_delay=float(os.getenv("KALAKART_PAYMENT_DELAY", "2.0")),
            confirmation_delay=float(os.getenv("KALAKART_CONFIRMATION_DELAY", "1.5")),
            currency=os.getenv("KALAKART_CURRENCY", "INR"),
            seed_orders=Path(seed) if seed else None,
            log_dir=Path(log_dir) if log_dir else None,
            environment=os.getenv("PROTEAN_ENV", "development"),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
