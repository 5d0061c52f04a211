from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BookingStoreConfig:
    """Where and how to reach the external Booking Store.

    Env: BOOKING_STORE_URL (unset → no-op provider), BOOKING_STORE_TIMEOUT,
    BOOKING_STORE_API_KEY.
    """

    base_url: Optional[str] = None
    timeout: float = 5.0
    api_key: Optional[str] = None

    def __post_init__(self) -> None:
        if self.base_url is not None and not self.base_url.startswith(("http://", "https://")):
            raise ValueError("BOOKING_STORE_URL must start with http:// or https://")
        if self.timeout <= 0:
            raise ValueError(f"BOOKING_STORE_TIMEOUT must be positive, got {self.timeout!r}")

    @property
    def provider(self) -> str:
        return "http" if self.base_url else "noop"

    @classmethod
    def from_env(cls) -> "BookingStoreConfig":
        return cls(
            base_url=(os.environ.get("BOOKING_STORE_URL") or "").strip().rstrip("/") or None,
            timeout=float(os.environ.get("BOOKING_STORE_TIMEOUT", "5")),
            api_key=os.environ.get("BOOKING_STORE_API_KEY") or None,
        )
