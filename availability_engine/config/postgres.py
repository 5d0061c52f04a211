"""
availability_engine.config.postgres – PostgreSQL connection config (dataclass + validators).

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT, DB_POOL_RECYCLE,
DB_ECHO, DB_APPLICATION_NAME.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_URL = "postgresql://localhost/availability"
_DEFAULT_APP_NAME = "availability-engine"


def _validate_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ValueError("DATABASE_URL is required and must be non-empty")
    if not (
        url.startswith("postgresql://")
        or url.startswith("postgres://")
        or url.startswith("postgresql+asyncpg://")
    ):
        raise ValueError(
            "DATABASE_URL must start with postgresql://, postgres:// or postgresql+asyncpg://"
        )
    return url


def _validate_positive_int(value: int, name: str, min_val: int = 1) -> int:
    if not isinstance(value, int) or value < min_val:
        raise ValueError(f"{name} must be an integer >= {min_val}, got {value!r}")
    return value


@dataclass(frozen=True)
class PostgresConfig:
    """
    PostgreSQL connection and pool configuration for the block store.

    Validated on construction; use load_postgres_config() to build from env.
    """

    url: str
    """DSN. Converted to postgresql+asyncpg in the engine."""

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    """Seconds to wait for a pooled connection."""

    pool_recycle: int = 1800
    echo: bool = False
    application_name: str = _DEFAULT_APP_NAME

    def __post_init__(self) -> None:
        _validate_url(self.url)
        _validate_positive_int(self.pool_size, "pool_size")
        _validate_positive_int(self.max_overflow, "max_overflow", min_val=0)
        _validate_positive_int(self.pool_timeout, "pool_timeout")
        _validate_positive_int(self.pool_recycle, "pool_recycle")
        if not isinstance(self.echo, bool):
            raise ValueError("echo must be a boolean")
        if not isinstance(self.application_name, str) or not self.application_name.strip():
            raise ValueError("application_name must be a non-empty string")

    @classmethod
    def from_env(cls, **overrides: object) -> PostgresConfig:
        """
        Build config from environment variables; keyword overrides win.

        Env:
            DATABASE_URL          – default postgresql://localhost/availability
            DB_POOL_SIZE          – default 10
            DB_MAX_OVERFLOW       – default 20
            DB_POOL_TIMEOUT       – default 30
            DB_POOL_RECYCLE       – default 1800
            DB_ECHO               – "1" / "true" / "yes" → True
            DB_APPLICATION_NAME   – default availability-engine
        """
        raw_url = overrides.get("url") or os.environ.get("DATABASE_URL", _DEFAULT_URL)

        env_int = {
            "pool_size": ("DB_POOL_SIZE", 10),
            "max_overflow": ("DB_MAX_OVERFLOW", 20),
            "pool_timeout": ("DB_POOL_TIMEOUT", 30),
            "pool_recycle": ("DB_POOL_RECYCLE", 1800),
        }

        def _int(attr: str) -> int:
            v = overrides.get(attr)
            if v is not None:
                return int(v)  # type: ignore[arg-type]
            env_name, default = env_int[attr]
            return int(os.environ.get(env_name, default))

        echo = overrides.get("echo")
        if echo is None:
            echo = os.environ.get("DB_ECHO", "").strip().lower() in ("1", "true", "yes")

        app_name = overrides.get("application_name") or os.environ.get(
            "DB_APPLICATION_NAME", _DEFAULT_APP_NAME
        )
        return cls(
            url=_validate_url(str(raw_url)),
            pool_size=_int("pool_size"),
            max_overflow=_int("max_overflow"),
            pool_timeout=_int("pool_timeout"),
            pool_recycle=_int("pool_recycle"),
            echo=bool(echo),
            application_name=str(app_name),
        )


def load_postgres_config(**overrides: object) -> PostgresConfig:
    """Load and validate PostgreSQL config. Raises ValueError on invalid env/values."""
    return PostgresConfig.from_env(**overrides)
