# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, SESSION__TTL_SECONDS.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "wallet-link"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/wallet_link.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class SessionSettings(BaseSettings):
    """Link session lifecycle (from env SESSION__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    ttl_seconds: int = Field(
        default=24 * 60 * 60,
        ge=1,
        description="Lifetime of a link from creation; expires_at = created_at + ttl.",
    )
    max_cas_retries: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Optimistic update attempts for activity touches before giving up.",
    )
    sweep_enabled: bool = Field(
        default=False,
        description="Run the background purge of expired sessions (storage hygiene only).",
    )
    sweep_interval_seconds: float = Field(
        default=300.0,
        ge=1.0,
        le=86400.0,
        description="Interval between expired-session purges.",
    )
    expired_tombstone_seconds: int = Field(
        default=24 * 60 * 60,
        ge=0,
        description="How long an expired link keeps answering expired (not unknown) after deletion. 0 disables.",
    )
    expired_tombstone_maxsize: int = Field(
        default=10_000,
        ge=1,
        description="Most expired link ids remembered at once (oldest evicted first).",
    )


class LedgerSettings(BaseSettings):
    """Transaction ledger (from env LEDGER__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    display_decimals: int = Field(
        default=18,
        ge=0,
        le=36,
        description=(
            "Decimals for aggregate displays and TransactionLedger.display_value. "
            "TransactionRecord.value_display is always 18 (ether units)."
        ),
    )
    default_page_size: int = Field(default=50, ge=1, le=1000)
    max_page_size: int = Field(default=500, ge=1, le=10000)
    allow_base58_fallback: bool = Field(
        default=True,
        description="Accept base58-looking recipients when 0x validation fails (no checksum check).",
    )
    default_gas_limit: int = Field(default=21000, ge=0)
    default_gas_price: int = Field(default=20_000_000_000, ge=0, description="Base units (20 gwei).")
    recent_executed_limit: int = Field(default=5, ge=0, le=100)


class StorageSettings(BaseSettings):
    """Persistence backend (from env STORAGE__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    backend: Literal["memory", "sqlalchemy"] = "memory"
    database_url: str = Field(
        default="sqlite+aiosqlite:///wallet_link.db",
        description="SQLAlchemy async URL; used when backend is 'sqlalchemy'.",
    )
    echo: bool = False


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, STORAGE__BACKEND.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.:
        - from_env(session={"ttl_seconds": 60})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from wallet_link.config import get_settings

        settings = get_settings()
        ttl = settings.session.ttl_seconds
    """
    return Settings()
