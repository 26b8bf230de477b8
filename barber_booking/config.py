"""
Centralized configuration with environment variable overrides.

Business identity, timezone, retention and scheduling toggles live here.
The weekly opening-hours table is fixed and lives in
``barber_booking.scheduling.business_hours``.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from barber_booking.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "Barbearia Navalha de Ouro")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "America/Fortaleza")
    whatsapp_number: str = os.getenv("BUSINESS_WHATSAPP", "5585900000000")
    retention_weeks: int = _safe_int("RETENTION_WEEKS", "1")
    reminder_lead_minutes: int = _safe_int("REMINDER_LEAD_MINUTES", "30")
    booking_horizon_days: int = _safe_int("BOOKING_HORIZON_DAYS", "14")

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)


@dataclass(frozen=True)
class SchedulingConfig:
    """Toggles for the availability engine."""

    # Cancelled bookings normally free their slot.
    cancelled_blocks_slot: bool = _safe_bool("CANCELLED_BLOCKS_SLOT", "false")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "barber-booking")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    try:
        ZoneInfo(config.business.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"BUSINESS_TIMEZONE is not a known IANA zone: {config.business.timezone!r}"
        ) from None
    if config.business.retention_weeks < 1:
        raise ValueError(
            f"RETENTION_WEEKS must be >= 1, got {config.business.retention_weeks}"
        )
    if config.business.reminder_lead_minutes < 1:
        raise ValueError(
            "REMINDER_LEAD_MINUTES must be >= 1, "
            f"got {config.business.reminder_lead_minutes}"
        )
    if config.business.booking_horizon_days < 1:
        raise ValueError(
            f"BOOKING_HORIZON_DAYS must be >= 1, got {config.business.booking_horizon_days}"
        )
    digits = config.business.whatsapp_number
    if not digits.isdigit():
        raise ValueError(f"BUSINESS_WHATSAPP must contain only digits, got {digits!r}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
