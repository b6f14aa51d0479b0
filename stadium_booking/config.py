"""
Centralized configuration with environment variable overrides.

Slot grid, booking limits and the stadium-local time zone are
configurable here. Nothing is hardcoded in scheduling or service logic.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from stadium_booking.logging_context import LOG_FORMAT, attach_request_filter

load_dotenv()

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1440


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class SlotConfig:
    """Canonical slot grid shown for every stadium day."""

    first_slot_hour: int = _safe_int("FIRST_SLOT_HOUR", "6")
    last_slot_hour: int = _safe_int("LAST_SLOT_HOUR", "23")
    slot_minutes: int = _safe_int("SLOT_MINUTES", "60")


@dataclass(frozen=True)
class BookingConfig:
    """Limits applied when validating and editing bookings."""

    max_booking_hours: int = _safe_int("MAX_BOOKING_HOURS", "6")
    max_bulk_days: int = _safe_int("MAX_BULK_DAYS", "62")
    timezone: str = os.getenv("STADIUM_TIMEZONE", "UTC")
    currency: str = os.getenv("CURRENCY", "MAD")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    slots: SlotConfig = field(default_factory=SlotConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "stadium-booking")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    slots = config.slots
    if not 0 <= slots.first_slot_hour <= 23:
        raise ValueError(
            f"FIRST_SLOT_HOUR must be between 0 and 23, got {slots.first_slot_hour}"
        )
    if not slots.first_slot_hour <= slots.last_slot_hour <= 23:
        raise ValueError(
            "LAST_SLOT_HOUR must be between FIRST_SLOT_HOUR and 23, "
            f"got {slots.last_slot_hour}"
        )
    if slots.slot_minutes < 1 or MINUTES_PER_DAY % slots.slot_minutes:
        raise ValueError(
            f"SLOT_MINUTES must be a positive divisor of {MINUTES_PER_DAY}, "
            f"got {slots.slot_minutes}"
        )
    if config.booking.max_booking_hours < 1:
        raise ValueError(
            f"MAX_BOOKING_HOURS must be >= 1, got {config.booking.max_booking_hours}"
        )
    if config.booking.max_bulk_days < 1:
        raise ValueError(
            f"MAX_BULK_DAYS must be >= 1, got {config.booking.max_bulk_days}"
        )
    try:
        ZoneInfo(config.booking.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"STADIUM_TIMEZONE is not a known time zone: {config.booking.timezone!r}"
        ) from None


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        attach_request_filter(handler)
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
