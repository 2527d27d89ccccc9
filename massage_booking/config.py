"""
Centralized configuration with environment variable overrides.

Booking lifecycle timings, offered durations, and reporting limits are
configurable here. Collaborators (payment processor, notifier, store)
are not configured globally; they are injected into the booking service.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_int_list(env_var: str, default: str) -> tuple[int, ...]:
    """Parse a comma-separated list of integers, e.g. ``"60,90,120"``."""
    raw = os.getenv(env_var, default)
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except (ValueError, TypeError, AttributeError):
        raise ValueError(
            f"Invalid integer list for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BookingConfig:
    """Booking request lifecycle settings."""

    acceptance_timeout_seconds: float = _safe_float("ACCEPTANCE_TIMEOUT_SECONDS", "120")
    offered_durations: tuple[int, ...] = _safe_int_list("BOOKING_DURATIONS", "60,90,120")
    currency: str = os.getenv("CURRENCY", "USD")


@dataclass(frozen=True)
class ReportConfig:
    """Admin dashboard settings."""

    recent_bookings_limit: int = _safe_int("RECENT_BOOKINGS_LIMIT", "50")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    booking: BookingConfig = field(default_factory=BookingConfig)
    reports: ReportConfig = field(default_factory=ReportConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "mobile-massage")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.booking.acceptance_timeout_seconds <= 0:
        raise ValueError(
            "ACCEPTANCE_TIMEOUT_SECONDS must be > 0, "
            f"got {config.booking.acceptance_timeout_seconds}"
        )
    if not config.booking.offered_durations:
        raise ValueError("BOOKING_DURATIONS must list at least one duration")
    for minutes in config.booking.offered_durations:
        if minutes <= 0:
            raise ValueError(f"BOOKING_DURATIONS entries must be > 0, got {minutes}")
    if len(config.booking.currency) != 3:
        raise ValueError(
            f"CURRENCY must be a 3-letter code, got {config.booking.currency!r}"
        )
    if config.reports.recent_bookings_limit < 1:
        raise ValueError(
            f"RECENT_BOOKINGS_LIMIT must be >= 1, got {config.reports.recent_bookings_limit}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
