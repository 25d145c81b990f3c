"""
Centralized configuration with environment variable overrides.

Scheduling defaults, wallet limits and payment gateway settings are
configurable here. Domain functions take explicit arguments; callers
fill them from ``settings`` when a request does not supply a value.
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


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot generation and cancellation defaults."""

    default_lookahead_days: int = _safe_int("DEFAULT_LOOKAHEAD_DAYS", "14")
    timezone: str = os.getenv("SCHEDULING_TIMEZONE", "UTC")
    default_late_cancel_hours: float = _safe_float("DEFAULT_LATE_CANCEL_HOURS", "0")


@dataclass(frozen=True)
class WalletConfig:
    """Prepaid credit wallet limits and display settings."""

    max_topup_credits: int = _safe_int("MAX_TOPUP_CREDITS", "100")
    default_currency: str = os.getenv("DEFAULT_CURRENCY", "JMD")


@dataclass(frozen=True)
class PaymentConfig:
    """Payment gateway selection."""

    gateway_name: str = os.getenv("PAYMENT_GATEWAY", "mockpay")
    mock_base_url: str = os.getenv("MOCK_PAYMENT_BASE_URL", "https://mockpay.local")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    payments: PaymentConfig = field(default_factory=PaymentConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "booknpay")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.scheduling.default_lookahead_days < 1:
        raise ValueError(
            "DEFAULT_LOOKAHEAD_DAYS must be >= 1, "
            f"got {config.scheduling.default_lookahead_days}"
        )
    if config.scheduling.default_late_cancel_hours < 0:
        raise ValueError(
            "DEFAULT_LATE_CANCEL_HOURS must be >= 0, "
            f"got {config.scheduling.default_late_cancel_hours}"
        )
    if not config.scheduling.timezone.strip():
        raise ValueError("SCHEDULING_TIMEZONE must not be empty")
    if config.wallet.max_topup_credits < 1:
        raise ValueError(
            f"MAX_TOPUP_CREDITS must be >= 1, got {config.wallet.max_topup_credits}"
        )
    if len(config.wallet.default_currency) != 3:
        raise ValueError(
            "DEFAULT_CURRENCY must be a 3-letter ISO code, "
            f"got {config.wallet.default_currency!r}"
        )
    if not config.payments.mock_base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"MOCK_PAYMENT_BASE_URL must be an http(s) URL, got {config.payments.mock_base_url!r}"
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
