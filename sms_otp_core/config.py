"""
Settings
========
Environment-driven configuration for OTP handling.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from sms_otp_core.otp.exceptions import ConfigurationError
from sms_otp_core.otp.models import OTPConfig

ENV_PREFIX = "SMS_OTP_"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


def _env_str(name: str) -> Optional[str]:
    return os.environ.get(ENV_PREFIX + name) or None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """OTP settings read from ``SMS_OTP_*`` environment variables."""
    otp_length: int = field(default_factory=lambda: _env_int("LENGTH", 6))
    timeout_seconds: int = field(default_factory=lambda: _env_int("TIMEOUT_SECONDS", 300))
    max_retries: int = field(default_factory=lambda: _env_int("MAX_RETRIES", 3))
    retry_cooldown_seconds: int = field(
        default_factory=lambda: _env_int("RETRY_COOLDOWN_SECONDS", 30)
    )
    sender_filter: Optional[str] = field(default_factory=lambda: _env_str("SENDER_FILTER"))
    custom_otp_pattern: Optional[str] = field(default_factory=lambda: _env_str("CUSTOM_PATTERN"))
    package_name: Optional[str] = field(default_factory=lambda: _env_str("PACKAGE_NAME"))
    signing_certificate: Optional[str] = field(
        default_factory=lambda: _env_str("SIGNING_CERTIFICATE")
    )
    log_level: str = field(default_factory=lambda: os.environ.get(ENV_PREFIX + "LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_bool("LOG_JSON", True))

    def otp_config(self) -> OTPConfig:
        """Build the OTP configuration from these settings."""
        return OTPConfig(
            otp_length=self.otp_length,
            timeout_seconds=self.timeout_seconds,
            max_retries=self.max_retries,
            retry_cooldown_seconds=self.retry_cooldown_seconds,
            sender_filter=self.sender_filter,
            custom_otp_pattern=self.custom_otp_pattern,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Clear cached settings (for tests)."""
    get_settings.cache_clear()
