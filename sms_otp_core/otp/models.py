"""
OTP Models
==========
Configuration and message classification for OTP handling.
"""

import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional

from .exceptions import ConfigurationError

MIN_OTP_LENGTH = 4
MAX_OTP_LENGTH = 8


class OTPMessageFormat(str, Enum):
    """Detected purpose of an OTP message."""
    SMS_RETRIEVER = "sms_retriever"
    VERIFICATION = "verification"
    LOGIN = "login"
    TRANSACTION = "transaction"
    PASSWORD_RESET = "password_reset"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OTPConfig:
    """Configuration for OTP listening, parsing and retries."""
    otp_length: int = 6
    timeout_seconds: int = 300  # 5 minutes
    max_retries: int = 3
    retry_cooldown_seconds: int = 30
    auto_submit: bool = True
    sender_filter: Optional[str] = None
    obscure_text: bool = False
    custom_otp_pattern: Optional[str] = None

    def __post_init__(self):
        if not MIN_OTP_LENGTH <= self.otp_length <= MAX_OTP_LENGTH:
            raise ConfigurationError(
                f"OTP length must be between {MIN_OTP_LENGTH} and "
                f"{MAX_OTP_LENGTH} digits, got {self.otp_length}"
            )
        for name in ("timeout_seconds", "max_retries", "retry_cooldown_seconds"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")
        if self.custom_otp_pattern is not None:
            try:
                re.compile(self.custom_otp_pattern)
            except re.error as e:
                raise ConfigurationError(f"Invalid custom OTP pattern: {e}") from e

    def copy_with(self, **changes) -> "OTPConfig":
        """Return a copy with the given fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown OTPConfig fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)
