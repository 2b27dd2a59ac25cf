"""
OTP Exceptions
==============
Typed error categories for OTP listening, parsing and retry handling.
"""

from typing import Optional


class OTPException(Exception):
    """Base exception for all OTP-related errors."""

    code = "OTP_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(f"[{self.code}] {message}")


class PlatformError(OTPException):
    """Raised when a platform-specific SMS operation fails."""

    code = "PLATFORM_ERROR"

    def __init__(
        self,
        message: str,
        platform: str = "android",
        native_code: Optional[str] = None,
    ):
        self.platform = platform
        self.native_code = native_code
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}:{self.platform}] {self.message} (native: {self.native_code})"


class PermissionDeniedError(OTPException):
    """Raised when the SMS permission is denied."""

    code = "PERMISSION_DENIED"

    def __init__(
        self,
        message: str,
        permission: str = "sms",
        permanently_denied: bool = False,
    ):
        self.permission = permission
        self.permanently_denied = permanently_denied
        super().__init__(message)


class OTPTimeoutError(OTPException):
    """Raised when OTP detection times out."""

    code = "TIMEOUT"

    def __init__(self, message: str, timeout_seconds: int = 0):
        self.timeout_seconds = timeout_seconds
        super().__init__(message)


class InvalidOTPError(OTPException):
    """Raised when an OTP or retriever message has an invalid format."""

    code = "INVALID_OTP"

    def __init__(
        self,
        message: str,
        invalid_value: Optional[str] = None,
        expected_length: Optional[int] = None,
    ):
        self.invalid_value = invalid_value
        self.expected_length = expected_length
        super().__init__(message)


class RateLimitedError(OTPException):
    """Raised when a new OTP is requested before the cooldown allows it."""

    code = "RATE_LIMITED"

    def __init__(
        self,
        message: str,
        retry_after: int = 0,
        attempts_made: int = 0,
        max_attempts: int = 0,
    ):
        self.retry_after = retry_after
        self.attempts_made = attempts_made
        self.max_attempts = max_attempts
        super().__init__(message)

    def __str__(self) -> str:
        return (
            f"[{self.code}] {self.message} (retry in {self.retry_after}s, "
            f"{self.attempts_made}/{self.max_attempts} attempts)"
        )


class ServiceUnavailableError(OTPException):
    """Raised when the SMS service cannot be reached."""

    code = "SERVICE_UNAVAILABLE"

    def __init__(self, message: str, recoverable: bool = True):
        self.recoverable = recoverable
        super().__init__(message)


class ConfigurationError(OTPException):
    """Raised for invalid OTP or settings configuration."""

    code = "CONFIG_ERROR"
