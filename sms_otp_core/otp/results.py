"""
OTP Results
===========
Result values for an OTP listening session, plus mapping of native
platform error codes onto the typed exception categories.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, TypeVar

from .exceptions import (
    OTPException,
    PlatformError,
    PermissionDeniedError,
    OTPTimeoutError,
    InvalidOTPError,
    RateLimitedError,
    ServiceUnavailableError,
)

T = TypeVar("T")


class PermissionStatus(str, Enum):
    """Permission status for SMS operations."""
    GRANTED = "granted"
    DENIED = "denied"
    PERMANENTLY_DENIED = "permanently_denied"
    NOT_REQUIRED = "not_required"


class OTPResult:
    """
    Outcome of an OTP listening session.

    Exactly one of OTPSuccess, OTPTimeout, OTPError or OTPCancelled.
    """

    @property
    def is_success(self) -> bool:
        return isinstance(self, OTPSuccess)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def when(
        self,
        success: Callable[[str], T],
        timeout: Callable[[str], T],
        error: Callable[[OTPException], T],
        cancelled: Callable[[], T],
    ) -> T:
        """Dispatch on the concrete result type."""
        if isinstance(self, OTPSuccess):
            return success(self.otp)
        if isinstance(self, OTPTimeout):
            return timeout(self.message)
        if isinstance(self, OTPError):
            return error(self.exception)
        if isinstance(self, OTPCancelled):
            return cancelled()
        raise TypeError(f"Unknown OTP result type: {type(self).__name__}")

    def maybe_when(
        self,
        or_else: Callable[[], T],
        success: Optional[Callable[[str], T]] = None,
        timeout: Optional[Callable[[str], T]] = None,
        error: Optional[Callable[[OTPException], T]] = None,
        cancelled: Optional[Callable[[], T]] = None,
    ) -> T:
        """Dispatch on the result type, falling back to ``or_else``."""
        if isinstance(self, OTPSuccess) and success is not None:
            return success(self.otp)
        if isinstance(self, OTPTimeout) and timeout is not None:
            return timeout(self.message)
        if isinstance(self, OTPError) and error is not None:
            return error(self.exception)
        if isinstance(self, OTPCancelled) and cancelled is not None:
            return cancelled()
        return or_else()


@dataclass(frozen=True)
class OTPSuccess(OTPResult):
    """A retrieved OTP code."""
    otp: str
    raw_message: Optional[str] = None
    sender: Optional[str] = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"OTPSuccess(otp=***, sender={self.sender!r})"


@dataclass(frozen=True)
class OTPTimeout(OTPResult):
    """Listening ended without a code."""
    message: str = "OTP verification timed out"
    configured_timeout_seconds: int = 300


@dataclass(frozen=True)
class OTPError(OTPResult):
    """Listening failed."""
    exception: OTPException


@dataclass(frozen=True)
class OTPCancelled(OTPResult):
    """Listening was cancelled by the user or the platform."""
    reason: Optional[str] = None


# Native error codes grouped by category
PERMISSION_CODES = {"PERMISSION_DENIED", "PERMISSION_PERMANENTLY_DENIED", "NO_PERMISSION"}
RATE_LIMIT_CODES = {"RATE_LIMITED", "TOO_MANY_REQUESTS", "API_NOT_CONNECTED_THROTTLED"}
UNAVAILABLE_CODES = {
    "SMS_RETRIEVER_ERROR",
    "NO_CONTEXT",
    "API_UNAVAILABLE",
    "API_NOT_CONNECTED",
    "SERVICE_UNAVAILABLE",
}
INVALID_FORMAT_CODES = {"INVALID_FORMAT", "INVALID_OTP"}
TIMEOUT_CODES = {"TIMEOUT"}


def map_platform_error(
    native_code: Optional[str],
    message: Optional[str] = None,
    platform: str = "android",
) -> OTPException:
    """
    Map a native platform error code to a typed OTP exception.

    Args:
        native_code: Error code reported by the platform
        message: Platform error message
        platform: Platform name

    Returns:
        The matching OTPException subclass instance
    """
    text = message or "Unknown platform error"
    code = (native_code or "").upper()

    if code in PERMISSION_CODES:
        return PermissionDeniedError(
            text,
            permanently_denied=code == "PERMISSION_PERMANENTLY_DENIED",
        )
    if code in RATE_LIMIT_CODES:
        return RateLimitedError(text)
    if code in UNAVAILABLE_CODES:
        return ServiceUnavailableError(text)
    if code in INVALID_FORMAT_CODES:
        return InvalidOTPError(text)
    if code in TIMEOUT_CODES:
        return OTPTimeoutError(text)
    return PlatformError(text, platform=platform, native_code=native_code)
