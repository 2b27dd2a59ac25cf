"""
OTP Result Tests
================
Tests for result dispatch and platform error mapping.
"""

import pytest

from sms_otp_core.otp import (
    OTPCancelled,
    OTPError,
    OTPSuccess,
    OTPTimeout,
    map_platform_error,
)
from sms_otp_core.otp.exceptions import (
    InvalidOTPError,
    OTPTimeoutError,
    PermissionDeniedError,
    PlatformError,
    RateLimitedError,
    ServiceUnavailableError,
)


def _dispatch(result):
    return result.when(
        success=lambda otp: ("success", otp),
        timeout=lambda message: ("timeout", message),
        error=lambda exc: ("error", exc.code),
        cancelled=lambda: ("cancelled", None),
    )


class TestOTPResult:
    """Tests for result types."""

    def test_success(self):
        result = OTPSuccess(otp="123456", sender="VERIFY")
        assert result.is_success is True
        assert result.is_failure is False
        assert _dispatch(result) == ("success", "123456")
        assert result.received_at is not None

    def test_success_repr_masks_code(self):
        assert "123456" not in repr(OTPSuccess(otp="123456"))

    def test_timeout(self):
        result = OTPTimeout(configured_timeout_seconds=60)
        assert result.is_failure is True
        assert _dispatch(result) == ("timeout", "OTP verification timed out")

    def test_error(self):
        result = OTPError(ServiceUnavailableError("down"))
        assert _dispatch(result) == ("error", "SERVICE_UNAVAILABLE")

    def test_cancelled(self):
        assert _dispatch(OTPCancelled(reason="user")) == ("cancelled", None)

    def test_maybe_when_fallback(self):
        result = OTPTimeout()
        value = result.maybe_when(success=lambda otp: otp, or_else=lambda: "fallback")
        assert value == "fallback"

    def test_maybe_when_match(self):
        result = OTPSuccess(otp="4321")
        assert result.maybe_when(success=lambda otp: otp, or_else=lambda: None) == "4321"


class TestMapPlatformError:
    """Tests for native error code mapping."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("PERMISSION_DENIED", PermissionDeniedError),
            ("RATE_LIMITED", RateLimitedError),
            ("too_many_requests", RateLimitedError),
            ("SMS_RETRIEVER_ERROR", ServiceUnavailableError),
            ("NO_CONTEXT", ServiceUnavailableError),
            ("INVALID_FORMAT", InvalidOTPError),
            ("TIMEOUT", OTPTimeoutError),
            ("SOMETHING_ELSE", PlatformError),
            (None, PlatformError),
        ],
    )
    def test_mapping(self, code, expected):
        assert isinstance(map_platform_error(code, "boom"), expected)

    def test_permanent_denial(self):
        exc = map_platform_error("PERMISSION_PERMANENTLY_DENIED", "no")
        assert exc.permanently_denied is True
        assert exc.code == "PERMISSION_DENIED"

    def test_platform_error_keeps_native_code(self):
        exc = map_platform_error("E42", "weird", platform="ios")
        assert exc.native_code == "E42"
        assert exc.platform == "ios"
        assert exc.message == "weird"

    def test_default_message(self):
        assert map_platform_error("E42").message == "Unknown platform error"

    def test_rate_limited_str(self):
        exc = RateLimitedError("Too soon", retry_after=12, attempts_made=2, max_attempts=3)
        assert "12s" in str(exc)
        assert "2/3" in str(exc)
