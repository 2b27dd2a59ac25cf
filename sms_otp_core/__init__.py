"""
SMS OTP Core Library
====================
OTP extraction from SMS text, phone number validation, SMS Retriever
signatures and the OTP retry/cooldown controller.
"""

__version__ = "1.0.0"

# OTP
from sms_otp_core.otp import (
    OTPConfig,
    OTPMessageFormat,
    OTPParser,
    extract_otp,
    contains_otp,
    extract_all_potential_otps,
    detect_format,
    OTPResult,
    OTPSuccess,
    OTPTimeout,
    OTPError,
    OTPCancelled,
    PermissionStatus,
    map_platform_error,
    compute_app_signature,
    compute_app_signatures,
    build_retriever_message,
    is_retriever_message,
    SMSListener,
    RetrieverListener,
    result_from_event,
    OTPController,
    OTPState,
    ListenerPhase,
    ResendCountdown,
    format_duration,
)

# Exceptions
from sms_otp_core.otp.exceptions import (
    OTPException,
    PlatformError,
    PermissionDeniedError,
    OTPTimeoutError,
    InvalidOTPError,
    RateLimitedError,
    ServiceUnavailableError,
    ConfigurationError,
)

# Phone
from sms_otp_core.phone import (
    PhoneValidator,
    PhoneNumberFormat,
    PhoneValidationError,
    PhoneValidationResult,
    validate_e164,
    mask_phone,
)

# Config
from sms_otp_core.config import Settings, get_settings

__all__ = [
    # OTP
    "OTPConfig",
    "OTPMessageFormat",
    "OTPParser",
    "extract_otp",
    "contains_otp",
    "extract_all_potential_otps",
    "detect_format",
    "OTPResult",
    "OTPSuccess",
    "OTPTimeout",
    "OTPError",
    "OTPCancelled",
    "PermissionStatus",
    "map_platform_error",
    "compute_app_signature",
    "compute_app_signatures",
    "build_retriever_message",
    "is_retriever_message",
    "SMSListener",
    "RetrieverListener",
    "result_from_event",
    "OTPController",
    "OTPState",
    "ListenerPhase",
    "ResendCountdown",
    "format_duration",
    # Exceptions
    "OTPException",
    "PlatformError",
    "PermissionDeniedError",
    "OTPTimeoutError",
    "InvalidOTPError",
    "RateLimitedError",
    "ServiceUnavailableError",
    "ConfigurationError",
    # Phone
    "PhoneValidator",
    "PhoneNumberFormat",
    "PhoneValidationError",
    "PhoneValidationResult",
    "validate_e164",
    "mask_phone",
    # Config
    "Settings",
    "get_settings",
]
