"""
OTP Extraction and Entry
========================
SMS OTP parsing, retriever signatures, listeners and the retry controller.
"""

from .exceptions import (
    OTPException,
    PlatformError,
    PermissionDeniedError,
    OTPTimeoutError,
    InvalidOTPError,
    RateLimitedError,
    ServiceUnavailableError,
    ConfigurationError,
)
from .models import OTPConfig, OTPMessageFormat
from .results import (
    OTPResult,
    OTPSuccess,
    OTPTimeout,
    OTPError,
    OTPCancelled,
    PermissionStatus,
    map_platform_error,
)
from .parser import (
    OTPParser,
    extract_otp,
    contains_otp,
    extract_all_potential_otps,
    detect_format,
)
from .signature import (
    compute_app_signature,
    compute_app_signatures,
    build_retriever_message,
    is_retriever_message,
)
from .listener import SMSListener, RetrieverListener, EventType, result_from_event
from .controller import OTPController, OTPState, ListenerPhase
from .countdown import ResendCountdown, format_duration

__all__ = [
    # Exceptions
    "OTPException",
    "PlatformError",
    "PermissionDeniedError",
    "OTPTimeoutError",
    "InvalidOTPError",
    "RateLimitedError",
    "ServiceUnavailableError",
    "ConfigurationError",
    # Models
    "OTPConfig",
    "OTPMessageFormat",
    # Results
    "OTPResult",
    "OTPSuccess",
    "OTPTimeout",
    "OTPError",
    "OTPCancelled",
    "PermissionStatus",
    "map_platform_error",
    # Parser
    "OTPParser",
    "extract_otp",
    "contains_otp",
    "extract_all_potential_otps",
    "detect_format",
    # Signature
    "compute_app_signature",
    "compute_app_signatures",
    "build_retriever_message",
    "is_retriever_message",
    # Listener
    "SMSListener",
    "RetrieverListener",
    "EventType",
    "result_from_event",
    # Controller
    "OTPController",
    "OTPState",
    "ListenerPhase",
    # Countdown
    "ResendCountdown",
    "format_duration",
]
