"""
SMS Listeners
=============
Push-based SMS sources that turn incoming messages and native platform
events into OTP results.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import structlog

from .models import OTPConfig
from .parser import OTPParser
from .results import (
    OTPResult,
    OTPSuccess,
    OTPTimeout,
    OTPError,
    OTPCancelled,
    PermissionStatus,
    map_platform_error,
)
from .signature import compute_app_signature
from ..phone.validator import mask_phone

logger = structlog.get_logger(__name__)

ResultCallback = Callable[[OTPResult], None]


class EventType:
    """Event types emitted by the native SMS receiver."""
    OTP_RECEIVED = "otp_received"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    ERROR = "error"


def result_from_event(
    event: Dict[str, Any],
    config: OTPConfig,
    platform: str = "android",
) -> Optional[OTPResult]:
    """
    Map a native event map to an OTP result.

    Args:
        event: Event with a ``type`` key and type-specific fields
        config: Active OTP configuration
        platform: Platform that produced the event

    Returns:
        OTPResult, or None for unknown or incomplete events
    """
    event_type = event.get("type")

    if event_type == EventType.OTP_RECEIVED:
        otp = event.get("otp")
        if not otp:
            return None
        return OTPSuccess(
            otp=otp,
            raw_message=event.get("message"),
            sender=event.get("sender"),
        )

    if event_type == EventType.TIMEOUT:
        return OTPTimeout(
            message=event.get("message") or "Timeout",
            configured_timeout_seconds=config.timeout_seconds,
        )

    if event_type == EventType.CANCELLED:
        return OTPCancelled(reason=event.get("reason"))

    if event_type == EventType.ERROR:
        return OTPError(
            map_platform_error(
                event.get("code"),
                event.get("message") or "Unknown error",
                platform=platform,
            )
        )

    logger.debug("sms_event_ignored", event_type=event_type)
    return None


class SMSListener(ABC):
    """
    Abstract base class for SMS OTP sources.

    Implementations deliver results to the callback passed to ``start``.
    """

    name: str = "base"
    supports_auto_read: bool = False

    def __init__(self):
        self._config: Optional[OTPConfig] = None
        self._callback: Optional[ResultCallback] = None

    @property
    def is_listening(self) -> bool:
        return self._callback is not None

    @abstractmethod
    def start(self, config: OTPConfig, callback: ResultCallback) -> None:
        """
        Start listening for OTP messages.

        Args:
            config: OTP configuration (length, timeout, sender filter)
            callback: Receives each OTPResult
        """
        pass

    def stop(self) -> None:
        """Stop listening and drop the subscription."""
        if not self.is_listening:
            return
        self._callback = None
        logger.debug("sms_listener_stopped", listener=self.name)

    def tick(self, seconds: int = 1) -> None:
        """Advance listener time. Default sources have no timeout."""

    def get_app_signature(self) -> Optional[str]:
        """App signature for retriever messages, if the source uses one."""
        return None

    def request_permissions(self) -> PermissionStatus:
        return PermissionStatus.NOT_REQUIRED

    def _dispatch(self, result: OTPResult) -> None:
        callback = self._callback
        if callback is not None:
            callback(result)


class RetrieverListener(SMSListener):
    """
    In-process SMS Retriever receiver.

    Messages are pushed in with ``deliver``; matching ones are parsed and
    forwarded as results. Listening ends after ``timeout_seconds`` ticks.

    Example:
        listener = RetrieverListener(package_name="com.example.app",
                                     signing_certificate="3082...")
        listener.start(OTPConfig(), on_result)
        listener.deliver("<#> Your code is 123456\\nFA+9qCX9VSu")
    """

    name = "sms_retriever"
    supports_auto_read = True

    def __init__(
        self,
        package_name: Optional[str] = None,
        signing_certificate: Optional[str] = None,
        parser: Optional[OTPParser] = None,
        platform: str = "android",
    ):
        super().__init__()
        self.package_name = package_name
        self.signing_certificate = signing_certificate
        self.platform = platform
        self._parser = parser or OTPParser()
        self._elapsed_seconds = 0

    def start(self, config: OTPConfig, callback: ResultCallback) -> None:
        if self.is_listening:
            logger.debug("sms_listener_already_listening", listener=self.name)
            return
        self._config = config
        self._callback = callback
        self._elapsed_seconds = 0
        logger.info(
            "sms_listener_started",
            listener=self.name,
            timeout=config.timeout_seconds,
            otp_length=config.otp_length,
        )

    def deliver(self, message: str, sender: Optional[str] = None) -> Optional[OTPResult]:
        """
        Push a received SMS into the listener.

        Args:
            message: Raw SMS body
            sender: Originating number or short code

        Returns:
            The dispatched result, or None if the message was ignored
        """
        if not self.is_listening:
            return None

        config = self._config
        if config.sender_filter and sender != config.sender_filter:
            logger.debug("sms_sender_filtered", listener=self.name, sender=mask_phone(sender or ""))
            return None

        otp = self._parser.extract_otp(
            message,
            expected_length=config.otp_length,
            custom_pattern=config.custom_otp_pattern,
        )
        if otp is None:
            logger.debug("sms_without_otp", listener=self.name)
            return None

        result = OTPSuccess(otp=otp, raw_message=message, sender=sender)
        logger.info(
            "otp_received",
            listener=self.name,
            format=self._parser.detect_format(message).value,
            sender=mask_phone(sender) if sender else None,
        )
        self._dispatch(result)
        return result

    def deliver_event(self, event: Dict[str, Any]) -> Optional[OTPResult]:
        """Dispatch a native event map while listening."""
        if not self.is_listening:
            return None
        result = result_from_event(event, self._config, platform=self.platform)
        if result is not None:
            self._dispatch(result)
        return result

    def tick(self, seconds: int = 1) -> None:
        if not self.is_listening:
            return
        self._elapsed_seconds += seconds
        timeout = self._config.timeout_seconds
        if timeout and self._elapsed_seconds >= timeout:
            logger.warning("sms_listener_timeout", listener=self.name, timeout=timeout)
            callback = self._callback
            self.stop()
            if callback is not None:
                callback(
                    OTPTimeout(
                        message=f"OTP verification timed out after {timeout} seconds",
                        configured_timeout_seconds=timeout,
                    )
                )

    def get_app_signature(self) -> Optional[str]:
        if not self.package_name or not self.signing_certificate:
            return None
        return compute_app_signature(self.package_name, self.signing_certificate)

    def request_permissions(self) -> PermissionStatus:
        # The retriever API needs no SMS permission
        return PermissionStatus.GRANTED
