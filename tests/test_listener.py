"""
SMS Listener Tests
==================
Tests for event mapping and the in-process retriever listener.
"""

from sms_otp_core.otp import (
    OTPCancelled,
    OTPConfig,
    OTPError,
    OTPSuccess,
    OTPTimeout,
    PermissionStatus,
    RetrieverListener,
    compute_app_signature,
    result_from_event,
)
from sms_otp_core.otp.exceptions import ServiceUnavailableError


class TestResultFromEvent:
    """Tests for native event mapping."""

    def test_otp_received(self):
        event = {"type": "otp_received", "otp": "123456", "message": "code 123456", "sender": "BANK"}
        result = result_from_event(event, OTPConfig())
        assert isinstance(result, OTPSuccess)
        assert result.otp == "123456"
        assert result.sender == "BANK"

    def test_otp_received_without_code(self):
        assert result_from_event({"type": "otp_received"}, OTPConfig()) is None

    def test_timeout(self):
        result = result_from_event({"type": "timeout"}, OTPConfig(timeout_seconds=60))
        assert isinstance(result, OTPTimeout)
        assert result.message == "Timeout"
        assert result.configured_timeout_seconds == 60

    def test_cancelled(self):
        result = result_from_event({"type": "cancelled", "reason": "user"}, OTPConfig())
        assert isinstance(result, OTPCancelled)
        assert result.reason == "user"

    def test_error(self):
        event = {"type": "error", "code": "SMS_RETRIEVER_ERROR", "message": "not ready"}
        result = result_from_event(event, OTPConfig())
        assert isinstance(result, OTPError)
        assert isinstance(result.exception, ServiceUnavailableError)

    def test_unknown_type(self):
        assert result_from_event({"type": "mystery"}, OTPConfig()) is None


class TestRetrieverListener:
    """Tests for RetrieverListener."""

    def setup_method(self):
        self.results = []
        self.listener = RetrieverListener()

    def test_delivers_parsed_code(self):
        self.listener.start(OTPConfig(), self.results.append)
        result = self.listener.deliver("<#> Your code is 123456\nFA+9qCX9VSu", sender="+15551234567")

        assert result.otp == "123456"
        assert self.results == [result]

    def test_ignored_when_not_listening(self):
        assert self.listener.deliver("Your code is 123456") is None
        assert self.results == []

    def test_sender_filter(self):
        self.listener.start(OTPConfig(sender_filter="BANK"), self.results.append)

        assert self.listener.deliver("Your code is 123456", sender="SPAM") is None
        assert self.listener.deliver("Your code is 123456", sender="BANK").otp == "123456"

    def test_message_without_code_dropped(self):
        self.listener.start(OTPConfig(), self.results.append)
        assert self.listener.deliver("Hello there") is None
        assert self.results == []
        assert self.listener.is_listening is True

    def test_uses_config_length(self):
        self.listener.start(OTPConfig(otp_length=4), self.results.append)
        assert self.listener.deliver("Your code is 123456") is None
        assert self.listener.deliver("Your PIN: 9876").otp == "9876"

    def test_uses_custom_pattern(self):
        config = OTPConfig(custom_otp_pattern=r"ref\s+(\d{6})")
        self.listener.start(config, self.results.append)
        assert self.listener.deliver("Code 111111 or ref 222222").otp == "222222"

    def test_timeout_after_ticks(self):
        self.listener.start(OTPConfig(timeout_seconds=3), self.results.append)

        self.listener.tick()
        self.listener.tick()
        assert self.results == []

        self.listener.tick()
        assert len(self.results) == 1
        assert isinstance(self.results[0], OTPTimeout)
        assert self.listener.is_listening is False

    def test_stop_is_idempotent(self):
        self.listener.start(OTPConfig(), self.results.append)
        self.listener.stop()
        self.listener.stop()
        assert self.listener.is_listening is False

    def test_deliver_event(self):
        self.listener.start(OTPConfig(), self.results.append)
        result = self.listener.deliver_event({"type": "cancelled"})
        assert isinstance(result, OTPCancelled)
        assert self.results == [result]

    def test_app_signature(self):
        listener = RetrieverListener(package_name="com.example", signing_certificate="abcd")
        assert listener.get_app_signature() == compute_app_signature("com.example", "abcd")
        assert RetrieverListener().get_app_signature() is None

    def test_permissions_and_auto_read(self):
        assert self.listener.request_permissions() == PermissionStatus.GRANTED
        assert self.listener.supports_auto_read is True
