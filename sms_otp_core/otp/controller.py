"""
OTP Controller
==============
State machine for an OTP entry session: listening, manual entry, and the
retry/cooldown gate on requesting new codes.

Phases::

    idle -> listening -> (success | timeout | error) -> idle

A parallel cooldown counter gates new requests. All time is driven by
``tick()``, called once per second by the host.
"""

import hmac
import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

import structlog

from .exceptions import OTPException, RateLimitedError
from .listener import RetrieverListener, SMSListener
from .models import OTPConfig
from .results import OTPResult

logger = structlog.get_logger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")

MAX_RETRY_MESSAGE = "Maximum retry limit reached. Please try again later."


class ListenerPhase(str, Enum):
    """Phase of the current listening cycle."""
    IDLE = "idle"
    LISTENING = "listening"
    SUCCESS = "success"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True)
class OTPState:
    """Snapshot of an OTP entry session."""
    otp: str = ""
    phase: ListenerPhase = ListenerPhase.IDLE
    is_complete: bool = False
    error_message: Optional[str] = None
    retry_count: int = 0
    can_retry: bool = True
    retry_wait_seconds: Optional[int] = None
    started_at: Optional[datetime] = None
    last_result: Optional[OTPResult] = None

    @property
    def is_listening(self) -> bool:
        return self.phase == ListenerPhase.LISTENING

    @property
    def has_error(self) -> bool:
        return self.error_message is not None

    def __repr__(self) -> str:
        return (
            f"OTPState(otp={'***' if self.otp else 'empty'}, phase={self.phase.value}, "
            f"is_complete={self.is_complete}, retry_count={self.retry_count})"
        )


StateObserver = Callable[[OTPState], None]


class OTPController:
    """
    Controller for an OTP entry session.

    Example:
        with OTPController(OTPConfig(otp_length=6)) as controller:
            controller.start_listening()
            ...
            controller.tick()  # once per second
    """

    def __init__(
        self,
        config: Optional[OTPConfig] = None,
        listener: Optional[SMSListener] = None,
        on_completed: Optional[Callable[[str], None]] = None,
    ):
        self.config = config or OTPConfig()
        self._listener = listener or RetrieverListener()
        self._on_completed = on_completed
        self._state = self._initial_state()
        self._observers: List[StateObserver] = []
        self._cooldown_remaining = 0
        self._enable_retry_after = False

    def _initial_state(self) -> OTPState:
        return OTPState(can_retry=self.config.max_retries > 0)

    @property
    def state(self) -> OTPState:
        return self._state

    @property
    def cooldown_remaining(self) -> int:
        """Seconds until a new code may be requested."""
        return self._cooldown_remaining

    @property
    def supports_auto_read(self) -> bool:
        return self._listener.supports_auto_read

    def get_app_signature(self) -> Optional[str]:
        """App signature to append to retriever messages."""
        return self._listener.get_app_signature()

    def add_listener(self, observer: StateObserver) -> None:
        """Register a callback invoked with every new state."""
        self._observers.append(observer)

    def remove_listener(self, observer: StateObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _set_state(self, **changes) -> None:
        previous = self._state
        self._state = replace(previous, **changes)
        if self._state.phase != previous.phase:
            logger.debug(
                "otp_phase_changed",
                previous=previous.phase.value,
                phase=self._state.phase.value,
            )
        for observer in list(self._observers):
            observer(self._state)

    # ------------------------------------------------------------------
    # Listening
    # ------------------------------------------------------------------

    def start_listening(self) -> None:
        """
        Start listening for an incoming OTP SMS.

        Call this when the OTP request is sent to the server.
        """
        if self._state.is_listening:
            return

        if 0 < self.config.max_retries <= self._state.retry_count and not self._state.can_retry:
            logger.warning(
                "otp_retry_limit_reached",
                retry_count=self._state.retry_count,
                max_retries=self.config.max_retries,
            )
            self._set_state(error_message=MAX_RETRY_MESSAGE)
            return

        self._begin_listening()

    def _begin_listening(self) -> None:
        self._set_state(
            phase=ListenerPhase.LISTENING,
            error_message=None,
            started_at=datetime.now(timezone.utc),
        )
        self._listener.start(self.config, self._handle_result)

    def _handle_result(self, result: OTPResult) -> None:
        self._listener.stop()
        result.when(
            success=lambda otp: self._on_success(otp, result),
            timeout=lambda message: self._on_failure(ListenerPhase.TIMEOUT, message, result),
            error=lambda exc: self._on_error(exc, result),
            cancelled=lambda: self._set_state(phase=ListenerPhase.IDLE, last_result=result),
        )

    def _on_success(self, otp: str, result: OTPResult) -> None:
        complete = len(otp) >= self.config.otp_length
        self._set_state(
            otp=otp,
            phase=ListenerPhase.SUCCESS,
            is_complete=complete,
            error_message=None,
            last_result=result,
        )
        if complete:
            self._notify_completed()

    def _on_error(self, exc: OTPException, result: OTPResult) -> None:
        logger.warning("otp_listener_error", error_code=exc.code, error=exc.message)
        self._on_failure(ListenerPhase.ERROR, exc.message, result)

    def _on_failure(self, phase: ListenerPhase, message: str, result: OTPResult) -> None:
        self._set_state(phase=phase, error_message=message, last_result=result)

    def stop_listening(self) -> None:
        """Stop the SMS listener."""
        self._listener.stop()
        if self._state.is_listening:
            self._set_state(phase=ListenerPhase.IDLE)

    # ------------------------------------------------------------------
    # Manual entry
    # ------------------------------------------------------------------

    def set_otp(self, otp: str) -> None:
        """Set the code from user input, keeping digits only."""
        digits = _NON_DIGITS.sub("", otp)[: self.config.otp_length]
        complete = len(digits) >= self.config.otp_length
        was_complete = self._state.is_complete
        self._set_state(otp=digits, is_complete=complete, error_message=None)
        if complete and not was_complete:
            self._notify_completed()

    def append_digit(self, digit: str) -> None:
        if len(self._state.otp) >= self.config.otp_length:
            return
        if len(digit) != 1 or not "0" <= digit <= "9":
            return
        self.set_otp(self._state.otp + digit)

    def remove_last_digit(self) -> None:
        if not self._state.otp:
            return
        self.set_otp(self._state.otp[:-1])

    def clear(self) -> None:
        self._set_state(otp="", is_complete=False, error_message=None)

    def _notify_completed(self) -> None:
        if self.config.auto_submit and self._on_completed is not None:
            self._on_completed(self._state.otp)

    # ------------------------------------------------------------------
    # Retry / cooldown
    # ------------------------------------------------------------------

    def request_new_otp(self) -> None:
        """
        Request a new code.

        Increments the retry count, starts the cooldown and listens again.

        Raises:
            RateLimitedError: If the cooldown is running or retries are used up
        """
        if not self._state.can_retry or self._state.retry_count >= self.config.max_retries:
            raise RateLimitedError(
                "New code requested too soon"
                if self._cooldown_remaining
                else MAX_RETRY_MESSAGE,
                retry_after=self._cooldown_remaining,
                attempts_made=self._state.retry_count,
                max_attempts=self.config.max_retries,
            )

        retry_count = self._state.retry_count + 1
        self._enable_retry_after = retry_count < self.config.max_retries
        self._cooldown_remaining = self.config.retry_cooldown_seconds

        self._listener.stop()
        self._set_state(
            otp="",
            phase=ListenerPhase.IDLE,
            is_complete=False,
            error_message=None,
            retry_count=retry_count,
            can_retry=False,
            retry_wait_seconds=self._cooldown_remaining or None,
        )
        logger.info(
            "otp_retry_requested",
            retry_count=retry_count,
            max_retries=self.config.max_retries,
            cooldown=self._cooldown_remaining,
        )

        if self._cooldown_remaining == 0:
            self._finish_cooldown()

        self._begin_listening()

    def _finish_cooldown(self) -> None:
        self._set_state(can_retry=self._enable_retry_after, retry_wait_seconds=None)

    def tick(self) -> None:
        """Advance the session by one second."""
        if self._cooldown_remaining > 0:
            self._cooldown_remaining -= 1
            if self._cooldown_remaining == 0:
                self._finish_cooldown()
            else:
                self._set_state(retry_wait_seconds=self._cooldown_remaining)

        self._listener.tick(1)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> bool:
        """Return True if the current code is complete and numeric."""
        otp = self._state.otp
        if len(otp) != self.config.otp_length:
            self._set_state(error_message=f"Please enter all {self.config.otp_length} digits")
            return False

        if _NON_DIGITS.search(otp):
            self._set_state(error_message="OTP must contain only digits")
            return False

        return True

    def verify(self, expected: str) -> bool:
        """
        Validate the current code and compare it with a known code.

        Uses constant-time comparison.
        """
        if not self.validate():
            return False
        if not hmac.compare_digest(self._state.otp, expected):
            self._set_state(error_message="Invalid OTP")
            return False
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Return to the initial state."""
        self._listener.stop()
        self._cooldown_remaining = 0
        self._enable_retry_after = False
        self._state = self._initial_state()
        for observer in list(self._observers):
            observer(self._state)

    def close(self) -> None:
        self._listener.stop()
        self._observers.clear()

    def __enter__(self) -> "OTPController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
