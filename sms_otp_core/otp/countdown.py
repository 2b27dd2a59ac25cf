"""
Resend Countdown
================
Tick-driven countdown gating the "resend code" action.
"""

from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


def format_duration(seconds: int) -> str:
    """Format seconds as MM:SS."""
    seconds = max(seconds, 0)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class ResendCountdown:
    """
    Countdown until a new code may be requested.

    Call ``tick()`` once per second. ``on_tick`` receives the remaining
    seconds after each decrement; ``on_finished`` fires once at zero.
    """

    def __init__(
        self,
        duration_seconds: int = 30,
        on_tick: Optional[Callable[[int], None]] = None,
        on_finished: Optional[Callable[[], None]] = None,
        auto_start: bool = True,
    ):
        if duration_seconds < 0:
            raise ValueError("duration_seconds must not be negative")
        self.duration_seconds = duration_seconds
        self.on_tick = on_tick
        self.on_finished = on_finished
        self._remaining = duration_seconds
        self._running = False
        self._finished_notified = False
        if auto_start:
            self.start()

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def can_resend(self) -> bool:
        return self._remaining <= 0

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True
        if self._remaining <= 0:
            self._finish()

    def tick(self) -> None:
        if not self._running or self._remaining <= 0:
            return
        self._remaining -= 1
        if self.on_tick is not None:
            self.on_tick(self._remaining)
        if self._remaining <= 0:
            self._finish()

    def _finish(self) -> None:
        self._running = False
        if self._finished_notified:
            return
        self._finished_notified = True
        logger.debug("resend_countdown_finished", duration=self.duration_seconds)
        if self.on_finished is not None:
            self.on_finished()

    def pause(self) -> None:
        self._running = False

    def resume(self) -> None:
        if self._remaining > 0:
            self._running = True

    def restart(self, duration_seconds: Optional[int] = None) -> None:
        """Reset to the full duration (or a new one) and start again."""
        if duration_seconds is not None:
            self.duration_seconds = duration_seconds
        self._remaining = self.duration_seconds
        self._finished_notified = False
        self.start()

    def format_remaining(self) -> str:
        return format_duration(self._remaining)
