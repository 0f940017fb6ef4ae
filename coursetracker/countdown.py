"""
Countdown for the two-step "clear all" confirmation.

Arming starts a repeating timer that ticks once per interval. Every tick
decrements the remaining count; at zero the timer stops and confirming
becomes permitted. Disarming (cancel, confirm or teardown) cancels the
timer handle, and a tick that belongs to an older arming is ignored.

The timer is created through a scheduler callable so tests can drive ticks
by hand instead of sleeping:

    scheduler(interval_seconds, callback) -> handle with .cancel()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

CLEAR_ALL_SECONDS = 10
TICK_INTERVAL = 1.0


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


class RepeatingTimer:
    """
    Call `callback` every `interval` seconds on a daemon thread until cancelled.

    cancel() is idempotent and safe to call from inside the callback.
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive.")
        self._interval = interval
        self._callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="clear-all-countdown", daemon=True)

    def start(self) -> "RepeatingTimer":
        self._thread.start()
        return self

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Countdown tick failed")
                self._stop.set()

    def cancel(self) -> None:
        self._stop.set()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()


def thread_scheduler(interval: float, callback: Callable[[], None]) -> RepeatingTimer:
    return RepeatingTimer(interval, callback).start()


class ClearAllConfirmation:
    """
    Armed/disarmed state plus the running countdown.

    on_tick(remaining) is called after every accepted tick, outside the lock.
    """

    def __init__(
        self,
        duration: int = CLEAR_ALL_SECONDS,
        interval: float = TICK_INTERVAL,
        scheduler: Scheduler = thread_scheduler,
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> None:
        if duration < 0:
            raise ValueError("duration must be non-negative.")
        self.duration = duration
        self.interval = interval
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._lock = threading.Lock()
        self._armed = False
        self._remaining = 0
        self._handle: Optional[TimerHandle] = None
        self._token: Optional[object] = None

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def ready(self) -> bool:
        """True once armed and the countdown has reached zero."""
        with self._lock:
            return self._armed and self._remaining == 0

    def arm(self) -> None:
        """Arm (or re-arm) with the full duration and start ticking."""
        with self._lock:
            self._cancel_handle()
            self._armed = True
            self._remaining = self.duration
            token = object()
            self._token = token
            if self.duration > 0:
                self._handle = self._scheduler(self.interval, lambda: self._tick(token))
        logger.debug("Clear-all armed, %s ticks to go", self.duration)

    def disarm(self) -> None:
        """Stop the countdown and forget the arming. No-op when disarmed."""
        with self._lock:
            was_armed = self._armed
            self._cancel_handle()
            self._armed = False
            self._remaining = 0
            self._token = None
        if was_armed:
            logger.debug("Clear-all disarmed")

    def _tick(self, token: object) -> None:
        with self._lock:
            # stale tick from an earlier arming, or already at zero
            if not self._armed or token is not self._token or self._remaining == 0:
                return
            self._remaining -= 1
            remaining = self._remaining
            if remaining == 0:
                self._cancel_handle()

        if self._on_tick is not None:
            self._on_tick(remaining)

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
