"""
Request cancellation primitives.

A ``CancellationToken`` is created per request and handed to the transport.
A ``TimeoutTimer`` cancels the token once the request's timeout elapses and
records that moment on the token as its deadline, so the transport can bound
the network call itself by the time that is left.
Stopping the timer disarms the token, so a timer that fires after the
request already finished has no effect.
"""

from __future__ import annotations
import logging
import threading
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe, idempotent cancellation signal."""

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._disarmed = False
        self._callbacks: List[Callable[[], None]] = []
        self.deadline: Optional[float] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def disarmed(self) -> bool:
        return self._disarmed

    def cancel(self) -> bool:
        """
        Signal cancellation.

        Returns:
            True if this call cancelled the token, False if it was already
            cancelled or disarmed
        """
        with self._lock:
            if self._disarmed or self._event.is_set():
                return False
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            callback()
        return True

    def disarm(self) -> None:
        """Make every later ``cancel()`` a no-op."""
        with self._lock:
            self._disarmed = True
            self._callbacks = []

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation, immediately if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                if not self._disarmed:
                    self._callbacks.append(callback)
                return
        callback()

    def set_deadline(self, seconds: float) -> None:
        """Record that the token will be cancelled ``seconds`` from now."""
        self.deadline = time.monotonic() + seconds

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, or None when there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or until ``timeout`` seconds pass."""
        return self._event.wait(timeout)


class TimeoutTimer:
    """
    Cancel a token after a number of seconds.

    Usage:
        token = CancellationToken()
        with TimeoutTimer(2.5, token):
            transport.send(request, token)
    """

    def __init__(self, seconds: float, token: CancellationToken):
        self.seconds = seconds
        self.token = token
        self._timer: Optional[threading.Timer] = None

    def _fire(self) -> None:
        if self.token.cancel():
            logger.warning(f"Request timed out after {self.seconds}s, cancelling")

    def start(self) -> TimeoutTimer:
        self.token.set_deadline(self.seconds)
        self._timer = threading.Timer(self.seconds, self._fire)
        self._timer.daemon = True
        self._timer.start()
        return self

    def stop(self) -> None:
        """Disarm the token, then cancel the pending timer."""
        self.token.disarm()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __enter__(self) -> TimeoutTimer:
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()


__all__ = ["CancellationToken", "TimeoutTimer"]
