"""Cancellation tokens threaded through every store call."""

from __future__ import annotations

import threading
import time

from s3lock.errors import CancelledError, DeadlineExceededError


class Cancellation:
    """A cancellation signal with an optional deadline.

    The token fires either when ``cancel()`` is called or when the deadline
    passes, whichever comes first. Once fired it stays fired.
    """

    def __init__(self, timeout_s: float | None = None) -> None:
        self._event = threading.Event()
        self._timeout_s = timeout_s
        self._deadline = None if timeout_s is None else time.monotonic() + timeout_s
        self._cause: BaseException | None = None

    @classmethod
    def with_timeout(cls, timeout_s: float) -> Cancellation:
        if timeout_s < 0:
            raise ValueError(f"timeout must be non-negative, got {timeout_s}")
        return cls(timeout_s)

    def cancel(self, cause: BaseException | None = None) -> None:
        if not self._event.is_set():
            self._cause = cause
            self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cause(self) -> BaseException | None:
        """Why the token fired, or None while it has not."""
        if self._event.is_set():
            return self._cause or CancelledError()
        if self.cancelled:
            return DeadlineExceededError(self._timeout_s)
        return None

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to ``timeout`` seconds; return True if the token fired."""
        remaining = self.remaining()
        if remaining is not None and (timeout is None or remaining < timeout):
            timeout = remaining
        self._event.wait(timeout)
        return self.cancelled
