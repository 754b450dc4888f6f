"""Blocking acquisition: retry on contention until success or cancellation."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from s3lock.cancel import Cancellation
from s3lock.config import DEFAULT_WAIT_INTERVAL_S
from s3lock.errors import LockContentionError
from s3lock.lock import Lock, LockTarget, acquire

if TYPE_CHECKING:
    from s3lock.store import ObjectStore

logger = logging.getLogger(__name__)


class LockPoller:
    """Polls ``acquire`` on a fixed interval.

    Only contention is retried. Any other failure aborts the wait at once, and
    when the cancellation token fires first the last contention error is
    re-raised rather than a generic timeout.
    """

    def __init__(self, store: ObjectStore, *, interval: float = DEFAULT_WAIT_INTERVAL_S) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.store = store
        self.interval = interval

    def acquire(self, target: LockTarget, cancel: Cancellation | None = None) -> Lock:
        try:
            return acquire(self.store, target, cancel)
        except LockContentionError as e:
            last_error = e

        token = cancel if cancel is not None else Cancellation()
        next_tick = time.monotonic() + self.interval
        attempts = 1
        while True:
            if token.wait(max(0.0, next_tick - time.monotonic())):
                logger.debug("wait %s: cancelled after %d attempt(s)", target, attempts)
                raise last_error

            now = time.monotonic()
            while next_tick <= now:
                next_tick += self.interval

            attempts += 1
            try:
                return acquire(self.store, target, cancel)
            except LockContentionError as e:
                logger.debug("wait %s: still held (attempt %d)", target, attempts)
                last_error = e
