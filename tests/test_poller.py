"""Tests for waiting acquisition."""

from __future__ import annotations

import threading
import time

import pytest

from s3lock import (
    Cancellation,
    LockContentionError,
    LockPoller,
    LockTarget,
    Outcome,
    StorageBackendError,
    acquire,
)


def test_uncontended_wait_returns_immediately(store, target):
    poller = LockPoller(store, interval=10.0)
    start = time.monotonic()
    lock = poller.acquire(target, Cancellation.with_timeout(5.0))
    assert time.monotonic() - start < 1.0
    assert lock.held
    assert store.calls == ["create_if_absent"]


def test_wait_succeeds_when_holder_releases(store, target):
    holder = acquire(store, target)
    timer = threading.Timer(0.3, holder.release)
    timer.start()
    try:
        start = time.monotonic()
        lock = LockPoller(store, interval=0.05).acquire(target, Cancellation.with_timeout(2.0))
        elapsed = time.monotonic() - start
    finally:
        timer.join()

    assert lock.owner_id != holder.owner_id
    assert store.get(target) == lock.owner_id
    assert 0.25 <= elapsed < 1.5


def test_deadline_reraises_last_contention(store, target):
    acquire(store, target)
    poller = LockPoller(store, interval=0.02)
    start = time.monotonic()
    with pytest.raises(LockContentionError) as exc_info:
        poller.acquire(target, Cancellation.with_timeout(0.2))
    elapsed = time.monotonic() - start
    assert exc_info.value.target == target
    assert 0.15 <= elapsed < 1.5
    assert store.calls.count("create_if_absent") > 2


def test_explicit_cancel_stops_waiting(store, target):
    acquire(store, target)
    cancel = Cancellation()
    threading.Timer(0.1, cancel.cancel).start()
    with pytest.raises(LockContentionError):
        LockPoller(store, interval=5.0).acquire(target, cancel)
    assert cancel.cancelled


def test_fatal_error_aborts_wait(store):
    missing = LockTarget("no-such-bucket", "lock-obj")
    start = time.monotonic()
    with pytest.raises(StorageBackendError):
        LockPoller(store, interval=0.01).acquire(missing, Cancellation.with_timeout(5.0))
    assert time.monotonic() - start < 1.0
    assert store.calls == ["create_if_absent"]


def test_fatal_error_after_contention_is_not_masked(store, target):
    acquire(store, target)
    poller = LockPoller(store, interval=0.02)

    def _fail_creates() -> None:
        store.create_if_absent = lambda *_args, **_kwargs: Outcome.failure(  # type: ignore[method-assign]
            PermissionError("AccessDenied")
        )

    threading.Timer(0.05, _fail_creates).start()
    with pytest.raises(StorageBackendError) as exc_info:
        poller.acquire(target, Cancellation.with_timeout(2.0))
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_pollers_keep_their_own_interval(store):
    fast = LockPoller(store, interval=0.01)
    slow = LockPoller(store, interval=5.0)
    assert fast.interval == 0.01
    assert slow.interval == 5.0


@pytest.mark.parametrize("interval", [0, -1.0])
def test_interval_must_be_positive(store, interval):
    with pytest.raises(ValueError):
        LockPoller(store, interval=interval)
