"""Tests for cancellation tokens."""

from __future__ import annotations

import threading
import time

import pytest

from s3lock import Cancellation, CancelledError, DeadlineExceededError


def test_fresh_token_is_not_cancelled():
    cancel = Cancellation()
    assert not cancel.cancelled
    assert cancel.cause is None
    assert cancel.remaining() is None


def test_cancel_records_cause():
    cancel = Cancellation()
    cause = RuntimeError("shutting down")
    cancel.cancel(cause)
    cancel.cancel(RuntimeError("ignored"))
    assert cancel.cancelled
    assert cancel.cause is cause


def test_cancel_without_cause():
    cancel = Cancellation()
    cancel.cancel()
    assert isinstance(cancel.cause, CancelledError)


def test_deadline_fires():
    cancel = Cancellation.with_timeout(0.05)
    assert not cancel.cancelled
    assert cancel.wait(5.0) is True
    assert isinstance(cancel.cause, DeadlineExceededError)
    assert cancel.remaining() == 0.0


def test_wait_times_out_without_firing():
    cancel = Cancellation.with_timeout(10.0)
    start = time.monotonic()
    assert cancel.wait(0.05) is False
    assert time.monotonic() - start < 1.0


def test_wait_wakes_on_cancel():
    cancel = Cancellation()
    threading.Timer(0.05, cancel.cancel).start()
    start = time.monotonic()
    assert cancel.wait(5.0) is True
    assert time.monotonic() - start < 1.0


def test_negative_timeout_rejected():
    with pytest.raises(ValueError):
        Cancellation.with_timeout(-1)
