"""Shared test fixtures for s3lock tests."""

from __future__ import annotations

import pytest

from s3lock import InMemoryObjectStore, LockTarget

BUCKET = "s3lock-test"


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore(buckets=[BUCKET])


@pytest.fixture
def target() -> LockTarget:
    return LockTarget(BUCKET, "lock-obj")
