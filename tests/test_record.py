"""Tests for lock record serialization."""

from __future__ import annotations

import json
import os
import stat

import pytest

from s3lock import (
    InMemoryObjectStore,
    InvalidLockRecordError,
    LockState,
    OwnershipMismatchError,
    acquire,
    dumps,
    loads,
    marshal,
    read_record,
    unmarshal,
    write_record,
)

RECORD = {"Bucket": "s3lock-test", "Key": "lock-obj", "Id": "my-id", "ETag": '"my-etag"'}


def test_marshal_field_names_and_order(store, target):
    lock = acquire(store, target)
    record = marshal(lock)
    assert list(record) == ["Bucket", "Key", "Id", "ETag"]
    assert record["Bucket"] == target.bucket
    assert record["Key"] == target.key
    assert record["Id"] == lock.owner_id
    assert record["ETag"] == lock.version_token


def test_dumps_is_compact_json():
    lock = unmarshal(InMemoryObjectStore(), RECORD)
    assert dumps(lock) == (
        '{"Bucket":"s3lock-test","Key":"lock-obj","Id":"my-id","ETag":"\\"my-etag\\""}'
    )


def test_unmarshal_reproduces_handle(store, target):
    lock = acquire(store, target)
    restored = unmarshal(store, marshal(lock))
    assert restored == lock
    assert restored.state is LockState.HELD


def test_marshal_reproduces_record(store):
    assert marshal(unmarshal(store, RECORD)) == RECORD


def test_unmarshal_makes_no_store_call(store):
    unmarshal(store, RECORD)
    assert store.calls == []


def test_unmarshal_ignores_unknown_fields(store):
    lock = unmarshal(store, {**RECORD, "Extra": 1})
    assert marshal(lock) == RECORD


@pytest.mark.parametrize("missing", ["Bucket", "Key", "Id", "ETag"])
def test_unmarshal_requires_all_fields(store, missing):
    record = {k: v for k, v in RECORD.items() if k != missing}
    with pytest.raises(InvalidLockRecordError, match=missing):
        unmarshal(store, record)


def test_unmarshal_requires_strings(store):
    with pytest.raises(InvalidLockRecordError, match="ETag"):
        unmarshal(store, {**RECORD, "ETag": 12})


def test_loads_rejects_invalid_json(store):
    with pytest.raises(InvalidLockRecordError):
        loads(store, "{not json")
    with pytest.raises(InvalidLockRecordError):
        loads(store, "[1, 2]")
    with pytest.raises(ValueError):
        loads(store, b"\xff\xfe")


def test_restored_handle_releases_lock(store, target):
    lock = acquire(store, target)
    data = dumps(lock)
    del lock

    restored = loads(store, data.encode("utf-8"))
    restored.release()
    assert store.get(target) is None
    assert restored.state is LockState.RELEASED


def test_restored_stale_handle_is_validated_on_release(store, target):
    lock = acquire(store, target)
    restored = loads(store, dumps(lock))
    lock.release()
    acquire(store, target)
    assert restored.held
    with pytest.raises(OwnershipMismatchError):
        restored.release()


def test_write_and_read_record_file(store, target, tmp_path):
    lock = acquire(store, target)
    path = write_record(lock, tmp_path / "lock.info")

    assert json.loads(path.read_text()) == marshal(lock)
    if os.name == "posix":
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    restored = read_record(store, path)
    assert restored == lock
    restored.release()
    assert store.get(target) is None
