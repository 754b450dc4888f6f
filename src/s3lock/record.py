"""Portable lock records for handing a lock to another process.

The record is a flat JSON object with exactly four string fields::

    {"Bucket": "<bucket>", "Key": "<key>", "Id": "<owner id>", "ETag": "<etag>"}
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from s3lock.errors import InvalidLockRecordError
from s3lock.lock import Lock
from s3lock.store import ObjectStore

RECORD_FIELDS = ("Bucket", "Key", "Id", "ETag")


def marshal(lock: Lock) -> dict[str, str]:
    return {
        "Bucket": lock.bucket,
        "Key": lock.key,
        "Id": lock.owner_id,
        "ETag": lock.version_token,
    }


def unmarshal(store: ObjectStore, record: Mapping[str, Any]) -> Lock:
    """Rebuild a held lock from a record without contacting the store.

    Ownership is only checked by the next ``Lock.release``.
    """
    if not isinstance(record, Mapping):
        raise InvalidLockRecordError(f"Lock record must be an object, got {type(record).__name__}")
    missing = [name for name in RECORD_FIELDS if name not in record]
    if missing:
        raise InvalidLockRecordError(f"Lock record is missing field(s): {missing}")
    for name in RECORD_FIELDS:
        if not isinstance(record[name], str):
            raise InvalidLockRecordError(f"Lock record field '{name}' must be a string")
    return Lock(
        bucket=record["Bucket"],
        key=record["Key"],
        owner_id=record["Id"],
        version_token=record["ETag"],
        store=store,
    )


def dumps(lock: Lock) -> str:
    return json.dumps(marshal(lock), separators=(",", ":"))


def loads(store: ObjectStore, data: str | bytes) -> Lock:
    try:
        record = json.loads(data)
    except ValueError as e:
        raise InvalidLockRecordError(f"Lock record is not valid JSON: {e}") from e
    return unmarshal(store, record)


def write_record(lock: Lock, path: str | os.PathLike[str]) -> Path:
    """Write the lock record to ``path`` readable only by the owner."""
    out = Path(path)
    fd = os.open(out, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(dumps(lock))
        f.write("\n")
    return out


def read_record(store: ObjectStore, path: str | os.PathLike[str]) -> Lock:
    return loads(store, Path(path).read_bytes())
