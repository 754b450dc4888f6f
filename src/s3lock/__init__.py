"""s3lock: distributed locks on S3 conditional writes."""

__version__ = "0.1.0"

from s3lock.cancel import Cancellation
from s3lock.config import DEFAULT_WAIT_INTERVAL_S, S3LockConfig
from s3lock.errors import (
    AlreadyReleasedError,
    CancelledError,
    DeadlineExceededError,
    InvalidLockRecordError,
    LockContentionError,
    OwnershipMismatchError,
    S3LockError,
    StorageBackendError,
)
from s3lock.lock import Lock, LockObject, LockState, LockTarget, acquire
from s3lock.poller import LockPoller
from s3lock.record import dumps, loads, marshal, read_record, unmarshal, write_record
from s3lock.store import InMemoryObjectStore, ObjectStore, Outcome, OutcomeKind
from s3lock.store_s3 import S3ObjectStore

__all__ = [
    "__version__",
    "Cancellation",
    "S3LockConfig",
    "DEFAULT_WAIT_INTERVAL_S",
    "S3LockError",
    "LockContentionError",
    "AlreadyReleasedError",
    "OwnershipMismatchError",
    "StorageBackendError",
    "CancelledError",
    "DeadlineExceededError",
    "InvalidLockRecordError",
    "LockTarget",
    "LockState",
    "Lock",
    "LockObject",
    "LockPoller",
    "acquire",
    "marshal",
    "unmarshal",
    "dumps",
    "loads",
    "read_record",
    "write_record",
    "ObjectStore",
    "Outcome",
    "OutcomeKind",
    "InMemoryObjectStore",
    "S3ObjectStore",
]
