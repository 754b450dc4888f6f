"""Object store abstraction used by the lock protocol.

Stores report tagged outcomes instead of raising transport errors, so the lock
logic never branches on status codes. Any object satisfying ``ObjectStore``
can back a lock; ``S3ObjectStore`` (see ``s3lock.store_s3``) is the production
adapter and ``InMemoryObjectStore`` is a thread-safe local stand-in.
"""

from __future__ import annotations

import enum
import hashlib
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from s3lock.errors import StorageBackendError

if TYPE_CHECKING:
    from s3lock.cancel import Cancellation
    from s3lock.lock import LockTarget


class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    VERSION_MISMATCH = "version_mismatch"
    OTHER_FAILURE = "other_failure"


@dataclass(frozen=True)
class Outcome:
    """Result of a single store call."""

    kind: OutcomeKind
    version_token: str | None = None
    content: str | None = None
    cause: BaseException | None = None

    @classmethod
    def success(cls, *, version_token: str | None = None, content: str | None = None) -> Outcome:
        return cls(OutcomeKind.SUCCESS, version_token=version_token, content=content)

    @classmethod
    def already_exists(cls) -> Outcome:
        return cls(OutcomeKind.ALREADY_EXISTS)

    @classmethod
    def not_found(cls) -> Outcome:
        return cls(OutcomeKind.NOT_FOUND)

    @classmethod
    def version_mismatch(cls) -> Outcome:
        return cls(OutcomeKind.VERSION_MISMATCH)

    @classmethod
    def failure(cls, cause: BaseException) -> Outcome:
        return cls(OutcomeKind.OTHER_FAILURE, cause=cause)


@runtime_checkable
class ObjectStore(Protocol):
    """Conditional-write contract required by the lock protocol.

    create_if_absent(target, content)
      SUCCESS (version_token) | ALREADY_EXISTS | OTHER_FAILURE (cause)

    conditional_get(target, version_token)
      SUCCESS (content) | NOT_FOUND | VERSION_MISMATCH | OTHER_FAILURE (cause)

    conditional_delete(target, version_token)
      SUCCESS | NOT_FOUND | VERSION_MISMATCH | OTHER_FAILURE (cause)

    Version tokens are opaque and compared only by equality. Every call takes
    an optional cancellation token and must not reach the store once it fired.
    """

    def create_if_absent(
        self, target: LockTarget, content: str, cancel: Cancellation | None = None
    ) -> Outcome: ...

    def conditional_get(
        self, target: LockTarget, version_token: str, cancel: Cancellation | None = None
    ) -> Outcome: ...

    def conditional_delete(
        self, target: LockTarget, version_token: str, cancel: Cancellation | None = None
    ) -> Outcome: ...


def cancelled_outcome(cancel: Cancellation | None) -> Outcome | None:
    """Return an OTHER_FAILURE outcome if ``cancel`` has fired, else None."""
    if cancel is None:
        return None
    cause = cancel.cause
    if cause is None:
        return None
    return Outcome.failure(cause)


def content_etag(content: str) -> str:
    """S3-style ETag of a single-part upload: quoted MD5 hex of the body."""
    return '"' + hashlib.md5(content.encode("utf-8"), usedforsecurity=False).hexdigest() + '"'


@dataclass
class _StoredObject:
    content: str
    etag: str


class InMemoryObjectStore:
    """Dict-backed store with S3 conditional semantics.

    ETags are content hashes, so two writes of identical content share a
    version token, as they do on S3. ``calls`` logs the name of every store
    call that got past the cancellation check; it grows without bound and is
    meant for assertions in tests, not long-lived use.
    """

    def __init__(self, buckets: list[str] | tuple[str, ...] = ("default",)) -> None:
        self._buckets = set(buckets)
        self._objects: dict[tuple[str, str], _StoredObject] = {}
        self._mu = threading.Lock()
        self.calls: list[str] = []

    def _missing_bucket(self, operation: str, bucket: str) -> Outcome | None:
        if bucket in self._buckets:
            return None
        return Outcome.failure(
            StorageBackendError(operation, f"NoSuchBucket: bucket '{bucket}' does not exist")
        )

    # --- ObjectStore ---

    def create_if_absent(
        self, target: LockTarget, content: str, cancel: Cancellation | None = None
    ) -> Outcome:
        cancelled = cancelled_outcome(cancel)
        if cancelled is not None:
            return cancelled
        with self._mu:
            self.calls.append("create_if_absent")
            missing = self._missing_bucket("put_object", target.bucket)
            if missing is not None:
                return missing
            ref = (target.bucket, target.key)
            if ref in self._objects:
                return Outcome.already_exists()
            obj = _StoredObject(content=content, etag=content_etag(content))
            self._objects[ref] = obj
            return Outcome.success(version_token=obj.etag)

    def conditional_get(
        self, target: LockTarget, version_token: str, cancel: Cancellation | None = None
    ) -> Outcome:
        cancelled = cancelled_outcome(cancel)
        if cancelled is not None:
            return cancelled
        with self._mu:
            self.calls.append("conditional_get")
            missing = self._missing_bucket("get_object", target.bucket)
            if missing is not None:
                return missing
            obj = self._objects.get((target.bucket, target.key))
            if obj is None:
                return Outcome.not_found()
            if obj.etag != version_token:
                return Outcome.version_mismatch()
            return Outcome.success(version_token=obj.etag, content=obj.content)

    def conditional_delete(
        self, target: LockTarget, version_token: str, cancel: Cancellation | None = None
    ) -> Outcome:
        cancelled = cancelled_outcome(cancel)
        if cancelled is not None:
            return cancelled
        with self._mu:
            self.calls.append("conditional_delete")
            missing = self._missing_bucket("delete_object", target.bucket)
            if missing is not None:
                return missing
            ref = (target.bucket, target.key)
            obj = self._objects.get(ref)
            if obj is None:
                return Outcome.not_found()
            if obj.etag != version_token:
                return Outcome.version_mismatch()
            del self._objects[ref]
            return Outcome.success()

    # --- Unconditional helpers ---

    def put(self, target: LockTarget, content: str) -> str:
        """Overwrite the object and return its new ETag."""
        with self._mu:
            if target.bucket not in self._buckets:
                raise StorageBackendError("put_object", f"NoSuchBucket: {target.bucket}")
            obj = _StoredObject(content=content, etag=content_etag(content))
            self._objects[(target.bucket, target.key)] = obj
            return obj.etag

    def get(self, target: LockTarget) -> str | None:
        with self._mu:
            obj = self._objects.get((target.bucket, target.key))
            return None if obj is None else obj.content

    def delete(self, target: LockTarget) -> None:
        with self._mu:
            self._objects.pop((target.bucket, target.key), None)
