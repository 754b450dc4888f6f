"""Lock acquisition and release over an ObjectStore."""

from __future__ import annotations

import enum
import logging
import threading
import uuid
from dataclasses import dataclass, field
from types import TracebackType
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from s3lock.config import DEFAULT_WAIT_INTERVAL_S, S3LockConfig
from s3lock.errors import (
    AlreadyReleasedError,
    LockContentionError,
    OwnershipMismatchError,
    StorageBackendError,
)
from s3lock.store import ObjectStore, Outcome, OutcomeKind

if TYPE_CHECKING:
    from s3lock.cancel import Cancellation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockTarget:
    """The object contenders race to create."""

    bucket: str
    key: str

    @classmethod
    def from_url(cls, url: str) -> LockTarget:
        """Parse ``s3://bucket/key``."""
        parsed = urlparse(url)
        key = parsed.path.removeprefix("/")
        if parsed.scheme != "s3" or not parsed.netloc or not key:
            raise ValueError(f"Invalid S3 URL: {url}")
        return cls(bucket=parsed.netloc, key=key)

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


class LockState(enum.Enum):
    HELD = "held"
    RELEASED = "released"


def _failure_detail(outcome: Outcome) -> str:
    return str(outcome.cause) if outcome.cause is not None else "unknown failure"


@dataclass(eq=True)
class Lock:
    """Proof of ownership for one acquisition.

    ``owner_id`` is the body written at acquisition time and ``version_token``
    the ETag the store returned for it. Release succeeds only while both still
    match the stored object.
    """

    bucket: str
    key: str
    owner_id: str
    version_token: str
    store: ObjectStore = field(compare=False, repr=False)
    _state: LockState = field(default=LockState.HELD, init=False, compare=False, repr=False)
    _mu: threading.Lock = field(
        default_factory=threading.Lock, init=False, compare=False, repr=False
    )

    @property
    def target(self) -> LockTarget:
        return LockTarget(self.bucket, self.key)

    @property
    def state(self) -> LockState:
        return self._state

    @property
    def held(self) -> bool:
        return self._state is LockState.HELD

    def __str__(self) -> str:
        return str(self.target)

    def release(self, cancel: Cancellation | None = None) -> None:
        """Delete the lock object after proving it is still ours.

        Raises AlreadyReleasedError when the lock is already clear,
        OwnershipMismatchError when the stored object belongs to someone else,
        and StorageBackendError for any other store failure.
        """
        target = self.target
        with self._mu:
            if self._state is LockState.RELEASED:
                raise AlreadyReleasedError(target)

            got = self.store.conditional_get(target, self.version_token, cancel)
            if got.kind is OutcomeKind.NOT_FOUND:
                logger.debug("release %s: lock object is gone", target)
                raise AlreadyReleasedError(target)
            if got.kind is OutcomeKind.VERSION_MISMATCH:
                logger.warning(
                    "release %s: version token %s no longer matches", target, self.version_token
                )
                raise OwnershipMismatchError(target, self.owner_id, None)
            if got.kind is not OutcomeKind.SUCCESS:
                raise StorageBackendError("get_object", _failure_detail(got)) from got.cause
            if got.content != self.owner_id:
                logger.warning(
                    "release %s: owned by %r, not %r", target, got.content, self.owner_id
                )
                raise OwnershipMismatchError(target, self.owner_id, got.content)

            deleted = self.store.conditional_delete(target, self.version_token, cancel)
            if deleted.kind is OutcomeKind.SUCCESS:
                self._state = LockState.RELEASED
                logger.debug("release %s: unlocked (id=%s)", target, self.owner_id)
                return
            if deleted.kind in (OutcomeKind.NOT_FOUND, OutcomeKind.VERSION_MISMATCH):
                # Vanished between validation and delete.
                raise AlreadyReleasedError(target)
            raise StorageBackendError("delete_object", _failure_detail(deleted)) from deleted.cause

    def __enter__(self) -> Lock:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.release()
        except AlreadyReleasedError:
            pass


def acquire(store: ObjectStore, target: LockTarget, cancel: Cancellation | None = None) -> Lock:
    """Try once to create the lock object for ``target``.

    Raises LockContentionError if it already exists and StorageBackendError on
    any other failure.
    """
    owner_id = str(uuid.uuid4())
    outcome = store.create_if_absent(target, owner_id, cancel)
    if outcome.kind is OutcomeKind.SUCCESS:
        logger.debug("acquire %s: locked (id=%s, etag=%s)", target, owner_id, outcome.version_token)
        return Lock(
            bucket=target.bucket,
            key=target.key,
            owner_id=owner_id,
            version_token=outcome.version_token or "",
            store=store,
        )
    if outcome.kind is OutcomeKind.ALREADY_EXISTS:
        logger.debug("acquire %s: already held", target)
        raise LockContentionError(target)
    raise StorageBackendError("put_object", _failure_detail(outcome)) from outcome.cause


class LockObject:
    """A lock target bound to a store."""

    def __init__(
        self,
        store: ObjectStore,
        target: LockTarget,
        *,
        wait_interval: float = DEFAULT_WAIT_INTERVAL_S,
    ) -> None:
        self.store = store
        self.target = target
        self.wait_interval = wait_interval

    @classmethod
    def from_config(
        cls, store: ObjectStore, target: LockTarget, config: S3LockConfig | None = None
    ) -> LockObject:
        """Bind ``target`` to ``store`` using the configured wait interval."""
        cfg = config or S3LockConfig()
        return cls(store, target, wait_interval=cfg.wait_interval_s)

    def lock(self, cancel: Cancellation | None = None) -> Lock:
        return acquire(self.store, self.target, cancel)

    def lock_wait(self, cancel: Cancellation | None = None) -> Lock:
        from s3lock.poller import LockPoller

        return LockPoller(self.store, interval=self.wait_interval).acquire(self.target, cancel)
