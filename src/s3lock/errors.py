"""Structured error types for s3lock."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from s3lock.lock import LockTarget


class S3LockError(Exception):
    """Base error for all s3lock errors."""


class LockContentionError(S3LockError):
    """Raised when another acquisition currently holds the target."""

    def __init__(self, target: LockTarget) -> None:
        self.target = target
        super().__init__(f"Lock already held: {target}")


class AlreadyReleasedError(S3LockError):
    """Raised when the lock is already clear.

    Either this handle released it before, or the lock object is gone from the
    store. The caller's intent (the target being unlocked) already holds.
    """

    def __init__(self, target: LockTarget) -> None:
        self.target = target
        super().__init__(f"Already unlocked: {target}")


class OwnershipMismatchError(S3LockError):
    """Raised when the handle's proof does not match the lock object in the store."""

    def __init__(self, target: LockTarget, expected: str, actual: str | None) -> None:
        self.target = target
        self.expected = expected
        self.actual = actual
        if actual is None:
            detail = "version token does not match"
        else:
            detail = f"lock id does not match, expected '{expected}' but got '{actual}'"
        super().__init__(f"Ownership mismatch on {target}: {detail}")


class StorageBackendError(S3LockError):
    """Raised when backend storage operations fail."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage backend error during {operation}: {detail}")


class CancelledError(S3LockError):
    """Raised when an operation is cancelled by its caller."""

    def __init__(self, message: str = "Operation cancelled") -> None:
        super().__init__(message)


class DeadlineExceededError(CancelledError):
    """Raised when an operation's deadline passes."""

    def __init__(self, timeout_s: float | None = None) -> None:
        self.timeout_s = timeout_s
        if timeout_s is None:
            super().__init__("Deadline exceeded")
        else:
            super().__init__(f"Deadline of {timeout_s:g}s exceeded")


class InvalidLockRecordError(S3LockError, ValueError):
    """Raised when a serialized lock record is malformed."""
