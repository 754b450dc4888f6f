"""s3lock unlock — release a lock from its record file."""

from __future__ import annotations

from pathlib import Path

import typer

from s3lock.cli import _exitcodes as ec
from s3lock.cli import _storage
from s3lock.cli._output import print_error, print_notice
from s3lock.errors import (
    AlreadyReleasedError,
    InvalidLockRecordError,
    OwnershipMismatchError,
    S3LockError,
)
from s3lock.record import read_record


def unlock_cmd(
    lock_file: Path = typer.Argument(..., help="Lock file path."),
    keep_file: bool = typer.Option(False, "--keep-file", help="Do not delete the lock file"),
) -> None:
    """Release the lock recorded in LOCK_FILE."""
    try:
        store = _storage.open_store()
        lock = read_record(store, lock_file)
    except (OSError, InvalidLockRecordError) as e:
        print_error(f"Cannot read lock file {lock_file}: {e}")
        raise typer.Exit(ec.EXECUTION_FAILURE)

    try:
        lock.release()
        print(f"{lock} has been unlocked")
    except AlreadyReleasedError:
        print_notice(f"{lock} was already unlocked")
    except OwnershipMismatchError as e:
        print_error(str(e))
        raise typer.Exit(ec.OWNERSHIP_MISMATCH)
    except S3LockError as e:
        print_error(str(e))
        raise typer.Exit(ec.EXECUTION_FAILURE)

    if keep_file:
        return
    try:
        lock_file.unlink()
    except OSError as e:
        print_error(f"Cannot delete {lock_file}: {e}")
        raise typer.Exit(ec.EXECUTION_FAILURE)
    print(f"delete {lock_file}")
