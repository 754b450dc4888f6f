"""s3lock lock — acquire a lock and emit its record."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from s3lock.cancel import Cancellation
from s3lock.cli import _exitcodes as ec
from s3lock.cli import _storage
from s3lock.cli._output import print_error, print_notice
from s3lock.errors import LockContentionError, S3LockError
from s3lock.lock import LockObject, LockTarget
from s3lock.record import dumps, write_record

logger = logging.getLogger(__name__)


def lock_cmd(
    s3_url: str = typer.Argument(
        ...,
        metavar="S3_URL",
        help="S3 URL of the object to lock, e.g. s3://bucket/lock-obj-key",
    ),
    wait: float = typer.Option(
        0,
        "--wait",
        "-w",
        help="Keep retrying for up to SECONDS before failing (0 tries once)",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between attempts while waiting [default: S3LOCK_WAIT_INTERVAL or 1]",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the lock record to FILE instead of stdout"
    ),
) -> None:
    """Acquire the lock and print its record."""
    try:
        target = LockTarget.from_url(s3_url)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    if wait < 0:
        print_error(f"--wait must be non-negative, got {wait:g}")
        raise typer.Exit(ec.USAGE_ERROR)
    try:
        config = _storage.load_config()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    if interval is not None:
        config.wait_interval_s = interval
    if config.wait_interval_s <= 0:
        print_error(f"--interval must be positive, got {config.wait_interval_s:g}")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        store = _storage.open_store(config)
        locker = LockObject.from_config(store, target, config)
        if wait > 0:
            lock = locker.lock_wait(Cancellation.with_timeout(wait))
        else:
            lock = locker.lock()
    except LockContentionError as e:
        print_error(str(e))
        raise typer.Exit(ec.LOCK_HELD)
    except S3LockError as e:
        print_error(str(e))
        raise typer.Exit(ec.EXECUTION_FAILURE)

    if output is None:
        print(dumps(lock))
        return

    try:
        write_record(lock, output)
    except OSError as e:
        print_error(f"Cannot write lock record to {output}: {e}")
        try:
            lock.release()
        except S3LockError as release_err:
            logger.warning("could not release %s after write failure: %s", lock, release_err)
            print_notice(f"{lock} is still locked: {dumps(lock)}")
        raise typer.Exit(ec.EXECUTION_FAILURE)
    print_notice(f"{lock} has been locked, record written to {output}")
