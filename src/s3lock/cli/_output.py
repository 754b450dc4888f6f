"""Output helpers for the CLI."""

from __future__ import annotations

import sys


def print_notice(msg: str) -> None:
    """Print an informational message to stderr."""
    print(msg, file=sys.stderr)


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)
