"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import pytest
from typer.testing import CliRunner

from s3lock import InMemoryObjectStore
from s3lock.cli import app

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_store(monkeypatch, store) -> InMemoryObjectStore:
    """Route every CLI command to the in-memory store."""
    monkeypatch.setattr("s3lock.cli._storage.open_store", lambda config=None: store)
    return store


@pytest.fixture
def invoke(runner, cli_store) -> Callable[[list[str]], "Result"]:
    def _invoke(args: list[str]) -> "Result":
        return runner.invoke(app, args, catch_exceptions=False)

    return _invoke
