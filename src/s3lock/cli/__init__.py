"""s3lock CLI: acquire and release locks from the shell."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from s3lock.cli import lock_cmd, unlock_cmd

app = typer.Typer(
    name="s3lock",
    help="Distributed locks on S3 conditional writes.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    endpoint_url: str | None = None
    region: str | None = None
    path_style: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        from s3lock import __version__

        print(f"s3lock {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    endpoint_url: Optional[str] = typer.Option(
        None,
        "--endpoint-url",
        envvar="S3LOCK_S3_ENDPOINT_URL",
        help="S3-compatible endpoint URL",
    ),
    region: Optional[str] = typer.Option(
        None,
        "--region",
        envvar="S3LOCK_S3_REGION",
        help="S3 region name",
    ),
    path_style: bool = typer.Option(
        False,
        "--path-style",
        envvar="S3LOCK_S3_PATH_STYLE",
        help="Use path-style bucket addressing (MinIO, S3Mock)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all s3lock commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    state.endpoint_url = endpoint_url
    state.region = region
    state.path_style = path_style


app.command(name="lock")(lock_cmd.lock_cmd)
app.command(name="unlock")(unlock_cmd.unlock_cmd)


def main() -> None:
    """Entry point for the s3lock CLI."""
    app()
