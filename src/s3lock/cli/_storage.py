"""CLI helpers for building the S3 store from options and environment."""

from __future__ import annotations

import os

from s3lock.config import DEFAULT_WAIT_INTERVAL_S, S3LockConfig
from s3lock.store import ObjectStore
from s3lock.store_s3 import S3ObjectStore

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _wait_interval_from_env() -> float:
    raw = os.getenv("S3LOCK_WAIT_INTERVAL", "").strip()
    if not raw:
        return DEFAULT_WAIT_INTERVAL_S
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"S3LOCK_WAIT_INTERVAL must be a number, got {raw!r}") from None


def _config_from_env() -> S3LockConfig:
    """Build config from CLI state, falling back to environment defaults."""
    from s3lock.cli import state

    endpoint = state.endpoint_url or os.getenv("S3LOCK_S3_ENDPOINT_URL")
    region = state.region or os.getenv("S3LOCK_S3_REGION")
    path_style = state.path_style or (
        os.getenv("S3LOCK_S3_PATH_STYLE", "").strip().lower() in _TRUE_VALUES
    )
    return S3LockConfig(
        s3_region=region,
        s3_endpoint_url=endpoint,
        s3_path_style=path_style,
        wait_interval_s=_wait_interval_from_env(),
    )


def load_config() -> S3LockConfig:
    """Resolve the configuration selected by the global CLI options."""
    return _config_from_env()


def open_store(config: S3LockConfig | None = None) -> ObjectStore:
    """Open the S3 store selected by the global CLI options."""
    return S3ObjectStore.from_config(config or _config_from_env())
