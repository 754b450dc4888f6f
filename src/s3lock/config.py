"""Configuration for s3lock clients."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WAIT_INTERVAL_S = 1.0


@dataclass
class S3LockConfig:
    """Configuration for the S3 store and the wait poller."""

    s3_region: str | None = None
    s3_endpoint_url: str | None = None
    s3_path_style: bool = False
    s3_request_timeout_s: float = 10.0
    s3_max_attempts: int = 5
    wait_interval_s: float = DEFAULT_WAIT_INTERVAL_S
