"""S3-backed object store using conditional requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from s3lock.config import S3LockConfig
from s3lock.errors import StorageBackendError
from s3lock.store import Outcome, cancelled_outcome

if TYPE_CHECKING:
    from s3lock.cancel import Cancellation
    from s3lock.lock import LockTarget

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404"}
_PRECONDITION_CODES = {"PreconditionFailed", "412"}
_CONFLICT_CODES = {"ConditionalRequestConflict", "409"}


def _error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


def _status_code(err: ClientError) -> int | None:
    status = err.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return status if isinstance(status, int) else None


def _is_not_found(err: Exception) -> bool:
    if isinstance(err, ClientError):
        code = _error_code(err)
        if code == "NoSuchBucket":
            return False
        return code in _NOT_FOUND_CODES or (not code and _status_code(err) == 404)
    return False


def _is_precondition_failed(err: Exception) -> bool:
    if isinstance(err, ClientError):
        return _error_code(err) in _PRECONDITION_CODES or _status_code(err) == 412
    return False


def _is_conditional_conflict(err: Exception) -> bool:
    if isinstance(err, ClientError):
        return _error_code(err) in _CONFLICT_CODES
    return False


def _unsupported_preconditions(err: ParamValidationError) -> StorageBackendError:
    return StorageBackendError(
        "conditional_write",
        f"S3 endpoint does not support conditional write preconditions ({err})",
    )


class S3ObjectStore:
    """``ObjectStore`` over an S3 (or S3-compatible) bucket."""

    def __init__(self, client: Any) -> None:
        self._s3 = client

    @classmethod
    def from_config(cls, config: S3LockConfig | None = None) -> S3ObjectStore:
        cfg = config or S3LockConfig()
        session = boto3.Session(region_name=cfg.s3_region)
        s3_options: dict[str, Any] = {}
        if cfg.s3_path_style:
            s3_options["addressing_style"] = "path"
        client = session.client(
            "s3",
            region_name=cfg.s3_region,
            endpoint_url=cfg.s3_endpoint_url,
            config=BotoConfig(
                connect_timeout=cfg.s3_request_timeout_s,
                read_timeout=cfg.s3_request_timeout_s,
                retries={"max_attempts": cfg.s3_max_attempts, "mode": "standard"},
                s3=s3_options or None,
            ),
        )
        return cls(client)

    @property
    def client(self) -> Any:
        return self._s3

    def create_if_absent(
        self, target: LockTarget, content: str, cancel: Cancellation | None = None
    ) -> Outcome:
        cancelled = cancelled_outcome(cancel)
        if cancelled is not None:
            return cancelled
        try:
            resp = self._s3.put_object(
                Bucket=target.bucket,
                Key=target.key,
                Body=content.encode("utf-8"),
                IfNoneMatch="*",
            )
        except ParamValidationError as e:
            return Outcome.failure(_unsupported_preconditions(e))
        except ClientError as e:
            if _is_precondition_failed(e) or _is_conditional_conflict(e):
                logger.debug("put_object %s: object exists (%s)", target, _error_code(e))
                return Outcome.already_exists()
            return Outcome.failure(e)
        except BotoCoreError as e:
            return Outcome.failure(e)
        etag = resp.get("ETag")
        return Outcome.success(version_token=etag if isinstance(etag, str) else "")

    def conditional_get(
        self, target: LockTarget, version_token: str, cancel: Cancellation | None = None
    ) -> Outcome:
        cancelled = cancelled_outcome(cancel)
        if cancelled is not None:
            return cancelled
        try:
            resp = self._s3.get_object(Bucket=target.bucket, Key=target.key, IfMatch=version_token)
            body = resp["Body"].read()
        except ParamValidationError as e:
            return Outcome.failure(_unsupported_preconditions(e))
        except ClientError as e:
            if _is_not_found(e):
                return Outcome.not_found()
            if _is_precondition_failed(e):
                return Outcome.version_mismatch()
            return Outcome.failure(e)
        except BotoCoreError as e:
            return Outcome.failure(e)
        try:
            content = body.decode("utf-8")
        except UnicodeDecodeError as e:
            return Outcome.failure(e)
        etag = resp.get("ETag")
        return Outcome.success(
            version_token=etag if isinstance(etag, str) else version_token,
            content=content,
        )

    def conditional_delete(
        self, target: LockTarget, version_token: str, cancel: Cancellation | None = None
    ) -> Outcome:
        cancelled = cancelled_outcome(cancel)
        if cancelled is not None:
            return cancelled
        try:
            self._s3.delete_object(Bucket=target.bucket, Key=target.key, IfMatch=version_token)
        except ParamValidationError as e:
            return Outcome.failure(_unsupported_preconditions(e))
        except ClientError as e:
            if _is_not_found(e):
                return Outcome.not_found()
            if _is_precondition_failed(e):
                return Outcome.version_mismatch()
            return Outcome.failure(e)
        except BotoCoreError as e:
            return Outcome.failure(e)
        return Outcome.success()
