"""Script repositories: where procedure scripts are read from.

A script lives at ``{databaseName}/{schemaName}/{storedProcedureName}.sql``
under a local directory or an S3 bucket prefix.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sqlproc.core.config import Settings, settings
from sqlproc.core.errors import NotFound, ScriptStoreError
from sqlproc.schemas import ScriptReference

logger = logging.getLogger(__name__)

_S3_MISSING_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class ScriptRepository(Protocol):
    def read(self, ref: ScriptReference) -> str: ...


def _decode(raw: bytes, key: str) -> str:
    try:
        # utf-8-sig: scripts saved by Windows editors carry a BOM
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ScriptStoreError(f"Script is not valid UTF-8: {key}") from exc


class LocalScriptRepository:
    """Reads scripts from a directory tree on the local filesystem."""

    def __init__(self, root_dir: str | Path):
        self._root = Path(root_dir)

    def read(self, ref: ScriptReference) -> str:
        key = ref.storage_key
        path = self._root / key
        logger.info("Getting content from script file: %s", path)
        try:
            raw = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFound(key) from exc
        except OSError as exc:
            raise ScriptStoreError(f"Failed to read script {path}: {exc}") from exc
        return _decode(raw, key)


class S3ScriptRepository:
    """Reads scripts from an S3 bucket, optionally below a key prefix."""

    def __init__(
        self,
        bucket: str,
        *,
        prefix: str = "",
        region_name: str | None = None,
        client=None,
    ) -> None:
        self._bucket = bucket
        self._prefix = prefix.strip("/")
        if client is None:
            session = boto3.session.Session(region_name=region_name)
            client = session.client("s3")
        self._client = client

    def _object_key(self, ref: ScriptReference) -> str:
        return "/".join(part for part in [self._prefix, ref.storage_key] if part)

    def read(self, ref: ScriptReference) -> str:
        key = self._object_key(ref)
        logger.info("Getting content from s3://%s/%s", self._bucket, key)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            raw = response["Body"].read()
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _S3_MISSING_CODES:
                raise NotFound(key) from exc
            raise ScriptStoreError(f"Failed to read s3://{self._bucket}/{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise ScriptStoreError(f"Failed to read s3://{self._bucket}/{key}: {exc}") from exc
        return _decode(raw, key)


def build_script_repository(s: Settings) -> ScriptRepository:
    if s.SCRIPT_STORE_BACKEND == "s3":
        return S3ScriptRepository(
            s.SCRIPT_STORE_S3_BUCKET or "",
            prefix=s.SCRIPT_STORE_S3_PREFIX,
            region_name=s.AWS_REGION,
        )
    if not s.SCRIPT_STORE_DIR:
        raise ScriptStoreError("SCRIPT_STORE_DIR must be provided")
    return LocalScriptRepository(s.SCRIPT_STORE_DIR)


@lru_cache(maxsize=1)
def get_script_repository() -> ScriptRepository:
    """Repository selected by SCRIPT_STORE_BACKEND, built once per process."""
    return build_script_repository(settings)
