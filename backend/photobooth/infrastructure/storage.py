"""Object Storage — S3 (production) and local filesystem (development/tests) adapters.

Invariants:
    - Every adapter implements the ObjectStorage protocol: put/get/delete/list/public_url
    - Keys are validated with asset_naming.is_safe_key before any IO
    - All boto3/botocore and filesystem failures surface as StorageError
    - boto3 calls run in a worker thread (asyncio.to_thread): the event loop never blocks
    - S3 public URL: CDN base when configured, else https://{bucket}.s3.{region}.amazonaws.com/{key}

Design Decisions:
    - Protocol over ABC: adapters need no common base, test fakes satisfy it structurally
    - Local adapter mirrors the S3 key layout so URLs and listings behave the same in dev
    - list() returns StoredObject rows (key, size, last_modified, url) with an optional
      count-only path used by the admin storage browser
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from photobooth.core.asset_naming import is_safe_key
from photobooth.core.errors import StorageError, ValidationFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str
    size: int
    last_modified: datetime | None = None


class ObjectStorage(Protocol):
    """Contract for binary object storage — implemented by S3Storage and LocalStorage."""
    def public_url(self, key: str) -> str: ...
    def key_from_url(self, url: str) -> str | None: ...
    async def put(self, key: str, data: bytes, content_type: str) -> str: ...
    async def get(self, key: str) -> bytes: ...
    async def delete(self, key: str) -> None: ...
    async def list(self, prefix: str) -> list[StoredObject]: ...
    async def count(self, prefix: str) -> int: ...


def _require_safe(key: str) -> str:
    if not is_safe_key(key):
        raise ValidationFailedError(f"Invalid storage key: {key!r}", "key")
    return key


class S3Storage:
    """AWS S3 adapter (public-read bucket or CDN in front)."""

    def __init__(
        self,
        bucket: str,
        region: str = "eu-west-3",
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        public_base_url: str | None = None,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self.public_base_url = (public_base_url or "").rstrip("/")
        if client is None:
            kwargs = {"region_name": region}
            if access_key_id and secret_access_key:
                kwargs["aws_access_key_id"] = access_key_id
                kwargs["aws_secret_access_key"] = secret_access_key
            client = boto3.client("s3", **kwargs)
        self._s3 = client

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def key_from_url(self, url: str) -> str | None:
        """Inverse of public_url for objects this adapter wrote."""
        for base in (self.public_base_url, f"https://{self.bucket}.s3.{self.region}.amazonaws.com"):
            if base and url.startswith(base + "/"):
                return url[len(base) + 1:]
        return None

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        _require_safe(key)
        await self._call(
            "upload", self._s3.put_object,
            Bucket=self.bucket, Key=key, Body=data, ContentType=content_type,
        )
        logger.info("Stored object", extra={"storage_key": key, "provider": "s3"})
        return self.public_url(key)

    async def get(self, key: str) -> bytes:
        _require_safe(key)
        response = await self._call(
            "download", self._s3.get_object, Bucket=self.bucket, Key=key,
        )
        return await asyncio.to_thread(response["Body"].read)

    async def delete(self, key: str) -> None:
        _require_safe(key)
        await self._call("delete", self._s3.delete_object, Bucket=self.bucket, Key=key)
        logger.info("Deleted object", extra={"storage_key": key, "provider": "s3"})

    async def list(self, prefix: str) -> list[StoredObject]:
        objects: list[StoredObject] = []
        token: str | None = None
        while True:
            kwargs = {"Bucket": self.bucket, "Prefix": prefix}
            if token:
                kwargs["ContinuationToken"] = token
            page = await self._call("list", self._s3.list_objects_v2, **kwargs)
            for item in page.get("Contents", []):
                objects.append(StoredObject(
                    key=item["Key"],
                    url=self.public_url(item["Key"]),
                    size=item.get("Size", 0),
                    last_modified=item.get("LastModified"),
                ))
            if not page.get("IsTruncated"):
                return objects
            token = page.get("NextContinuationToken")

    async def count(self, prefix: str) -> int:
        return len(await self.list(prefix))

    async def _call(self, operation: str, fn, **kwargs):
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "unknown")
            logger.error(f"S3 {operation} failed ({code}): {e}")
            raise StorageError(f"S3 returned {code}", operation)
        except BotoCoreError as e:
            logger.error(f"S3 {operation} failed: {e}")
            raise StorageError("S3 unreachable or misconfigured", operation)


class LocalStorage:
    """Filesystem adapter; files served by the app under local_storage_url."""

    def __init__(self, root: str, base_url: str = "/media"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def key_from_url(self, url: str) -> str | None:
        prefix = self.base_url + "/"
        return url[len(prefix):] if url.startswith(prefix) else None

    def _path(self, key: str) -> Path:
        return self.root / _require_safe(key)

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path(key)
        try:
            await asyncio.to_thread(_write_file, path, data)
        except OSError as e:
            raise StorageError(str(e), "upload")
        return self.public_url(key)

    async def get(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise StorageError(f"Object {key!r} does not exist", "download")
        except OSError as e:
            raise StorageError(str(e), "download")

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as e:
            raise StorageError(str(e), "delete")

    def _scan(self, prefix: str) -> list[StoredObject]:
        if not self.root.is_dir():
            return []
        objects = []
        for dirpath, _, filenames in os.walk(self.root):
            for name in filenames:
                path = Path(dirpath) / name
                key = path.relative_to(self.root).as_posix()
                if not key.startswith(prefix):
                    continue
                stat = path.stat()
                objects.append(StoredObject(
                    key=key,
                    url=self.public_url(key),
                    size=stat.st_size,
                    last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                ))
        return sorted(objects, key=lambda o: o.key)

    async def list(self, prefix: str) -> list[StoredObject]:
        return await asyncio.to_thread(self._scan, prefix)

    async def count(self, prefix: str) -> int:
        return len(await self.list(prefix))


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
