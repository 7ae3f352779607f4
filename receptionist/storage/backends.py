"""Key/value blob backends for the domain store.

A backend stores opaque strings.  File and S3 backends hand them back as raw
bytes so that a tampered blob fails in the codec, not here.  Backends know
nothing about collections or records.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class BlobBackend(Protocol):
    def get(self, key: str) -> str | bytes | None: ...

    def set(self, key: str, blob: str) -> None: ...


class InMemoryBackend:
    """Process-local dict.  Data is lost on restart."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, blob: str) -> None:
        with self._lock:
            self._data[key] = blob


class FileBackend:
    """One file per key inside *root*.

    Writes go to a temporary sibling and are renamed into place so a reader
    never sees a half-written blob.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._root / f"{key}.blob"

    def get(self, key: str) -> bytes | None:
        try:
            return self._path(key).read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, blob: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(blob, encoding="utf-8")
        tmp.replace(path)


class S3Backend:
    """One S3 object per key, ``<prefix><key>`` inside *bucket*."""

    def __init__(self, bucket: str, prefix: str = "", client=None) -> None:
        if client is None:
            import boto3

            client = boto3.client("s3")
        self._client = client
        self._bucket = bucket
        self._prefix = prefix

    def get(self, key: str) -> bytes | None:
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=self._prefix + key)
        except self._client.exceptions.NoSuchKey:
            return None
        return resp["Body"].read()

    def set(self, key: str, blob: str) -> None:
        self._client.put_object(
            Bucket=self._bucket,
            Key=self._prefix + key,
            Body=blob.encode("utf-8"),
            ContentType="text/plain",
        )
        logger.debug("S3: wrote s3://%s/%s%s", self._bucket, self._prefix, key)


def create_backend(kind: str, *, path: str = "", bucket: str = "") -> BlobBackend:
    """Build a backend from the ``STORE_BACKEND`` setting."""
    if kind == "memory":
        return InMemoryBackend()
    if kind == "file":
        return FileBackend(path)
    if kind == "s3":
        if not bucket:
            raise OSError("STORE_BACKEND=s3 requires STORE_S3_BUCKET to be set.")
        return S3Backend(bucket)
    raise ValueError(f"Unknown store backend: {kind!r}")
