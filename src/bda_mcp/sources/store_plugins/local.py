"""Local filesystem blob store plugin.

Buckets are directories below a root directory and keys are relative paths
inside them.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from ...errors import BlobNotFoundError, BlobStoreError, handle_service_errors
from ..blob_store import BlobStorePlugin, StoreType

logger = logging.getLogger("bda-mcp.sources.store_plugins.local")


def _get_env_root() -> str:
    """Get the local store root directory from environment variables."""
    return os.getenv("BDA_LOCAL_ROOT", "./blobs")


@BlobStorePlugin.register(StoreType.LOCAL)
class LocalBlobStore(BlobStorePlugin):
    """Plugin storing blobs as files on the local filesystem."""

    def __init__(self, root: Optional[str | Path] = None):
        self._root = Path(root or _get_env_root()).resolve()

    @property
    def store_type(self) -> str:
        return StoreType.LOCAL

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, bucket: str, key: str) -> Path:
        if not bucket or not key:
            raise BlobStoreError("Bucket and key must not be empty")
        bucket_dir = (self._root / bucket).resolve()
        path = (bucket_dir / key.lstrip("/")).resolve()
        # Keep every object inside its bucket directory
        if bucket_dir.parent != self._root or bucket_dir not in path.parents:
            raise BlobStoreError(f"Invalid object location: {bucket}/{key}")
        return path

    def open(self, bucket: str, key: str) -> BinaryIO:
        path = self._resolve(bucket, key)
        if not path.is_file():
            raise BlobNotFoundError(f"Object not found: {bucket}/{key}")
        with handle_service_errors("reading object", BlobStoreError, path):
            return path.open("rb")

    def put(self, bucket: str, key: str, data: bytes | BinaryIO) -> None:
        path = self._resolve(bucket, key)
        with handle_service_errors("writing object", BlobStoreError, path):
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as target:
                if isinstance(data, (bytes, bytearray)):
                    target.write(data)
                else:
                    shutil.copyfileobj(data, target)
        logger.debug(f"Wrote object {bucket}/{key} to {path}")
