"""Helpers for moving files and strings to and from a blob store."""

import logging
import shutil
from pathlib import Path
from typing import Optional

from .errors import BlobStoreError, handle_service_errors
from .sources.blob_store import BlobStorePlugin

logger = logging.getLogger("bda-mcp.blobs")


class BlobTransfer:
    """Upload and download helpers on top of a blob store."""

    def __init__(self, store: BlobStorePlugin):
        self._store = store

    @property
    def store(self) -> BlobStorePlugin:
        return self._store

    def download_to_file(self, bucket: str, key: str, destination: Optional[str | Path] = None) -> Path:
        """
        Stream an object into a local file.

        Args:
            bucket: Bucket name
            key: Object key
            destination: Target file, defaults to the last segment of the key
                         in the current directory

        Returns:
            Path of the written file

        Raises:
            BlobNotFoundError: If the object does not exist
            BlobStoreError: If reading the object or writing the file fails
        """
        target = Path(destination) if destination else Path(Path(key).name)
        stream = self._store.open(bucket, key)
        try:
            with handle_service_errors("downloading object", BlobStoreError, target):
                try:
                    with target.open("wb") as file:
                        shutil.copyfileobj(stream, file)
                except Exception:
                    # No partial file is left behind
                    target.unlink(missing_ok=True)
                    raise
        finally:
            stream.close()
        logger.info(f"Downloaded {bucket}/{key} to {target}")
        return target

    def upload_file(self, bucket: str, filename: str | Path, key: Optional[str] = None) -> str:
        """
        Upload a local file.

        Args:
            bucket: Bucket name
            filename: File to upload
            key: Object key, defaults to the filename

        Returns:
            The object key

        Raises:
            BlobStoreError: If the file cannot be read or the upload fails
        """
        key = key or Path(filename).as_posix()
        with handle_service_errors("reading file", BlobStoreError, filename):
            file = Path(filename).open("rb")
        with file:
            self._store.put(bucket, key, file)
        return key

    def upload_string(self, bucket: str, key: str, body: str, encoding: str = "utf-8") -> None:
        """Upload a string as an object."""
        self._store.put(bucket, key, body.encode(encoding))

    def read_text(self, bucket: str, key: str, encoding: str = "utf-8") -> str:
        """Read an object as text."""
        return self._store.get(bucket, key).decode(encoding)
