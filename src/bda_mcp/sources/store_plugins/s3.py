"""S3 blob store plugin."""

import io
import logging
from typing import Any, BinaryIO, Optional

from botocore.exceptions import ClientError

from ...errors import BlobNotFoundError, BlobStoreError, handle_service_errors
from ...utils.aws import create_client
from ..blob_store import BlobStorePlugin, StoreType

logger = logging.getLogger("bda-mcp.sources.store_plugins.s3")

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}


@BlobStorePlugin.register(StoreType.S3)
class S3BlobStore(BlobStorePlugin):
    """Plugin storing blobs in AWS S3 or an S3-compatible service."""

    def __init__(
        self,
        client: Any = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        profile: Optional[str] = None,
    ):
        self._client = client or create_client("s3", region=region, endpoint_url=endpoint_url, profile=profile)

    @property
    def store_type(self) -> str:
        return StoreType.S3

    def open(self, bucket: str, key: str) -> BinaryIO:
        with handle_service_errors("reading object", BlobStoreError, f"s3://{bucket}/{key}"):
            try:
                response = self._client.get_object(Bucket=bucket, Key=key)
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                    raise BlobNotFoundError(f"Object not found: s3://{bucket}/{key}") from e
                raise
            return response["Body"]

    def put(self, bucket: str, key: str, data: bytes | BinaryIO) -> None:
        body = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
        with handle_service_errors("writing object", BlobStoreError, f"s3://{bucket}/{key}"):
            self._client.upload_fileobj(body, bucket, key)
        logger.info(f"Uploaded object to s3://{bucket}/{key}")
