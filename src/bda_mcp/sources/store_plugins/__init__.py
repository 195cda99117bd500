"""Blob store plugins."""

from .local import LocalBlobStore
from .s3 import S3BlobStore
