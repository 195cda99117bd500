"""Blob store plugins for reading and writing raw objects."""

import logging
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, ClassVar, Dict, List, Optional, Type

from ..errors import BlobStoreError, ConfigurationError, handle_service_errors

logger = logging.getLogger("bda-mcp.sources.blob_store")


class StoreType:
    """Enumeration of supported blob store types."""
    S3 = "s3"
    LOCAL = "local"


class BlobStorePlugin(ABC):
    """Base interface for blob store plugins.

    Objects are addressed by bucket and key. Plugins raise BlobNotFoundError
    for missing objects and BlobStoreError for every other failure.
    """

    # Class-level registry of available plugins by store type
    _registry: ClassVar[Dict[str, Type['BlobStorePlugin']]] = {}

    @property
    @abstractmethod
    def store_type(self) -> str:
        """The store type this plugin supports (e.g., 's3', 'local')."""
        pass

    @abstractmethod
    def open(self, bucket: str, key: str) -> BinaryIO:
        """Open an object for streaming reads. The caller closes the stream."""
        pass

    def get(self, bucket: str, key: str) -> bytes:
        """Read a whole object.

        Args:
            bucket: Bucket name
            key: Object key

        Returns:
            Object content

        Raises:
            BlobNotFoundError: If the object does not exist
            BlobStoreError: If reading fails
        """
        stream = self.open(bucket, key)
        try:
            with handle_service_errors("reading object", BlobStoreError, f"{bucket}/{key}"):
                return stream.read()
        finally:
            stream.close()

    @abstractmethod
    def put(self, bucket: str, key: str, data: bytes | BinaryIO) -> None:
        """Write an object from bytes or a binary stream.

        Raises:
            BlobStoreError: If writing fails
        """
        pass

    @classmethod
    def register(cls, store_type: str) -> callable:
        """Decorator to register a plugin class for a specific store type."""
        def decorator(plugin_class: Type['BlobStorePlugin']) -> Type['BlobStorePlugin']:
            if store_type not in cls._registry:
                cls._registry[store_type] = plugin_class
                logger.debug(f"Registered blob store plugin for store type: {store_type}")
            return plugin_class
        return decorator

    @classmethod
    def get_plugin_class(cls, store_type: str) -> Optional[Type['BlobStorePlugin']]:
        """Get a plugin class by store type, None if not registered."""
        return cls._registry.get(store_type)

    @classmethod
    def get_registered_types(cls) -> List[str]:
        """Get a list of all registered store types."""
        return list(cls._registry.keys())


def create_blob_store(store_type: str, **options: Any) -> BlobStorePlugin:
    """Factory function to create a blob store plugin.

    Raises:
        ConfigurationError: If the store type is not supported
    """
    from . import store_plugins  # noqa: F401

    plugin_class = BlobStorePlugin.get_plugin_class(store_type)
    if not plugin_class:
        supported = ", ".join(BlobStorePlugin.get_registered_types())
        raise ConfigurationError(f"Unsupported blob store: {store_type}. Available stores: {supported}")
    return plugin_class(**options)
