"""Source plugin system for query services and blob stores."""

from .blob_store import BlobStorePlugin, StoreType, create_blob_store
from .query_service import QueryServicePlugin, ServiceType, create_query_service
