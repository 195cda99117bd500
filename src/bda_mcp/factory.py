"""Factories wiring plugins and configuration into engines."""

from typing import Optional

from .blobs import BlobTransfer
from .config import get_config, get_poll_settings, load_bindings
from .models import DatabaseBindings
from .query.engine import QueryExecutionEngine
from .sources.blob_store import BlobStorePlugin, StoreType, create_blob_store
from .sources.query_service import QueryServicePlugin, create_query_service


def build_engine(
    service: Optional[QueryServicePlugin] = None,
    bindings: Optional[DatabaseBindings] = None,
) -> QueryExecutionEngine:
    """Create a query execution engine from the environment configuration.

    Args:
        service: Query service to use instead of the configured one
        bindings: Database bindings to use instead of the configured ones

    Returns:
        A configured engine

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config = get_config()
    if service is None:
        aws = config["aws"]
        service = create_query_service(
            config["query_service"]["type"],
            region=aws["region"],
            profile=aws["profile"],
        )
    return QueryExecutionEngine(
        service,
        bindings if bindings is not None else load_bindings(),
        poll_settings=get_poll_settings(),
        strict=config["query_service"]["strict_conversion"],
    )


def build_blob_store() -> BlobStorePlugin:
    """Create the configured blob store.

    Raises:
        ConfigurationError: If the store type is not supported
    """
    config = get_config()
    store_type = config["blob_store"]["type"]
    if store_type == StoreType.LOCAL:
        return create_blob_store(store_type, root=config["blob_store"]["local_root"])
    aws = config["aws"]
    return create_blob_store(
        store_type,
        region=aws["region"],
        endpoint_url=aws["endpoint_url"],
        profile=aws["profile"],
    )


def build_blob_transfer() -> BlobTransfer:
    """Create blob transfer helpers on the configured blob store."""
    return BlobTransfer(build_blob_store())
