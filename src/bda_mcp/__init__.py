"""bda-mcp - big data analysis on a remote query service and blob store, over the Model Context Protocol."""

from .blobs import BlobTransfer
from .errors import (
    BdaError,
    BlobNotFoundError,
    BlobStoreError,
    ConfigurationError,
    ConversionError,
    EmptyMetadataError,
    PaginationError,
    PollError,
    PollTimeoutError,
    QueryAbortedError,
    QueryCancelledError,
    QueryError,
    QueryFailedError,
    SubmissionError,
)
from .models import (
    ColumnDescriptor,
    DatabaseBinding,
    DatabaseBindings,
    QueryHandle,
    QueryStatus,
    ResultPage,
    ResultRow,
    TypedValue,
)
from .query import PollSettings, QueryExecutionEngine
from .types import ColumnType, QueryState, ValueKind


def main():
    """Main entry point for the package."""
    from . import server
    server.main()


__all__ = [
    'main',
    'BlobTransfer',
    'QueryExecutionEngine',
    'PollSettings',
    'ColumnDescriptor',
    'DatabaseBinding',
    'DatabaseBindings',
    'QueryHandle',
    'QueryStatus',
    'ResultPage',
    'ResultRow',
    'TypedValue',
    'ColumnType',
    'QueryState',
    'ValueKind',
    'BdaError',
    'ConfigurationError',
    'QueryError',
    'SubmissionError',
    'PollError',
    'PollTimeoutError',
    'QueryFailedError',
    'QueryCancelledError',
    'QueryAbortedError',
    'EmptyMetadataError',
    'PaginationError',
    'ConversionError',
    'BlobStoreError',
    'BlobNotFoundError',
]
