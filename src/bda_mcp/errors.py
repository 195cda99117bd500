"""Error types and error handling helpers for bda-mcp."""

import contextlib
import logging
from typing import Any, Generator, Optional, Type

logger = logging.getLogger("bda-mcp.errors")


class BdaError(Exception):
    """Base class for all bda-mcp errors."""
    pass


class ConfigurationError(BdaError):
    """Error raised when configuration is missing or invalid, e.g. an unknown database."""
    pass


class QueryError(BdaError):
    """Base class for errors raised while executing a query."""
    pass


class SubmissionError(QueryError):
    """Error raised when the query service rejects or fails a submission."""
    pass


class PollError(QueryError):
    """Error raised when the execution status cannot be retrieved."""
    pass


class PollTimeoutError(PollError):
    """Error raised when a query does not reach a terminal state in time."""
    pass


class QueryFailedError(QueryError):
    """Error raised when the service reports the query as failed."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class QueryCancelledError(QueryError):
    """Error raised when the service reports the query as cancelled."""
    pass


class QueryAbortedError(QueryError):
    """Error raised when the caller aborts waiting for or reading a query."""
    pass


class EmptyMetadataError(QueryError):
    """Error raised when a result set carries no column descriptors."""
    pass


class PaginationError(QueryError):
    """Error raised when a result page cannot be fetched."""
    pass


class ConversionError(QueryError):
    """Error raised in strict mode when a cell cannot be converted to its declared type."""
    pass


class BlobStoreError(BdaError):
    """Error raised when reading or writing a blob fails."""
    pass


class BlobNotFoundError(BlobStoreError):
    """Error raised when a blob does not exist."""
    pass


@contextlib.contextmanager
def handle_service_errors(
    operation_description: str,
    error_type: Type[BdaError],
    context_identifier: Optional[Any] = None,
) -> Generator[None, None, None]:
    """
    Context manager for consistent wrapping of remote service failures.

    Args:
        operation_description: Description of the operation being performed
        error_type: Error type raised for failures that are not bda-mcp errors
        context_identifier: Optional context identifier (like an execution id or bucket)

    Yields:
        None

    Raises:
        Original exception if it is already a BdaError
        error_type for all other exceptions
    """
    try:
        yield
    except BdaError:
        raise
    except Exception as e:
        context_str = f" on {context_identifier}" if context_identifier else ""
        error_msg = f"Error {operation_description}{context_str}: {str(e)}"
        logger.error(error_msg)
        raise error_type(error_msg) from e
