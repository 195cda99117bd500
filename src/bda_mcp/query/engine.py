"""Query execution engine composing submission, polling and pagination."""

import logging
import threading
from typing import List, Optional

from ..errors import PollError, handle_service_errors
from ..models import DatabaseBindings, QueryHandle, QueryStatus, ResultRow
from ..sources.query_service import QueryServicePlugin
from .paginator import ResultPaginator
from .poller import CompletionPoller, PollSettings
from .submitter import QuerySubmitter

logger = logging.getLogger("bda-mcp.query.engine")


class QueryExecutionEngine:
    """Submits queries and returns their results as typed rows.

    The engine only keeps the service and its configuration, none of which
    change after construction, so one instance can serve concurrent calls
    as long as the service can.
    """

    def __init__(
        self,
        service: QueryServicePlugin,
        bindings: DatabaseBindings,
        poll_settings: Optional[PollSettings] = None,
        strict: bool = False,
        poller: Optional[CompletionPoller] = None,
    ):
        """Initialize the engine.

        Args:
            service: Query service used for every operation
            bindings: Logical database bindings
            poll_settings: Backoff and timeout settings for status polling
            strict: Raise ConversionError for malformed cell values
            poller: Pre-built poller, mainly to inject clocks in tests
        """
        self._service = service
        self._bindings = bindings
        self._submitter = QuerySubmitter(service, bindings)
        self._poller = poller or CompletionPoller(service, poll_settings)
        self._paginator = ResultPaginator(service, strict=strict)

    @property
    def bindings(self) -> DatabaseBindings:
        return self._bindings

    def submit(self, logical_db: str, sql: str, cancel_event: Optional[threading.Event] = None) -> QueryHandle:
        """Submit a query and return its handle without waiting."""
        return self._submitter.submit(logical_db, sql, cancel_event)

    def status(self, handle: QueryHandle) -> QueryStatus:
        """Get the current status of an execution.

        Raises:
            PollError: If the status cannot be retrieved
        """
        with handle_service_errors("getting query status", PollError, handle):
            return self._service.get_status(handle)

    def fetch(self, handle: QueryHandle, cancel_event: Optional[threading.Event] = None) -> List[ResultRow]:
        """Wait for an execution to finish and return all of its rows."""
        self._poller.await_completion(handle, cancel_event)
        rows = self._paginator.collect_rows(handle, cancel_event)
        logger.info(f"Query {handle} returned {len(rows)} rows")
        return rows

    def execute(self, logical_db: str, sql: str, cancel_event: Optional[threading.Event] = None) -> List[ResultRow]:
        """Submit a query, wait for it and return all of its rows.

        Args:
            logical_db: Logical database name
            sql: Query text
            cancel_event: Optional event that aborts the execution when set

        Returns:
            Decoded rows in result order

        Raises:
            ConfigurationError: If logical_db is not configured
            QueryError: If submission, polling or pagination fails
        """
        handle = self.submit(logical_db, sql, cancel_event)
        return self.fetch(handle, cancel_event)
