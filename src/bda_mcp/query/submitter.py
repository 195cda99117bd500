"""Submission of queries against configured databases."""

import logging
import threading
from typing import Optional

from ..errors import ConfigurationError, QueryAbortedError, SubmissionError, handle_service_errors
from ..models import DatabaseBindings, QueryHandle
from ..sources.query_service import QueryServicePlugin

logger = logging.getLogger("bda-mcp.query.submitter")


class QuerySubmitter:
    """Resolves logical database names and starts query executions."""

    def __init__(self, service: QueryServicePlugin, bindings: DatabaseBindings):
        self._service = service
        self._bindings = bindings

    def submit(self, logical_db: str, sql: str, cancel_event: Optional[threading.Event] = None) -> QueryHandle:
        """Submit a query against a logical database.

        Args:
            logical_db: Logical database name from the configured bindings
            sql: Query text, forwarded verbatim
            cancel_event: Optional event; when set, nothing is submitted

        Returns:
            Handle returned by the query service

        Raises:
            ConfigurationError: If no binding exists for logical_db
            SubmissionError: If the service call fails
            QueryAbortedError: If cancel_event is already set
        """
        if not self._bindings:
            raise ConfigurationError("No database bindings are configured")

        binding = self._bindings.get(logical_db)
        if binding is None:
            available = ", ".join(self._bindings)
            raise ConfigurationError(f"Unknown database '{logical_db}'. Available databases: {available}")

        if cancel_event is not None and cancel_event.is_set():
            raise QueryAbortedError(f"Submission to '{logical_db}' aborted")

        with handle_service_errors("submitting query", SubmissionError, logical_db):
            handle = self._service.submit_query(binding.database, sql, binding.output_location)

        logger.info(f"Submitted query {handle} to database {binding.database}")
        return handle
