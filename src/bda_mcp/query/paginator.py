"""Collection of paginated query results."""

import logging
import threading
from typing import Iterator, List, Optional

from ..errors import EmptyMetadataError, PaginationError, QueryAbortedError, handle_service_errors
from ..models import QueryHandle, ResultPage, ResultRow
from ..sources.query_service import QueryServicePlugin
from .decoder import decode_row

logger = logging.getLogger("bda-mcp.query.paginator")


class ResultPaginator:
    """Reads every result page of an execution and decodes its rows.

    The first row of the first page repeats the column names and is never
    returned. Pages are fetched one after the other, following continuation
    tokens until a page has none.
    """

    def __init__(self, service: QueryServicePlugin, strict: bool = False):
        self._service = service
        self._strict = strict

    def collect_rows(self, handle: QueryHandle, cancel_event: Optional[threading.Event] = None) -> List[ResultRow]:
        """Fetch and decode all result rows of a finished execution.

        Args:
            handle: Execution handle
            cancel_event: Optional event checked before each page fetch

        Returns:
            Decoded rows in the order the service returned them

        Raises:
            EmptyMetadataError: If the result set has no columns
            PaginationError: If a page cannot be fetched
            ConversionError: In strict mode, if a cell cannot be converted
            QueryAbortedError: If cancel_event is set while reading
        """
        return list(self.iter_rows(handle, cancel_event))

    def iter_rows(self, handle: QueryHandle, cancel_event: Optional[threading.Event] = None) -> Iterator[ResultRow]:
        """Yield decoded result rows as pages arrive."""
        page = self._fetch_page(handle, None, cancel_event)
        columns = page.columns
        if not columns:
            raise EmptyMetadataError(f"Result set of query {handle} has no columns")

        page_number = 1
        first_page = True
        while True:
            for idx, raw_row in enumerate(page.rows):
                if first_page and idx == 0:
                    continue
                yield decode_row(raw_row, columns, strict=self._strict)

            if not page.next_token:
                logger.debug(f"Read {page_number} result pages of query {handle}")
                return

            page = self._fetch_page(handle, page.next_token, cancel_event)
            page_number += 1
            first_page = False

    def _fetch_page(
        self,
        handle: QueryHandle,
        token: Optional[str],
        cancel_event: Optional[threading.Event],
    ) -> ResultPage:
        if cancel_event is not None and cancel_event.is_set():
            raise QueryAbortedError(f"Reading results of query {handle} aborted")
        with handle_service_errors("fetching result page", PaginationError, handle):
            return self._service.get_result_page(handle, token)
