"""Query execution for bda-mcp."""

from .coercion import coerce
from .decoder import decode_row
from .engine import QueryExecutionEngine
from .paginator import ResultPaginator
from .poller import CompletionPoller, PollSettings
from .submitter import QuerySubmitter

__all__ = [
    "coerce",
    "decode_row",
    "QueryExecutionEngine",
    "ResultPaginator",
    "CompletionPoller",
    "PollSettings",
    "QuerySubmitter",
]
