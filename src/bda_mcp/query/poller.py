"""Polling of query executions until they reach a terminal state."""

import logging
import threading
import time
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import (
    PollError,
    PollTimeoutError,
    QueryAbortedError,
    QueryCancelledError,
    QueryFailedError,
    handle_service_errors,
)
from ..models import QueryHandle
from ..sources.query_service import QueryServicePlugin
from ..types import QueryState

logger = logging.getLogger("bda-mcp.query.poller")


class PollSettings(BaseModel):
    """Backoff and timeout settings for status polling."""
    model_config = ConfigDict(frozen=True)

    initial_delay: float = Field(default=0.5, gt=0)
    max_delay: float = Field(default=10.0, gt=0)
    multiplier: float = Field(default=2.0, ge=1.0)
    timeout: Optional[float] = Field(default=600.0, gt=0)

    @model_validator(mode="after")
    def validate_delays(self) -> "PollSettings":
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must not be smaller than initial_delay")
        return self


class CompletionPoller:
    """Waits for a query execution to finish.

    The status is checked immediately, then again after each backoff delay.
    Delays grow by `multiplier` up to `max_delay`, and the whole wait is
    bounded by `timeout`. The caller's thread sleeps between polls only.
    """

    def __init__(
        self,
        service: QueryServicePlugin,
        settings: Optional[PollSettings] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._service = service
        self._settings = settings or PollSettings()
        self._sleep = sleep
        self._clock = clock

    @property
    def settings(self) -> PollSettings:
        return self._settings

    def await_completion(self, handle: QueryHandle, cancel_event: Optional[threading.Event] = None) -> None:
        """Block until the execution reaches a terminal state.

        Args:
            handle: Execution handle
            cancel_event: Optional event that aborts the wait when set

        Raises:
            QueryFailedError: If the execution failed
            QueryCancelledError: If the execution was cancelled
            PollError: If the status cannot be retrieved
            PollTimeoutError: If the execution is still running after the timeout
            QueryAbortedError: If cancel_event is set while waiting
        """
        settings = self._settings
        deadline = self._clock() + settings.timeout if settings.timeout else None
        delay = settings.initial_delay
        polls = 0

        while True:
            self._check_cancelled(handle, cancel_event)

            with handle_service_errors("polling query status", PollError, handle):
                status = self._service.get_status(handle)
            polls += 1
            logger.debug(f"Query {handle} is {status.state.value} (poll {polls})")

            if status.state == QueryState.SUCCEEDED:
                logger.info(f"Query {handle} succeeded after {polls} polls")
                return
            if status.state == QueryState.FAILED:
                reason = f": {status.reason}" if status.reason else ""
                raise QueryFailedError(f"Query {handle} failed{reason}", reason=status.reason)
            if status.state == QueryState.CANCELLED:
                raise QueryCancelledError(f"Query {handle} was cancelled")

            wait = delay
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise PollTimeoutError(
                        f"Query {handle} did not finish within {settings.timeout} seconds"
                    )
                wait = min(wait, remaining)

            self._wait(handle, wait, cancel_event)
            delay = min(delay * settings.multiplier, settings.max_delay)

    def _wait(self, handle: QueryHandle, seconds: float, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is None:
            self._sleep(seconds)
        elif cancel_event.wait(seconds):
            raise QueryAbortedError(f"Waiting for query {handle} aborted")

    @staticmethod
    def _check_cancelled(handle: QueryHandle, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise QueryAbortedError(f"Waiting for query {handle} aborted")
