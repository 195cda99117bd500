"""Tests for query submission and the execution engine."""

import threading
import unittest
from unittest.mock import MagicMock

from fake_service import FakeQueryService

from bda_mcp.errors import (
    ConfigurationError,
    EmptyMetadataError,
    QueryAbortedError,
    QueryFailedError,
    SubmissionError,
)
from bda_mcp.models import ColumnDescriptor, DatabaseBinding, DatabaseBindings, QueryHandle, ResultPage
from bda_mcp.query.engine import QueryExecutionEngine
from bda_mcp.query.poller import CompletionPoller, PollSettings
from bda_mcp.query.submitter import QuerySubmitter
from bda_mcp.types import QueryState

BINDINGS = DatabaseBindings([
    DatabaseBinding(logical_name="cart", database="cart", output_location="s3://results/"),
])

SCENARIO_PAGES = {
    None: ResultPage(
        columns=[ColumnDescriptor(name="id", type="integer"), ColumnDescriptor(name="name", type="varchar")],
        rows=[["id", "name"], ["1", "a"], ["2", "b"]],
        next_token="p2",
    ),
    "p2": ResultPage(rows=[["3", "c"]]),
}


def make_engine(service, bindings=BINDINGS):
    poller = CompletionPoller(service, PollSettings(initial_delay=0.01, max_delay=0.01), sleep=lambda _: None)
    return QueryExecutionEngine(service, bindings, poller=poller)


class TestQuerySubmitter(unittest.TestCase):
    """Test resolution of databases and submission."""

    def test_submit_forwards_binding(self):
        service = FakeQueryService(execution_id="exec-1")
        bindings = DatabaseBindings([
            DatabaseBinding(logical_name="shop", database="prod_shop", output_location="s3://out/shop/"),
        ])

        handle = QuerySubmitter(service, bindings).submit("shop", "select 1")

        self.assertEqual(QueryHandle(execution_id="exec-1"), handle)
        self.assertEqual([("prod_shop", "select 1", "s3://out/shop/")], service.submissions)

    def test_unknown_database(self):
        service = MagicMock()

        with self.assertRaises(ConfigurationError):
            QuerySubmitter(service, BINDINGS).submit("orders", "select 1")

        service.submit_query.assert_not_called()

    def test_no_bindings(self):
        service = MagicMock()

        with self.assertRaises(ConfigurationError):
            QuerySubmitter(service, DatabaseBindings()).submit("cart", "select 1")

        service.submit_query.assert_not_called()

    def test_transport_failure(self):
        service = MagicMock()
        service.submit_query.side_effect = TimeoutError("connect timeout")

        with self.assertRaises(SubmissionError):
            QuerySubmitter(service, BINDINGS).submit("cart", "select 1")

        service.submit_query.assert_called_once()

    def test_cancelled_before_submission(self):
        service = MagicMock()
        cancel_event = threading.Event()
        cancel_event.set()

        with self.assertRaises(QueryAbortedError):
            QuerySubmitter(service, BINDINGS).submit("cart", "select 1", cancel_event)

        service.submit_query.assert_not_called()


class TestDatabaseBindings(unittest.TestCase):
    """Test the binding set."""

    def test_duplicate_logical_name(self):
        with self.assertRaises(ConfigurationError):
            DatabaseBindings([
                DatabaseBinding(logical_name="cart", database="a", output_location="s3://a/"),
                DatabaseBinding(logical_name="cart", database="b", output_location="s3://b/"),
            ])

    def test_output_location_must_be_s3(self):
        with self.assertRaises(ValueError):
            DatabaseBinding(logical_name="cart", database="cart", output_location="/tmp/results")


class TestQueryExecutionEngine(unittest.TestCase):
    """Test the submit, wait and collect flow."""

    def test_execute_scenario(self):
        service = FakeQueryService(
            states=[QueryState.RUNNING, QueryState.RUNNING, QueryState.SUCCEEDED],
            pages=SCENARIO_PAGES,
        )

        rows = make_engine(service).execute("cart", "select * from t")

        self.assertEqual(
            [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}, {"id": 3, "name": "c"}],
            [row.to_dict() for row in rows],
        )
        self.assertEqual([("cart", "select * from t", "s3://results/")], service.submissions)
        self.assertEqual(3, service.status_calls)
        self.assertEqual([None, "p2"], service.page_requests)

    def test_unknown_database_makes_no_remote_call(self):
        service = MagicMock()

        with self.assertRaises(ConfigurationError):
            make_engine(service).execute("orders", "select 1")

        self.assertEqual([], service.method_calls)

    def test_failed_query_skips_pagination(self):
        service = FakeQueryService(states=[QueryState.FAILED], pages=SCENARIO_PAGES)

        with self.assertRaises(QueryFailedError):
            make_engine(service).execute("cart", "select * from t")

        self.assertEqual([], service.page_requests)

    def test_empty_metadata(self):
        service = FakeQueryService(pages={None: ResultPage()})

        with self.assertRaises(EmptyMetadataError):
            make_engine(service).execute("cart", "select * from t")

    def test_submit_then_fetch(self):
        service = FakeQueryService(execution_id="exec-9", pages=SCENARIO_PAGES)
        engine = make_engine(service)

        handle = engine.submit("cart", "select * from t")
        self.assertEqual(QueryState.SUCCEEDED, engine.status(handle).state)
        rows = engine.fetch(handle)

        self.assertEqual("exec-9", handle.execution_id)
        self.assertEqual(3, len(rows))

    def test_concurrent_executions(self):
        """Independent executions on one engine do not share state."""
        service = FakeQueryService(pages=SCENARIO_PAGES)
        engine = make_engine(service)
        results = []

        threads = [
            threading.Thread(target=lambda: results.append(engine.execute("cart", "select * from t")))
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(4, len(results))
        for rows in results:
            self.assertEqual([1, 2, 3], [row["id"].value for row in rows])


if __name__ == "__main__":
    unittest.main()
