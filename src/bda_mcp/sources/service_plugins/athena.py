"""Athena query service plugin."""

import logging
from typing import Any, Dict, List, Optional

from ...models import ColumnDescriptor, QueryHandle, QueryStatus, ResultPage
from ...types import QueryState
from ...utils.aws import create_client
from ..query_service import QueryServicePlugin, ServiceType

logger = logging.getLogger("bda-mcp.sources.service_plugins.athena")


@QueryServicePlugin.register(ServiceType.ATHENA)
class AthenaQueryService(QueryServicePlugin):
    """Plugin running queries on AWS Athena."""

    def __init__(
        self,
        client: Any = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        profile: Optional[str] = None,
        page_size: Optional[int] = None,
    ):
        """Initialize the Athena plugin.

        Args:
            client: Existing boto3 athena client, created from the environment if omitted
            region: Region for a new client
            endpoint_url: Endpoint URL for a new client
            profile: Credential profile for a new client
            page_size: Maximum rows per result page (the service caps it at 1000)
        """
        self._client = client or create_client("athena", region=region, endpoint_url=endpoint_url, profile=profile)
        self._page_size = page_size

    @property
    def service_type(self) -> str:
        """The service type this plugin supports."""
        return ServiceType.ATHENA

    def submit_query(self, database: str, sql: str, output_location: str) -> QueryHandle:
        response = self._client.start_query_execution(
            QueryString=sql,
            QueryExecutionContext={"Database": database},
            ResultConfiguration={"OutputLocation": output_location},
        )
        handle = QueryHandle(execution_id=response["QueryExecutionId"])
        logger.debug(f"Started Athena query execution {handle} on database {database}")
        return handle

    def get_status(self, handle: QueryHandle) -> QueryStatus:
        response = self._client.get_query_execution(QueryExecutionId=handle.execution_id)
        status = response["QueryExecution"]["Status"]
        return QueryStatus(state=QueryState(status["State"]), reason=status.get("StateChangeReason"))

    def get_result_page(self, handle: QueryHandle, continuation_token: Optional[str] = None) -> ResultPage:
        request: Dict[str, Any] = {"QueryExecutionId": handle.execution_id}
        if continuation_token:
            request["NextToken"] = continuation_token
        if self._page_size:
            request["MaxResults"] = self._page_size

        response = self._client.get_query_results(**request)
        result_set = response.get("ResultSet", {})

        column_info = result_set.get("ResultSetMetadata", {}).get("ColumnInfo", [])
        columns = [ColumnDescriptor(name=info["Name"], type=info["Type"]) for info in column_info]

        rows: List[List[Optional[str]]] = [
            [datum.get("VarCharValue") for datum in row.get("Data", [])]
            for row in result_set.get("Rows", [])
        ]

        return ResultPage(columns=columns, rows=rows, next_token=response.get("NextToken"))
