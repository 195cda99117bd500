import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict, List, Union

from dotenv import load_dotenv
from mcp.server import FastMCP

load_dotenv()

from .blobs import BlobTransfer
from .factory import build_blob_transfer, build_engine
from .models import QueryHandle, ResultRow
from .query.engine import QueryExecutionEngine

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("bda-mcp")

app = FastMCP("bda-mcp")


@lru_cache(maxsize=1)
def get_engine() -> QueryExecutionEngine:
    """Engine built from the environment on first use."""
    return build_engine()


@lru_cache(maxsize=1)
def get_blob_transfer() -> BlobTransfer:
    """Blob helpers built from the environment on first use."""
    return build_blob_transfer()


def _to_records(rows: List[ResultRow]) -> List[Dict[str, Any]]:
    return [row.to_dict() for row in rows]


# Prompts
@app.prompt(name="Initial Prompt")
def initial_prompt() -> str:
    return """
You are now connected to the big data analysis server through the Model Context Protocol (MCP).

1. DATABASES
 - Queries run against logical databases configured on the server
 - Use databases_list to see the available logical names and where their results are stored

2. RUNNING QUERIES
 - query_execute submits a query, waits for it and returns all rows
 - For long running queries use query_submit, then query_status and query_fetch with the returned execution id
 - Queries use the SQL dialect of the query service (Presto/Trino SQL for Athena)
 - Prefer selective column projection and LIMIT clauses, every row is transferred page by page

3. VALUES
 - Integer, double and boolean columns are returned as numbers and booleans
 - Date, timestamp and all other columns are returned as strings, null cells as null

Available tools:
- databases_list - Lists the configured logical databases
- query_execute - Runs a query and returns its rows
- query_submit - Starts a query and returns its execution id
- query_status - Returns the state of a query execution
- query_fetch - Waits for a query execution and returns its rows
- blob_get - Reads an object from the blob store as text
- blob_put - Writes text to an object in the blob store
    """


@app.tool("databases_list")
async def databases_list() -> List[Dict[str, Any]]:
    """List the configured logical databases."""
    return [binding.model_dump() for binding in get_engine().bindings.values()]


@app.tool("query_execute")
async def query_execute(
    database: str,
    sql: str,
    include_metadata: bool = False
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """
    Execute a query and return its rows.

    Args:
        database: Logical database name (see databases_list)
        sql: SQL query to execute
        include_metadata: Include metadata in the response

    Returns:
        Query results
    """
    engine = get_engine()
    handle = await asyncio.to_thread(engine.submit, database, sql)
    rows = await asyncio.to_thread(engine.fetch, handle)
    records = _to_records(rows)

    if include_metadata:
        return {
            "metadata": {
                "database": database,
                "query": sql,
                "execution_id": handle.execution_id,
                "record_count": len(records),
            },
            "records": records,
        }
    return records


@app.tool("query_submit")
async def query_submit(database: str, sql: str) -> Dict[str, str]:
    """
    Start a query without waiting for it.

    Args:
        database: Logical database name (see databases_list)
        sql: SQL query to execute

    Returns:
        The execution id to pass to query_status and query_fetch
    """
    handle = await asyncio.to_thread(get_engine().submit, database, sql)
    return {"execution_id": handle.execution_id}


@app.tool("query_status")
async def query_status(execution_id: str) -> Dict[str, Any]:
    """
    Get the state of a query execution.

    Args:
        execution_id: Id returned by query_submit

    Returns:
        The state and, for failed queries, the reason
    """
    status = await asyncio.to_thread(get_engine().status, QueryHandle(execution_id=execution_id))
    return {"execution_id": execution_id, "state": status.state.value, "reason": status.reason}


@app.tool("query_fetch")
async def query_fetch(execution_id: str) -> List[Dict[str, Any]]:
    """
    Wait for a query execution to finish and return its rows.

    Args:
        execution_id: Id returned by query_submit

    Returns:
        Query results
    """
    rows = await asyncio.to_thread(get_engine().fetch, QueryHandle(execution_id=execution_id))
    return _to_records(rows)


@app.tool("blob_get")
async def blob_get(bucket: str, key: str) -> str:
    """
    Read an object from the blob store as UTF-8 text.

    Args:
        bucket: Bucket name
        key: Object key
    """
    return await asyncio.to_thread(get_blob_transfer().read_text, bucket, key)


@app.tool("blob_put")
async def blob_put(bucket: str, key: str, body: str) -> Dict[str, str]:
    """
    Write UTF-8 text to an object in the blob store.

    Args:
        bucket: Bucket name
        key: Object key
        body: Content to write
    """
    await asyncio.to_thread(get_blob_transfer().upload_string, bucket, key, body)
    logger.info(f"Stored {len(body)} characters in {bucket}/{key}")
    return {"bucket": bucket, "key": key}


def main():
    """Entry point for CLI execution"""
    app.run(transport="stdio")


if __name__ == "__main__":
    main()
