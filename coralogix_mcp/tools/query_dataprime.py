"""Tool for executing raw DataPrime queries."""

from typing import Any, List

import structlog
from mcp import Tool
from pydantic import Field

from ..config import CoralogixConfig
from ..coralogix_client import CoralogixClient
from ..models import QueryRequest
from ..time_utils import resolve_time_range
from .base import TimeWindowResult, ToolParams

logger = structlog.get_logger(__name__)


class QueryDataPrimeParams(ToolParams):
    """Parameters for the query_logs_dataprime tool."""

    query: str = Field(description="DataPrime query string")
    time_range: str = Field(default="1h", alias="timeRange", description="Time range for the query")


class QueryDataPrimeResult(TimeWindowResult):
    """Result from query_logs_dataprime tool."""

    query: str
    total_results: int = Field(alias="totalResults")
    results: List[Any]


async def query_dataprime_tool(
    params: QueryDataPrimeParams,
    config: CoralogixConfig
) -> QueryDataPrimeResult:
    """
    Execute a DataPrime query exactly as given.

    Args:
        params: Query parameters
        config: Coralogix configuration

    Returns:
        Query, resolved window and result rows
    """
    window = resolve_time_range(params.time_range)

    logger.info("Executing DataPrime query", query=params.query, time_range=params.time_range)

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.dataprime(params.query, window))

    return QueryDataPrimeResult(
        query=params.query,
        time_range=window.to_dict(),
        total_results=len(results),
        results=results
    )


def create_query_dataprime_tool() -> Tool:
    """Create the MCP tool definition for query_logs_dataprime."""
    return Tool(
        name="query_logs_dataprime",
        description="Execute DataPrime queries on Coralogix logs",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "DataPrime query string"
                },
                "timeRange": {
                    "type": "string",
                    "description": "Time range for the query",
                    "default": "1h"
                }
            },
            "required": ["query"]
        }
    )
