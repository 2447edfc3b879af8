"""Tool for Lucene text search over Coralogix logs."""

from typing import Any, List, Optional

import structlog
from mcp import Tool
from pydantic import Field

from ..config import CoralogixConfig
from ..coralogix_client import CoralogixClient
from ..models import QueryRequest
from ..query_builder import DataPrimeQueryBuilder
from ..time_utils import resolve_time_range
from .base import TIME_RANGE_DESCRIPTION, TimeWindowResult, ToolParams

logger = structlog.get_logger(__name__)


class SearchLogsParams(ToolParams):
    """Parameters for the search_logs tool."""

    query: str = Field(description="Search query (supports Lucene syntax)")
    applications: Optional[List[str]] = Field(
        default=None,
        description="Filter by specific applications"
    )
    subsystems: Optional[List[str]] = Field(
        default=None,
        description="Filter by specific subsystems"
    )
    severities: Optional[List[str]] = Field(
        default=None,
        description="Filter by log severities (Debug, Info, Warning, Error, Critical)"
    )
    time_range: str = Field(default="1h", alias="timeRange", description=TIME_RANGE_DESCRIPTION)
    limit: int = Field(default=100, ge=1, description="Maximum number of results")


class SearchLogsResult(TimeWindowResult):
    """Result from search_logs tool."""

    query: str
    total_results: int = Field(alias="totalResults")
    results: List[Any]


async def search_logs_tool(
    params: SearchLogsParams,
    config: CoralogixConfig
) -> SearchLogsResult:
    """
    Search logs with a Lucene query and optional metadata filters.

    Args:
        params: Search parameters
        config: Coralogix configuration

    Returns:
        Query used, resolved window and matching log rows
    """
    query = DataPrimeQueryBuilder().build_search_query(
        params.query,
        applications=params.applications,
        subsystems=params.subsystems,
        severities=params.severities
    )
    window = resolve_time_range(params.time_range)

    logger.info("Searching logs", query=query, time_range=params.time_range, limit=params.limit)

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.lucene(query, window, limit=params.limit))

    return SearchLogsResult(
        query=query,
        time_range=window.to_dict(),
        total_results=len(results),
        results=results
    )


def create_search_logs_tool() -> Tool:
    """Create the MCP tool definition for search_logs."""
    return Tool(
        name="search_logs",
        description="Search Coralogix logs with text queries",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query (supports Lucene syntax)"
                },
                "applications": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Filter by specific applications"
                },
                "subsystems": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Filter by specific subsystems"
                },
                "severities": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Filter by log severities (Debug, Info, Warning, Error, Critical)"
                },
                "timeRange": {
                    "type": "string",
                    "description": TIME_RANGE_DESCRIPTION,
                    "default": "1h"
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of results",
                    "default": 100
                }
            },
            "required": ["query"]
        }
    )
