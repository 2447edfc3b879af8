"""Tools listing the applications and subsystems that are sending logs."""

from typing import Any, List, Optional

import structlog
from mcp import Tool
from pydantic import Field

from ..config import CoralogixConfig
from ..coralogix_client import CoralogixClient
from ..models import QueryRequest
from ..query_builder import DataPrimeQueryBuilder
from ..time_utils import resolve_time_range
from .base import TimeWindowResult, ToolParams

logger = structlog.get_logger(__name__)

# Listings always look back one day; callers cannot override it
CATALOG_TIME_RANGE = "24h"


class ListApplicationsParams(ToolParams):
    """The list_applications tool takes no arguments."""


class ListSubsystemsParams(ToolParams):
    """Parameters for the list_subsystems tool."""

    applications: Optional[List[str]] = Field(
        default=None,
        description="Applications to get subsystems for"
    )


class ListApplicationsResult(TimeWindowResult):
    query: str = "List applications"
    results: List[Any]


class ListSubsystemsResult(TimeWindowResult):
    query: str = "List subsystems"
    applications: Optional[List[str]] = None
    results: List[Any]


async def list_applications_tool(
    params: ListApplicationsParams,
    config: CoralogixConfig
) -> ListApplicationsResult:
    """List applications ranked by log volume over the last day."""
    query = DataPrimeQueryBuilder().build_list_applications_query()
    window = resolve_time_range(CATALOG_TIME_RANGE)

    logger.info("Listing applications")

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.dataprime(query, window))

    return ListApplicationsResult(time_range=window.to_dict(), results=results)


async def list_subsystems_tool(
    params: ListSubsystemsParams,
    config: CoralogixConfig
) -> ListSubsystemsResult:
    """List subsystems ranked by log volume, optionally for some applications."""
    query = DataPrimeQueryBuilder().build_list_subsystems_query(params.applications)
    window = resolve_time_range(CATALOG_TIME_RANGE)

    logger.info("Listing subsystems", applications=params.applications)

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.dataprime(query, window))

    return ListSubsystemsResult(
        applications=params.applications,
        time_range=window.to_dict(),
        results=results
    )


def create_list_applications_tool() -> Tool:
    """Create the MCP tool definition for list_applications."""
    return Tool(
        name="list_applications",
        description="List available applications in Coralogix",
        inputSchema={
            "type": "object",
            "properties": {}
        }
    )


def create_list_subsystems_tool() -> Tool:
    """Create the MCP tool definition for list_subsystems."""
    return Tool(
        name="list_subsystems",
        description="List subsystems for specific applications",
        inputSchema={
            "type": "object",
            "properties": {
                "applications": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Applications to get subsystems for"
                }
            }
        }
    )
