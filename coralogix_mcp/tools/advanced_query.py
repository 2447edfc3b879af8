"""Tool for specialized DataPrime analyses."""

from typing import Any, Dict, List, Optional

import structlog
from mcp import Tool
from pydantic import Field, field_validator

from ..config import CoralogixConfig
from ..coralogix_client import CoralogixClient
from ..models import QueryRequest
from ..query_builder import DataPrimeQueryBuilder, ParsePattern, QueryType
from ..time_utils import resolve_time_range
from .base import TimeWindowResult, ToolParams

logger = structlog.get_logger(__name__)


class AdvancedQueryParams(ToolParams):
    """Parameters for the advanced_dataprime_query tool."""

    query_type: QueryType = Field(alias="queryType", description="Type of advanced analysis to perform")
    application: Optional[str] = None
    subsystem: Optional[str] = None
    severity: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    time_range: str = Field(default="1h", alias="timeRange")
    interval: str = Field(default="5m", description="Time interval for aggregated metrics")
    parse_pattern: ParsePattern = Field(default=ParsePattern.API_LOGS, alias="parsePattern")

    @field_validator('interval')
    @classmethod
    def validate_interval(cls, v):
        if not v or not v.strip():
            raise ValueError("Interval cannot be empty")
        return v


class AdvancedQueryResult(TimeWindowResult):
    """Result from advanced_dataprime_query tool."""

    query_type: QueryType = Field(alias="queryType")
    query: str
    parameters: Dict[str, Any]
    results: List[Any]


async def advanced_query_tool(
    params: AdvancedQueryParams,
    config: CoralogixConfig
) -> AdvancedQueryResult:
    """
    Run one of the predefined analyses with optional filters.

    Args:
        params: Analysis parameters
        config: Coralogix configuration

    Returns:
        Analysis type, built query, echoed parameters, window and rows
    """
    query = DataPrimeQueryBuilder().build_advanced_query(
        params.query_type,
        application=params.application,
        subsystem=params.subsystem,
        severity=params.severity,
        user_id=params.user_id,
        interval=params.interval,
        parse_pattern=params.parse_pattern
    )
    window = resolve_time_range(params.time_range)

    logger.info("Running advanced analysis", query_type=params.query_type.value, query=query)

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.dataprime(query, window))

    return AdvancedQueryResult(
        query_type=params.query_type,
        query=query,
        parameters=params.echo(),
        time_range=window.to_dict(),
        results=results
    )


def create_advanced_query_tool() -> Tool:
    """Create the MCP tool definition for advanced_dataprime_query."""
    return Tool(
        name="advanced_dataprime_query",
        description="Execute advanced DataPrime queries with specialized analysis types",
        inputSchema={
            "type": "object",
            "properties": {
                "queryType": {
                    "type": "string",
                    "enum": [query_type.value for query_type in QueryType],
                    "description": "Type of advanced analysis to perform",
                    "default": QueryType.BASIC.value
                },
                "application": {
                    "type": "string",
                    "description": "Filter by specific application name"
                },
                "subsystem": {
                    "type": "string",
                    "description": "Filter by specific subsystem name"
                },
                "severity": {
                    "type": "string",
                    "description": "Filter by log severity level"
                },
                "userId": {
                    "type": "string",
                    "description": "Filter by specific user ID"
                },
                "timeRange": {
                    "type": "string",
                    "description": 'Time range for the query (e.g., "1h", "24h", "7d")',
                    "default": "1h"
                },
                "interval": {
                    "type": "string",
                    "description": 'Time interval for aggregated metrics (e.g., "5m", "1h")',
                    "default": "5m"
                },
                "parsePattern": {
                    "type": "string",
                    "enum": [pattern.value for pattern in ParsePattern],
                    "description": "Pattern for log parsing queries",
                    "default": ParsePattern.API_LOGS.value
                }
            },
            "required": ["queryType"]
        }
    )
