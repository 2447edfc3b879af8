"""Tool for grouped aggregations over log data fields."""

from typing import Any, Dict, List, Optional

import structlog
from mcp import Tool
from pydantic import BaseModel, Field

from ..config import CoralogixConfig
from ..coralogix_client import CoralogixClient
from ..models import QueryRequest
from ..query_builder import DataPrimeQueryBuilder
from ..time_utils import resolve_time_range
from .base import TimeWindowResult, ToolParams

logger = structlog.get_logger(__name__)


class AggregationSpec(BaseModel):
    """One aggregation function; unknown types fall back to count()."""

    type: Optional[str] = None
    field: Optional[str] = None


class LogAggregationsParams(ToolParams):
    """Parameters for the get_log_aggregations tool."""

    group_by: List[str] = Field(alias="groupBy", min_length=1, description="Fields to group by")
    aggregations: Optional[List[AggregationSpec]] = Field(
        default=None,
        description="Aggregation functions to apply"
    )
    filters: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional filters to apply"
    )
    time_range: str = Field(default="1h", alias="timeRange")


class LogAggregationsResult(TimeWindowResult):
    """Result from get_log_aggregations tool."""

    query: str
    group_by: List[str] = Field(alias="groupBy")
    aggregations: Optional[List[Dict[str, Any]]] = None
    results: List[Any]


async def log_aggregations_tool(
    params: LogAggregationsParams,
    config: CoralogixConfig
) -> LogAggregationsResult:
    """
    Group logs by data fields and aggregate them.

    Args:
        params: Aggregation parameters
        config: Coralogix configuration

    Returns:
        Built query, grouping, aggregations, window and result rows
    """
    aggregations = (
        [agg.model_dump(exclude_none=True) for agg in params.aggregations]
        if params.aggregations is not None else None
    )
    query = DataPrimeQueryBuilder().build_aggregation_query(
        params.group_by,
        aggregations=aggregations,
        filters=params.filters
    )
    window = resolve_time_range(params.time_range)

    logger.info("Aggregating logs", query=query, group_by=params.group_by)

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.dataprime(query, window))

    return LogAggregationsResult(
        query=query,
        group_by=params.group_by,
        aggregations=aggregations,
        time_range=window.to_dict(),
        results=results
    )


def create_log_aggregations_tool() -> Tool:
    """Create the MCP tool definition for get_log_aggregations."""
    return Tool(
        name="get_log_aggregations",
        description="Get aggregated metrics from logs",
        inputSchema={
            "type": "object",
            "properties": {
                "groupBy": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Fields to group by"
                },
                "aggregations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "type": {"type": "string", "enum": ["count", "sum", "avg", "min", "max"]},
                            "field": {"type": "string"}
                        }
                    },
                    "description": "Aggregation functions to apply"
                },
                "filters": {
                    "type": "object",
                    "description": "Additional filters to apply"
                },
                "timeRange": {
                    "type": "string",
                    "default": "1h"
                }
            },
            "required": ["groupBy"]
        }
    )
