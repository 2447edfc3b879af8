"""Tool for categorizing an application's log lines by shape."""

from typing import Any, List

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


class PatternAnalysisParams(ToolParams):
    """Parameters for the log_pattern_analysis tool."""

    application: str = Field(min_length=1, description="Application name to analyze patterns for")
    time_range: str = Field(default="24h", alias="timeRange")


class PatternAnalysisResult(TimeWindowResult):
    """Result from log_pattern_analysis tool."""

    analysis: str = "Log Pattern Analysis"
    application: str
    query: str
    results: List[Any]


async def pattern_analysis_tool(
    params: PatternAnalysisParams,
    config: CoralogixConfig
) -> PatternAnalysisResult:
    """Group an application's logs by extracted prefix and level."""
    query = DataPrimeQueryBuilder().build_pattern_analysis_query(params.application)
    window = resolve_time_range(params.time_range)

    logger.info("Analyzing log patterns", application=params.application)

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.dataprime(query, window))

    return PatternAnalysisResult(
        application=params.application,
        query=query,
        time_range=window.to_dict(),
        results=results
    )


def create_pattern_analysis_tool() -> Tool:
    """Create the MCP tool definition for log_pattern_analysis."""
    return Tool(
        name="log_pattern_analysis",
        description="Analyze log patterns and categorize log entries",
        inputSchema={
            "type": "object",
            "properties": {
                "application": {
                    "type": "string",
                    "description": "Application name to analyze patterns for"
                },
                "timeRange": {
                    "type": "string",
                    "description": 'Time range for analysis (e.g., "1h", "24h")',
                    "default": "24h"
                }
            },
            "required": ["application"]
        }
    )
