"""Tool for security-focused log analysis."""

from typing import Any, List

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


class SecurityAnalysisParams(ToolParams):
    """Parameters for the security_analysis tool."""

    time_range: str = Field(default="24h", alias="timeRange")
    severity: str = Field(default="WARNING", min_length=1, description="Minimum severity level to analyze")


class SecurityQueryResult(BaseModel):
    query: str
    result: List[Any]


class SecurityAnalysisResult(TimeWindowResult):
    """Result from security_analysis tool."""

    analysis: str = "Security Analysis"
    severity: str
    results: List[SecurityQueryResult]


async def security_analysis_tool(
    params: SecurityAnalysisParams,
    config: CoralogixConfig
) -> SecurityAnalysisResult:
    """
    Run the failed-login, severity and suspicious-activity queries.

    The queries run one after another; a failure in any of them fails the
    whole analysis.

    Args:
        params: Analysis parameters
        config: Coralogix configuration

    Returns:
        Each query paired with its result rows, in query order
    """
    queries = DataPrimeQueryBuilder().build_security_queries(params.severity)
    window = resolve_time_range(params.time_range)

    logger.info("Running security analysis", severity=params.severity, time_range=params.time_range)

    results = []
    async with CoralogixClient(config) as client:
        for query in queries:
            rows = await client.query(QueryRequest.dataprime(query, window))
            results.append(SecurityQueryResult(query=query, result=rows))

    return SecurityAnalysisResult(
        severity=params.severity,
        time_range=window.to_dict(),
        results=results
    )


def create_security_analysis_tool() -> Tool:
    """Create the MCP tool definition for security_analysis."""
    return Tool(
        name="security_analysis",
        description="Perform security-focused log analysis to identify threats and suspicious activities",
        inputSchema={
            "type": "object",
            "properties": {
                "timeRange": {
                    "type": "string",
                    "description": 'Time range for security analysis (e.g., "1h", "24h")',
                    "default": "24h"
                },
                "severity": {
                    "type": "string",
                    "description": "Minimum severity level to analyze",
                    "default": "WARNING"
                }
            }
        }
    )
