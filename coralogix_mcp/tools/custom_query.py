"""Tool for templated and custom DataPrime queries."""

from typing import Any, Dict, List, Optional

import structlog
from mcp import Tool
from pydantic import Field

from ..config import CoralogixConfig
from ..coralogix_client import CoralogixClient
from ..models import QueryRequest
from ..query_builder import DataPrimeQueryBuilder, QueryTemplate
from ..time_utils import resolve_time_range
from .base import TimeWindowResult, ToolParams

logger = structlog.get_logger(__name__)


class CustomQueryParameters(ToolParams):
    """Template parameters for custom_dataprime_query."""

    custom_query: Optional[str] = Field(default=None, alias="customQuery")
    application: Optional[str] = None
    time_range: Optional[str] = Field(default=None, alias="timeRange")
    interval: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)
    order_by: Optional[str] = Field(default=None, alias="orderBy")


class CustomQueryParams(ToolParams):
    """Parameters for the custom_dataprime_query tool."""

    template: QueryTemplate = Field(description="Query template to use")
    parameters: CustomQueryParameters = Field(default_factory=CustomQueryParameters)


class CustomQueryResult(TimeWindowResult):
    """Result from custom_dataprime_query tool."""

    template: QueryTemplate
    query: str
    parameters: Dict[str, Any]
    results: List[Any]


async def custom_query_tool(
    params: CustomQueryParams,
    config: CoralogixConfig
) -> CustomQueryResult:
    """
    Run a canned template or a caller-supplied DataPrime query.

    Args:
        params: Template and its parameters
        config: Coralogix configuration

    Returns:
        Template, final query, echoed parameters, window and rows
    """
    options = params.parameters
    query = DataPrimeQueryBuilder().build_custom_query(
        params.template,
        custom_query=options.custom_query,
        application=options.application,
        limit=options.limit,
        order_by=options.order_by,
        interval=options.interval
    )
    window = resolve_time_range(options.time_range or "1h")

    logger.info("Running templated query", template=params.template.value, query=query)

    async with CoralogixClient(config) as client:
        results = await client.query(QueryRequest.dataprime(query, window))

    return CustomQueryResult(
        template=params.template,
        query=query,
        parameters=options.echo(),
        time_range=window.to_dict(),
        results=results
    )


def create_custom_query_tool() -> Tool:
    """Create the MCP tool definition for custom_dataprime_query."""
    return Tool(
        name="custom_dataprime_query",
        description="Execute custom DataPrime queries using predefined templates or custom queries",
        inputSchema={
            "type": "object",
            "properties": {
                "template": {
                    "type": "string",
                    "enum": [template.value for template in QueryTemplate],
                    "description": "Query template to use",
                    "default": QueryTemplate.BASIC.value
                },
                "parameters": {
                    "type": "object",
                    "description": "Parameters for the template or custom query",
                    "properties": {
                        "customQuery": {
                            "type": "string",
                            "description": 'Custom DataPrime query string (when template is "custom")'
                        },
                        "application": {
                            "type": "string",
                            "description": "Application name to filter by"
                        },
                        "timeRange": {
                            "type": "string",
                            "description": "Time range for the query"
                        },
                        "interval": {
                            "type": "string",
                            "description": 'Time interval for time series (e.g., "1h", "5m")'
                        },
                        "limit": {
                            "type": "number",
                            "description": "Maximum number of results to return"
                        },
                        "orderBy": {
                            "type": "string",
                            "description": "Field to order results by"
                        }
                    }
                }
            },
            "required": ["template"]
        }
    )
