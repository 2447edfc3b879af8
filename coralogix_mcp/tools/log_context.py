"""Tool for retrieving the logs surrounding a single log entry."""

from typing import Any, Dict, List, Optional

import structlog
from mcp import Tool
from pydantic import Field

from ..config import CoralogixConfig
from ..coralogix_client import CoralogixClient
from ..error_handler import LogEntryNotFoundError
from ..models import QueryRequest
from ..query_builder import DataPrimeQueryBuilder
from .base import ToolParams, ToolResult

logger = structlog.get_logger(__name__)


class LogContextParams(ToolParams):
    """Parameters for the get_log_context tool."""

    log_id: str = Field(alias="logId", description="Unique identifier of the log entry")
    context_size: int = Field(
        default=10,
        alias="contextSize",
        ge=1,
        description="Number of logs before and after to retrieve"
    )


class LogContextResult(ToolResult):
    """Result from get_log_context tool."""

    log_id: str = Field(alias="logId")
    context_size: int = Field(alias="contextSize")
    target_log: List[Any] = Field(alias="targetLog")
    context_logs: List[Any] = Field(alias="contextLogs")


def _find_value(items: Optional[List[Dict[str, Any]]], key: str) -> Optional[Any]:
    for item in items or []:
        if item.get("key") == key:
            return item.get("value")
    return None


def extract_timestamp(log_row: Any) -> Optional[str]:
    """
    Pull the timestamp out of a lookup result row.

    The first ``timestamp`` entry of the row's metadata is used, falling back
    to its labels. Malformed rows yield None and a warning.
    """
    try:
        results = (log_row.get("result") or {}).get("results") or []
        if not results:
            return None
        entry = results[0]
        return _find_value(entry.get("metadata"), "timestamp") or _find_value(entry.get("labels"), "timestamp")
    except (AttributeError, TypeError) as e:
        logger.warning("Could not extract timestamp from log entry", error=str(e))
        return None


async def log_context_tool(
    params: LogContextParams,
    config: CoralogixConfig
) -> LogContextResult:
    """
    Find a log entry by id and fetch the logs around it.

    Args:
        params: Lookup parameters
        config: Coralogix configuration

    Returns:
        The matched entry and its surrounding logs

    Raises:
        LogEntryNotFoundError: If no entry has the given id
    """
    builder = DataPrimeQueryBuilder()
    lookup_query = builder.build_log_lookup_query(params.log_id)

    logger.info("Looking up log entry", log_id=params.log_id)

    async with CoralogixClient(config) as client:
        log_results = await client.query(QueryRequest.dataprime(lookup_query))

        if not log_results:
            raise LogEntryNotFoundError(params.log_id)

        timestamp = extract_timestamp(log_results[0])
        if timestamp is None:
            logger.info("No timestamp on log entry, fetching context without a time window", log_id=params.log_id)

        context_query = builder.build_log_context_query(timestamp, params.context_size)
        context_results = await client.query(QueryRequest.dataprime(context_query))

    return LogContextResult(
        log_id=params.log_id,
        context_size=params.context_size,
        target_log=log_results,
        context_logs=context_results
    )


def create_log_context_tool() -> Tool:
    """Create the MCP tool definition for get_log_context."""
    return Tool(
        name="get_log_context",
        description="Get surrounding context for a specific log entry",
        inputSchema={
            "type": "object",
            "properties": {
                "logId": {
                    "type": "string",
                    "description": "Unique identifier of the log entry"
                },
                "contextSize": {
                    "type": "number",
                    "description": "Number of logs before and after to retrieve",
                    "default": 10
                }
            },
            "required": ["logId"]
        }
    )
