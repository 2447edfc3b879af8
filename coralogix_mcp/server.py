"""Main MCP server implementation."""

import time
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, Type

import structlog
from mcp import types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from . import __version__
from .config import ConfigurationError, CoralogixConfig
from .error_handler import UnknownToolError, to_mcp_error
from .tools import (
    AdvancedQueryParams,
    CustomQueryParams,
    ListApplicationsParams,
    ListSubsystemsParams,
    LogAggregationsParams,
    LogContextParams,
    PatternAnalysisParams,
    QueryDataPrimeParams,
    SearchLogsParams,
    SecurityAnalysisParams,
    advanced_query_tool,
    create_advanced_query_tool,
    create_custom_query_tool,
    create_list_applications_tool,
    create_list_subsystems_tool,
    create_log_aggregations_tool,
    create_log_context_tool,
    create_pattern_analysis_tool,
    create_query_dataprime_tool,
    create_search_logs_tool,
    create_security_analysis_tool,
    custom_query_tool,
    list_applications_tool,
    list_subsystems_tool,
    log_aggregations_tool,
    log_context_tool,
    pattern_analysis_tool,
    query_dataprime_tool,
    search_logs_tool,
    security_analysis_tool,
)
from .tools.base import ToolParams, ToolResult

logger = structlog.get_logger(__name__)

SERVER_NAME = "coralogix-mcp-server"


class ToolHandler(NamedTuple):
    """Tool declaration plus the model and coroutine that run it."""
    create: Callable[[], types.Tool]
    params: Type[ToolParams]
    run: Callable[[Any, CoralogixConfig], Awaitable[ToolResult]]


TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "search_logs": ToolHandler(create_search_logs_tool, SearchLogsParams, search_logs_tool),
    "query_logs_dataprime": ToolHandler(create_query_dataprime_tool, QueryDataPrimeParams, query_dataprime_tool),
    "get_log_aggregations": ToolHandler(create_log_aggregations_tool, LogAggregationsParams, log_aggregations_tool),
    "list_applications": ToolHandler(create_list_applications_tool, ListApplicationsParams, list_applications_tool),
    "list_subsystems": ToolHandler(create_list_subsystems_tool, ListSubsystemsParams, list_subsystems_tool),
    "get_log_context": ToolHandler(create_log_context_tool, LogContextParams, log_context_tool),
    "advanced_dataprime_query": ToolHandler(create_advanced_query_tool, AdvancedQueryParams, advanced_query_tool),
    "log_pattern_analysis": ToolHandler(create_pattern_analysis_tool, PatternAnalysisParams, pattern_analysis_tool),
    "security_analysis": ToolHandler(create_security_analysis_tool, SecurityAnalysisParams, security_analysis_tool),
    "custom_dataprime_query": ToolHandler(create_custom_query_tool, CustomQueryParams, custom_query_tool),
}


class CoralogixMCPServer:
    """Main MCP server for Coralogix integration."""

    def __init__(
        self,
        config: Optional[CoralogixConfig],
        config_error: Optional[ConfigurationError] = None
    ):
        """
        Initialize the Coralogix MCP server.

        Args:
            config: Coralogix configuration, or None if it could not be loaded
            config_error: Error raised while loading configuration; reported
                on every tool call when ``config`` is None
        """
        self.config = config
        self.config_error = config_error
        self.server = Server(SERVER_NAME)
        self._setup_handlers()

        logger.info(
            "Coralogix MCP Server initialized",
            domain=config.domain if config else None,
            configured=config is not None
        )

    def _setup_handlers(self) -> None:
        """Set up MCP server handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[types.Tool]:
            return await self.list_tools()

        # Installed directly so a raised McpError reaches the client as a
        # JSON-RPC error instead of an isError tool result
        async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
            content = await self.call_tool(request.params.name, request.params.arguments)
            return types.ServerResult(types.CallToolResult(content=content, isError=False))

        self.server.request_handlers[types.CallToolRequest] = handle_call_tool

    async def list_tools(self) -> List[types.Tool]:
        """Return the declarations of every available tool."""
        tools = [handler.create() for handler in TOOL_HANDLERS.values()]
        logger.debug("Tools listed", tool_count=len(tools))
        return tools

    def _require_config(self) -> CoralogixConfig:
        if self.config is None:
            raise self.config_error or ConfigurationError(
                "Missing required environment variables: CORALOGIX_API_KEY and CORALOGIX_DOMAIN"
            )
        return self.config

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None
    ) -> List[types.TextContent]:
        """
        Execute a tool and wrap its result in a single text content block.

        Args:
            name: Tool name to execute
            arguments: Tool arguments

        Returns:
            One TextContent holding the JSON result envelope

        Raises:
            McpError: INVALID_REQUEST for bad input or configuration,
                METHOD_NOT_FOUND for unknown tools, INTERNAL_ERROR otherwise
        """
        logger.info("Tool called", tool_name=name, arguments=arguments)
        start = time.monotonic()

        try:
            handler = TOOL_HANDLERS.get(name)
            if handler is None:
                raise UnknownToolError(name)

            config = self._require_config()
            params = handler.params.model_validate(arguments or {})
            result = await handler.run(params, config)
        except Exception as e:
            logger.error(
                "Tool execution failed",
                tool_name=name,
                error=str(e),
                error_type=type(e).__name__,
                duration=time.monotonic() - start
            )
            raise to_mcp_error(e, name) from e

        logger.info("Tool completed", tool_name=name, duration=time.monotonic() - start)
        return [types.TextContent(type="text", text=result.to_json())]

    async def run(self, transport_type: str = "stdio") -> None:
        """
        Run the MCP server.

        Args:
            transport_type: Transport type (only stdio is supported)
        """
        logger.info("Starting Coralogix MCP server", transport=transport_type)

        if transport_type != "stdio":
            raise ValueError(f"Unsupported transport type: {transport_type}")

        from mcp.server.stdio import stdio_server
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )


async def create_server(config: Optional[CoralogixConfig] = None) -> CoralogixMCPServer:
    """
    Create and configure a Coralogix MCP server.

    If no configuration is given it is loaded from the environment. A missing
    configuration does not prevent start-up; tool calls report it instead.

    Args:
        config: Optional Coralogix configuration

    Returns:
        Configured CoralogixMCPServer instance
    """
    config_error = None
    if config is None:
        from .config import load_config
        try:
            config = load_config()
        except ConfigurationError as e:
            logger.warning("Coralogix configuration unavailable, tool calls will fail", error=str(e))
            config_error = e

    return CoralogixMCPServer(config, config_error)
