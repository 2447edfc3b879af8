"""MCP tools for Coralogix log search and analytics."""

from .search_logs import search_logs_tool, create_search_logs_tool, SearchLogsParams, SearchLogsResult
from .query_dataprime import (
    query_dataprime_tool,
    create_query_dataprime_tool,
    QueryDataPrimeParams,
    QueryDataPrimeResult,
)
from .aggregations import (
    log_aggregations_tool,
    create_log_aggregations_tool,
    LogAggregationsParams,
    LogAggregationsResult,
)
from .catalog import (
    list_applications_tool,
    list_subsystems_tool,
    create_list_applications_tool,
    create_list_subsystems_tool,
    ListApplicationsParams,
    ListSubsystemsParams,
)
from .log_context import log_context_tool, create_log_context_tool, LogContextParams, LogContextResult
from .advanced_query import advanced_query_tool, create_advanced_query_tool, AdvancedQueryParams
from .pattern_analysis import pattern_analysis_tool, create_pattern_analysis_tool, PatternAnalysisParams
from .security_analysis import security_analysis_tool, create_security_analysis_tool, SecurityAnalysisParams
from .custom_query import custom_query_tool, create_custom_query_tool, CustomQueryParams

__all__ = [
    "search_logs_tool",
    "create_search_logs_tool",
    "SearchLogsParams",
    "SearchLogsResult",

    "query_dataprime_tool",
    "create_query_dataprime_tool",
    "QueryDataPrimeParams",
    "QueryDataPrimeResult",

    "log_aggregations_tool",
    "create_log_aggregations_tool",
    "LogAggregationsParams",
    "LogAggregationsResult",

    "list_applications_tool",
    "list_subsystems_tool",
    "create_list_applications_tool",
    "create_list_subsystems_tool",
    "ListApplicationsParams",
    "ListSubsystemsParams",

    "log_context_tool",
    "create_log_context_tool",
    "LogContextParams",
    "LogContextResult",

    "advanced_query_tool",
    "create_advanced_query_tool",
    "AdvancedQueryParams",

    "pattern_analysis_tool",
    "create_pattern_analysis_tool",
    "PatternAnalysisParams",

    "security_analysis_tool",
    "create_security_analysis_tool",
    "SecurityAnalysisParams",

    "custom_query_tool",
    "create_custom_query_tool",
    "CustomQueryParams",
]
