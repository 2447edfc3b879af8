"""Error classification and MCP error mapping for the Coralogix MCP server."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import structlog
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData, INTERNAL_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND
from pydantic import ValidationError

from .config import ConfigurationError
from .coralogix_client import (
    CoralogixAPIError,
    CoralogixAuthenticationError,
    CoralogixConnectionError,
    CoralogixRateLimitError,
)
from .query_builder import QueryBuildError
from .time_utils import TimeRangeError

logger = structlog.get_logger(__name__)


class UnknownToolError(Exception):
    """Raised when a tool name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class LogEntryNotFoundError(Exception):
    """Raised when a log entry lookup returns no rows."""

    def __init__(self, log_id: str):
        self.log_id = log_id
        super().__init__(f"Log entry with ID {log_id} not found")


class ErrorCategory(Enum):
    """Categories of errors that can occur in the Coralogix MCP server."""
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    AUTHENTICATION = "authentication"
    QUERY = "query"
    RATE_LIMIT = "rate_limit"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNKNOWN_TOOL = "unknown_tool"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorInfo:
    """Structured error information."""
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    suggestion: str
    details: Optional[str] = None
    status_code: Optional[int] = None
    user_actionable: bool = True


# Bad input is reported as INVALID_REQUEST, everything else as INTERNAL_ERROR
_ERROR_CODES: Dict[ErrorCategory, int] = {
    ErrorCategory.CONFIGURATION: INVALID_REQUEST,
    ErrorCategory.VALIDATION: INVALID_REQUEST,
    ErrorCategory.NOT_FOUND: INVALID_REQUEST,
    ErrorCategory.UNKNOWN_TOOL: METHOD_NOT_FOUND,
}


class ErrorClassifier:
    """Classifies errors and provides structured error information."""

    @staticmethod
    def classify_error(error: Exception) -> ErrorInfo:
        """
        Classify an error and return structured error information.

        Args:
            error: The exception to classify

        Returns:
            Structured error information
        """
        if isinstance(error, UnknownToolError):
            return ErrorInfo(
                category=ErrorCategory.UNKNOWN_TOOL,
                severity=ErrorSeverity.LOW,
                message="Unknown tool",
                suggestion="List the available tools and use one of their names",
                details=error.name
            )

        elif isinstance(error, ConfigurationError):
            return ErrorInfo(
                category=ErrorCategory.CONFIGURATION,
                severity=ErrorSeverity.CRITICAL,
                message="Configuration error",
                suggestion="Set CORALOGIX_API_KEY and CORALOGIX_DOMAIN and restart the server",
                details=str(error)
            )

        elif isinstance(error, ValidationError):
            return ErrorInfo(
                category=ErrorCategory.VALIDATION,
                severity=ErrorSeverity.MEDIUM,
                message="Parameter validation failed",
                suggestion="Check parameter types and required fields",
                details=str(error)
            )

        elif isinstance(error, TimeRangeError):
            return ErrorInfo(
                category=ErrorCategory.VALIDATION,
                severity=ErrorSeverity.MEDIUM,
                message="Invalid time range",
                suggestion='Use an amount followed by h, d or w, e.g. "1h", "24h", "7d"',
                details=str(error)
            )

        elif isinstance(error, QueryBuildError):
            return ErrorInfo(
                category=ErrorCategory.VALIDATION,
                severity=ErrorSeverity.MEDIUM,
                message="Invalid query parameters",
                suggestion="Check the template parameters and field names",
                details=str(error)
            )

        elif isinstance(error, LogEntryNotFoundError):
            return ErrorInfo(
                category=ErrorCategory.NOT_FOUND,
                severity=ErrorSeverity.LOW,
                message="Log entry not found",
                suggestion="Verify the log id and that the entry is within the frequent-search tier",
                details=str(error)
            )

        elif isinstance(error, CoralogixAuthenticationError):
            return ErrorInfo(
                category=ErrorCategory.AUTHENTICATION,
                severity=ErrorSeverity.HIGH,
                message="Authentication failed",
                suggestion="Check CORALOGIX_API_KEY and that the key has DataPrime query permissions",
                details=str(error),
                status_code=error.status_code
            )

        elif isinstance(error, CoralogixRateLimitError):
            return ErrorInfo(
                category=ErrorCategory.RATE_LIMIT,
                severity=ErrorSeverity.MEDIUM,
                message="Rate limit exceeded",
                suggestion="Reduce request frequency or wait before trying again",
                details=str(error),
                status_code=error.status_code
            )

        elif isinstance(error, CoralogixAPIError):
            return ErrorInfo(
                category=ErrorCategory.QUERY,
                severity=ErrorSeverity.MEDIUM,
                message="Query execution failed",
                suggestion="Check your query syntax and parameters",
                details=str(error),
                status_code=error.status_code,
                user_actionable=error.status_code < 500
            )

        elif isinstance(error, CoralogixConnectionError):
            return ErrorInfo(
                category=ErrorCategory.CONNECTION,
                severity=ErrorSeverity.HIGH,
                message="Failed to connect to Coralogix",
                suggestion="Check CORALOGIX_DOMAIN and network connectivity",
                details=str(error)
            )

        return ErrorInfo(
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.MEDIUM,
            message="Tool execution failed",
            suggestion="Check logs for more details and try again",
            details=str(error),
            user_actionable=False
        )


def to_mcp_error(error: Exception, tool_name: Optional[str] = None) -> McpError:
    """
    Convert an exception raised while running a tool into an MCP protocol error.

    Args:
        error: The exception to convert
        tool_name: Name of the tool that failed

    Returns:
        McpError carrying the JSON-RPC error code and a user-facing message
    """
    if isinstance(error, McpError):
        return error

    info = ErrorClassifier.classify_error(error)
    code = _ERROR_CODES.get(info.category, INTERNAL_ERROR)

    message = info.message
    if info.details:
        message = f"{message}: {info.details}"

    data: Dict[str, Any] = {
        "category": info.category.value,
        "suggestion": info.suggestion,
    }
    if tool_name:
        data["tool"] = tool_name
    if info.status_code is not None:
        data["status_code"] = info.status_code

    logger.debug(
        "Mapped tool error",
        tool_name=tool_name,
        category=info.category.value,
        severity=info.severity.value,
        code=code
    )
    return McpError(ErrorData(code=code, message=message, data=data))
