"""Unit tests for error handling functionality."""

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData, INTERNAL_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND
from pydantic import ValidationError

from coralogix_mcp.config import ConfigurationError
from coralogix_mcp.coralogix_client import (
    CoralogixAPIError,
    CoralogixAuthenticationError,
    CoralogixConnectionError,
    CoralogixRateLimitError,
)
from coralogix_mcp.error_handler import (
    ErrorCategory,
    ErrorClassifier,
    ErrorSeverity,
    LogEntryNotFoundError,
    UnknownToolError,
    to_mcp_error,
)
from coralogix_mcp.query_builder import QueryBuildError
from coralogix_mcp.time_utils import TimeRangeError
from coralogix_mcp.tools import SearchLogsParams


def _validation_error() -> ValidationError:
    try:
        SearchLogsParams.model_validate({"limit": 10})
    except ValidationError as e:
        return e
    raise AssertionError("expected a validation error")


class TestErrorClassifier:
    """Test error classification functionality."""

    def test_classify_authentication_error(self):
        error_info = ErrorClassifier.classify_error(CoralogixAuthenticationError(401, "Unauthorized"))

        assert error_info.category == ErrorCategory.AUTHENTICATION
        assert error_info.severity == ErrorSeverity.HIGH
        assert error_info.status_code == 401
        assert "CORALOGIX_API_KEY" in error_info.suggestion

    def test_classify_rate_limit_error(self):
        error_info = ErrorClassifier.classify_error(CoralogixRateLimitError(429, "Too Many Requests"))

        assert error_info.category == ErrorCategory.RATE_LIMIT
        assert "reduce request frequency" in error_info.suggestion.lower()

    def test_classify_api_error(self):
        error_info = ErrorClassifier.classify_error(CoralogixAPIError(400, "Bad Request"))

        assert error_info.category == ErrorCategory.QUERY
        assert error_info.details == "Coralogix API request failed: 400 Bad Request"
        assert error_info.user_actionable

    def test_server_side_api_error_not_user_actionable(self):
        error_info = ErrorClassifier.classify_error(CoralogixAPIError(503, "Service Unavailable"))
        assert not error_info.user_actionable

    def test_classify_connection_error(self):
        error_info = ErrorClassifier.classify_error(CoralogixConnectionError("refused"))

        assert error_info.category == ErrorCategory.CONNECTION
        assert "CORALOGIX_DOMAIN" in error_info.suggestion

    def test_classify_configuration_error(self):
        error_info = ErrorClassifier.classify_error(ConfigurationError("missing"))

        assert error_info.category == ErrorCategory.CONFIGURATION
        assert error_info.severity == ErrorSeverity.CRITICAL

    @pytest.mark.parametrize("error", [
        TimeRangeError("bad range"),
        QueryBuildError("bad field"),
    ])
    def test_classify_input_errors(self, error):
        assert ErrorClassifier.classify_error(error).category == ErrorCategory.VALIDATION

    def test_classify_pydantic_validation_error(self):
        error_info = ErrorClassifier.classify_error(_validation_error())

        assert error_info.category == ErrorCategory.VALIDATION
        assert "query" in error_info.details

    def test_classify_not_found(self):
        error_info = ErrorClassifier.classify_error(LogEntryNotFoundError("abc"))

        assert error_info.category == ErrorCategory.NOT_FOUND
        assert error_info.details == "Log entry with ID abc not found"

    def test_classify_unknown_tool(self):
        error_info = ErrorClassifier.classify_error(UnknownToolError("nope"))

        assert error_info.category == ErrorCategory.UNKNOWN_TOOL
        assert error_info.details == "nope"

    def test_classify_generic_error(self):
        error_info = ErrorClassifier.classify_error(RuntimeError("Something went wrong"))

        assert error_info.category == ErrorCategory.UNKNOWN
        assert error_info.message == "Tool execution failed"
        assert not error_info.user_actionable


class TestToMcpError:
    """Test conversion of tool failures to MCP protocol errors."""

    @pytest.mark.parametrize("error, code", [
        (ConfigurationError("missing"), INVALID_REQUEST),
        (TimeRangeError("bad"), INVALID_REQUEST),
        (QueryBuildError("bad"), INVALID_REQUEST),
        (LogEntryNotFoundError("abc"), INVALID_REQUEST),
        (UnknownToolError("nope"), METHOD_NOT_FOUND),
        (CoralogixAPIError(500, "Internal Server Error"), INTERNAL_ERROR),
        (CoralogixAuthenticationError(403, "Forbidden"), INTERNAL_ERROR),
        (CoralogixRateLimitError(429, "Too Many Requests"), INTERNAL_ERROR),
        (CoralogixConnectionError("refused"), INTERNAL_ERROR),
        (KeyError("boom"), INTERNAL_ERROR),
    ])
    def test_error_codes(self, error, code):
        assert to_mcp_error(error).error.code == code

    def test_validation_error_code(self):
        assert to_mcp_error(_validation_error()).error.code == INVALID_REQUEST

    def test_message_includes_details(self):
        mcp_error = to_mcp_error(CoralogixAPIError(400, "Bad Request"))
        assert mcp_error.error.message == "Query execution failed: Coralogix API request failed: 400 Bad Request"

    def test_unknown_tool_named_once(self):
        assert to_mcp_error(UnknownToolError("drop_logs")).error.message == "Unknown tool: drop_logs"

    def test_oversized_time_range_is_invalid_request(self):
        from coralogix_mcp.time_utils import resolve_time_range

        with pytest.raises(TimeRangeError) as exc_info:
            resolve_time_range("99999999w")

        assert to_mcp_error(exc_info.value).error.code == INVALID_REQUEST

    def test_data_carries_category_and_tool(self):
        mcp_error = to_mcp_error(CoralogixRateLimitError(429, "Too Many Requests"), tool_name="search_logs")

        assert mcp_error.error.data["category"] == "rate_limit"
        assert mcp_error.error.data["tool"] == "search_logs"
        assert mcp_error.error.data["status_code"] == 429
        assert mcp_error.error.data["suggestion"]

    def test_tool_omitted_when_unknown(self):
        assert "tool" not in to_mcp_error(RuntimeError("x")).error.data

    def test_existing_mcp_error_passed_through(self):
        original = McpError(ErrorData(code=INVALID_REQUEST, message="already mapped"))
        assert to_mcp_error(original) is original
