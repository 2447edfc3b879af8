"""Unit tests for the Coralogix HTTP client."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from coralogix_mcp.coralogix_client import (
    CoralogixAPIError,
    CoralogixAuthenticationError,
    CoralogixClient,
    CoralogixClientError,
    CoralogixConnectionError,
    CoralogixRateLimitError,
    parse_ndjson,
)
from coralogix_mcp.models import QueryRequest
from coralogix_mcp.time_utils import DateRange


WINDOW = DateRange(start_date="2024-01-15T11:00:00.000Z", end_date="2024-01-15T12:00:00.000Z")


def _response(status_code=200, text="", reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = reason
    response.text = text
    return response


@pytest.fixture
def mock_session():
    """Patch requests.Session and return the session the client will use."""
    with patch("requests.Session") as session_class:
        session = Mock()
        session.headers = {}
        session_class.return_value = session
        yield session


class TestParseNdjson:
    """Test newline-delimited JSON parsing."""

    def test_parses_each_line_in_order(self):
        body = '{"a": 1}\n{"b": 2}\n[3]\n'
        assert parse_ndjson(body) == [{"a": 1}, {"b": 2}, [3]]

    def test_invalid_line_skipped(self):
        """The second of three lines is invalid; first and third survive in order."""
        body = '{"first": 1}\nnot json\n{"third": 3}'
        assert parse_ndjson(body) == [{"first": 1}, {"third": 3}]

    def test_invalid_line_logged(self):
        with patch("coralogix_mcp.coralogix_client.logger") as mock_logger:
            parse_ndjson('{"ok": true}\n{broken')
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["line"] == "{broken"

    def test_blank_lines_ignored(self):
        body = '\n\n{"a": 1}\n   \n\n{"b": 2}\n\n'
        assert parse_ndjson(body) == [{"a": 1}, {"b": 2}]

    def test_empty_body(self):
        assert parse_ndjson("") == []
        assert parse_ndjson("\n \n") == []

    def test_scalar_json_values_kept(self):
        assert parse_ndjson('1\n"two"\nnull') == [1, "two", None]


class TestCoralogixClient:
    """Test cases for CoralogixClient."""

    @pytest.mark.asyncio
    async def test_context_manager(self, config, mock_session):
        async with CoralogixClient(config) as client:
            assert client._session is mock_session
        assert client._session is None
        mock_session.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_session_headers(self, config, mock_session):
        client = CoralogixClient(config)
        await client._ensure_session()

        assert mock_session.headers["Authorization"] == "Bearer test-api-key"
        assert mock_session.headers["Content-Type"] == "application/json"

        await client.close()

    @pytest.mark.asyncio
    async def test_query_posts_request(self, config, mock_session):
        mock_session.post.return_value = _response(text='{"result": 1}\n{"result": 2}')
        request = QueryRequest.lucene("error", WINDOW, limit=50)

        async with CoralogixClient(config) as client:
            results = await client.query(request)

        assert results == [{"result": 1}, {"result": 2}]
        mock_session.post.assert_called_once_with(
            "https://ng-api-http.eu2.coralogix.com/api/v1/dataprime/query",
            json={
                "query": "error",
                "metadata": {
                    "syntax": "QUERY_SYNTAX_LUCENE",
                    "tier": "TIER_FREQUENT_SEARCH",
                    "startDate": "2024-01-15T11:00:00.000Z",
                    "endDate": "2024-01-15T12:00:00.000Z",
                    "limit": 50,
                },
            },
            timeout=None
        )

    @pytest.mark.asyncio
    async def test_query_uses_configured_timeout(self, mock_session):
        from coralogix_mcp.config import CoralogixConfig

        mock_session.post.return_value = _response(text="")
        config = CoralogixConfig(api_key="k", domain="coralogix.com", timeout=5)

        async with CoralogixClient(config) as client:
            assert await client.query(QueryRequest.dataprime("source logs")) == []

        assert mock_session.post.call_args.kwargs["timeout"] == 5

    @pytest.mark.asyncio
    async def test_query_skips_malformed_lines(self, config, mock_session):
        mock_session.post.return_value = _response(text='{"a": 1}\n{oops\n{"c": 3}\n')

        async with CoralogixClient(config) as client:
            results = await client.query(QueryRequest.dataprime("source logs"))

        assert results == [{"a": 1}, {"c": 3}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, reason, error_class", [
        (400, "Bad Request", CoralogixAPIError),
        (401, "Unauthorized", CoralogixAuthenticationError),
        (403, "Forbidden", CoralogixAuthenticationError),
        (429, "Too Many Requests", CoralogixRateLimitError),
        (500, "Internal Server Error", CoralogixAPIError),
    ])
    async def test_http_errors(self, config, mock_session, status, reason, error_class):
        mock_session.post.return_value = _response(status_code=status, reason=reason)

        async with CoralogixClient(config) as client:
            with pytest.raises(error_class) as exc_info:
                await client.query(QueryRequest.dataprime("source logs"))

        assert exc_info.value.status_code == status
        assert str(exc_info.value) == f"Coralogix API request failed: {status} {reason}"
        # Exactly one attempt, no retry
        assert mock_session.post.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exception, message", [
        (requests.exceptions.ConnectionError("refused"), "Failed to connect"),
        (requests.exceptions.Timeout("slow"), "timed out"),
        (requests.exceptions.RequestException("boom"), "Request to Coralogix failed"),
    ])
    async def test_network_errors(self, config, mock_session, exception, message):
        mock_session.post.side_effect = exception

        async with CoralogixClient(config) as client:
            with pytest.raises(CoralogixConnectionError, match=message):
                await client.query(QueryRequest.dataprime("source logs"))

    @pytest.mark.asyncio
    async def test_errors_share_base_class(self, config, mock_session):
        mock_session.post.return_value = _response(status_code=502, reason="Bad Gateway")

        async with CoralogixClient(config) as client:
            with pytest.raises(CoralogixClientError):
                await client.query(QueryRequest.dataprime("source logs"))


class TestQueryRequest:
    """Test the request body models."""

    def test_dataprime_payload_without_window(self):
        payload = QueryRequest.dataprime("source logs | limit 1").to_payload()
        assert payload == {
            "query": "source logs | limit 1",
            "metadata": {
                "syntax": "QUERY_SYNTAX_DATAPRIME",
                "tier": "TIER_FREQUENT_SEARCH",
                "defaultSource": "logs",
            },
        }

    def test_dataprime_payload_with_window(self):
        metadata = QueryRequest.dataprime("source logs", WINDOW).to_payload()["metadata"]
        assert metadata["startDate"] == WINDOW.start_date
        assert metadata["endDate"] == WINDOW.end_date
        assert "limit" not in metadata

    def test_payload_is_json_serializable(self):
        payload = QueryRequest.lucene("error", WINDOW, limit=10).to_payload()
        assert json.loads(json.dumps(payload)) == payload
