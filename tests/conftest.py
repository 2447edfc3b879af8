"""Shared fixtures for the Coralogix MCP server tests."""

from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

from coralogix_mcp.config import CoralogixConfig


@pytest.fixture
def config():
    """Coralogix configuration for testing."""
    return CoralogixConfig(api_key="test-api-key", domain="eu2.coralogix.com")


@pytest.fixture
def sample_rows():
    """Rows as returned by the DataPrime endpoint, one per NDJSON line."""
    return [
        {"queryId": {"queryId": "q-1"}},
        {
            "result": {
                "results": [
                    {
                        "metadata": [
                            {"key": "timestamp", "value": "2024-01-15T11:58:00.000Z"},
                            {"key": "severity", "value": "Error"}
                        ],
                        "labels": [
                            {"key": "applicationname", "value": "checkout"},
                            {"key": "subsystemname", "value": "payments"}
                        ],
                        "userData": "{\"log\": \"payment failed\"}"
                    }
                ]
            }
        }
    ]


@pytest.fixture
def mock_client():
    """
    Patch CoralogixClient inside a tool module.

    Usage: ``client = mock_client("search_logs", [rows, ...])``; each call to
    ``client.query`` returns the next item, exceptions are raised.
    """
    patchers = []

    def _patch(module: str, responses):
        client = Mock()
        client.query = AsyncMock(side_effect=list(responses))

        client_cls = MagicMock()
        client_cls.return_value.__aenter__.return_value = client
        client_cls.return_value.__aexit__.return_value = False

        patcher = patch(f"coralogix_mcp.tools.{module}.CoralogixClient", client_cls)
        patcher.start()
        patchers.append(patcher)
        return client

    yield _patch

    for patcher in patchers:
        patcher.stop()
