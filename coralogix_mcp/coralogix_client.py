"""HTTP client for the Coralogix DataPrime query API."""

import asyncio
import json
from typing import Any, List, Optional

import requests
import structlog

from . import __version__
from .config import CoralogixConfig
from .models import QueryRequest

logger = structlog.get_logger(__name__)


class CoralogixClientError(Exception):
    """Base exception for Coralogix client errors."""
    pass


class CoralogixConnectionError(CoralogixClientError):
    """Raised when the request never reaches Coralogix or gets no reply."""
    pass


class CoralogixAPIError(CoralogixClientError):
    """Raised when Coralogix answers with a non-success status."""

    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Coralogix API request failed: {status_code} {reason}")


class CoralogixAuthenticationError(CoralogixAPIError):
    """Raised when the API key is rejected."""
    pass


class CoralogixRateLimitError(CoralogixAPIError):
    """Raised when Coralogix throttles the request."""
    pass


def parse_ndjson(text: str) -> List[Any]:
    """
    Parse a newline-delimited JSON body.

    Blank lines are ignored and lines that are not valid JSON are skipped
    with a warning.

    Args:
        text: Raw response body

    Returns:
        Parsed values in line order
    """
    results = []

    for line in text.strip().split('\n'):
        if not line.strip():
            continue
        try:
            results.append(json.loads(line))
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse NDJSON line", line=line, error=str(e))

    return results


class CoralogixClient:
    """HTTP client for the Coralogix DataPrime API."""

    def __init__(self, config: CoralogixConfig):
        """Initialize Coralogix client with configuration.

        Args:
            config: Coralogix configuration object
        """
        self.config = config
        self._session: Optional[requests.Session] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure HTTP session is initialized."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "User-Agent": f"coralogix-mcp-server/{__version__}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.api_key}",
            })

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    async def query(self, request: QueryRequest) -> List[Any]:
        """Execute a query against the DataPrime endpoint.

        Args:
            request: Query text and metadata

        Returns:
            Parsed NDJSON values from the response body

        Raises:
            CoralogixConnectionError: When the request fails at the network level
            CoralogixAPIError: When Coralogix returns a non-success status
        """
        await self._ensure_session()

        payload = request.to_payload()
        url = self.config.api_url

        logger.info(
            "Executing Coralogix query",
            query=request.query,
            syntax=request.metadata.syntax.value,
            start=request.metadata.start_date,
            end=request.metadata.end_date
        )

        # requests is synchronous, run it off the event loop
        def make_sync_request():
            return self._session.post(
                url,
                json=payload,
                timeout=self.config.timeout
            )

        try:
            response = await asyncio.to_thread(make_sync_request)
        except requests.exceptions.Timeout as e:
            raise CoralogixConnectionError(f"Request to Coralogix timed out: {e}")
        except requests.exceptions.ConnectionError as e:
            raise CoralogixConnectionError(f"Failed to connect to Coralogix: {e}")
        except requests.exceptions.RequestException as e:
            raise CoralogixConnectionError(f"Request to Coralogix failed: {e}")

        if not response.ok:
            status = response.status_code
            reason = response.reason or ""
            logger.error("Coralogix API error", status_code=status, reason=reason)
            if status in (401, 403):
                raise CoralogixAuthenticationError(status, reason)
            if status == 429:
                raise CoralogixRateLimitError(status, reason)
            raise CoralogixAPIError(status, reason)

        results = parse_ndjson(response.text)
        logger.debug("Coralogix query completed", results=len(results))
        return results
