"""Configuration management for the Coralogix MCP server."""

import os
import re
from dataclasses import dataclass
from typing import Optional


API_PATH = "/api/v1/dataprime/query"

_DOMAIN_PATTERN = re.compile(r'^[A-Za-z0-9]([A-Za-z0-9\-]*[A-Za-z0-9])?(\.[A-Za-z0-9]([A-Za-z0-9\-]*[A-Za-z0-9])?)*$')


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


@dataclass
class CoralogixConfig:
    """Configuration for Coralogix MCP server."""
    api_key: str
    domain: str
    timeout: Optional[float] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if not self.api_key:
            raise ConfigurationError("Coralogix API key is required")

        if not self.domain:
            raise ConfigurationError("Coralogix domain is required")

        # The API host is built as ng-api-http.<domain>, so only a bare host name works
        if not _DOMAIN_PATTERN.match(self.domain):
            raise ConfigurationError(
                f"Invalid Coralogix domain: {self.domain}. "
                "Expected a bare host name such as 'eu2.coralogix.com'"
            )

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive: {self.timeout}")

    @property
    def api_url(self) -> str:
        """DataPrime query endpoint for the configured domain."""
        return f"https://ng-api-http.{self.domain}{API_PATH}"


def load_config() -> CoralogixConfig:
    """Load configuration from environment variables."""
    api_key = os.getenv('CORALOGIX_API_KEY')
    domain = os.getenv('CORALOGIX_DOMAIN')

    if not api_key or not domain:
        raise ConfigurationError(
            "Missing required environment variables: CORALOGIX_API_KEY and CORALOGIX_DOMAIN"
        )

    raw_timeout = os.getenv('CORALOGIX_TIMEOUT')
    try:
        timeout = float(raw_timeout) if raw_timeout else None
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric configuration value: {e}")

    return CoralogixConfig(
        api_key=api_key.strip(),
        domain=domain.strip(),
        timeout=timeout
    )
