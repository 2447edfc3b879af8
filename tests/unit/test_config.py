"""Unit tests for configuration management."""

import os
from unittest.mock import patch

import pytest

from coralogix_mcp.config import ConfigurationError, CoralogixConfig, load_config


class TestCoralogixConfig:
    """Test cases for CoralogixConfig class."""

    def test_valid_config(self):
        config = CoralogixConfig(api_key="key", domain="eu2.coralogix.com")

        assert config.api_key == "key"
        assert config.domain == "eu2.coralogix.com"
        assert config.timeout is None

    def test_api_url(self):
        config = CoralogixConfig(api_key="key", domain="coralogix.us")
        assert config.api_url == "https://ng-api-http.coralogix.us/api/v1/dataprime/query"

    def test_empty_api_key_raises_error(self):
        with pytest.raises(ConfigurationError, match="API key is required"):
            CoralogixConfig(api_key="", domain="eu2.coralogix.com")

    def test_empty_domain_raises_error(self):
        with pytest.raises(ConfigurationError, match="domain is required"):
            CoralogixConfig(api_key="key", domain="")

    @pytest.mark.parametrize("domain", [
        "https://eu2.coralogix.com",
        "eu2.coralogix.com/api",
        "eu2 coralogix.com",
        ".coralogix.com",
    ])
    def test_domain_must_be_bare_host(self, domain):
        with pytest.raises(ConfigurationError, match="Invalid Coralogix domain"):
            CoralogixConfig(api_key="key", domain=domain)

    def test_zero_timeout_raises_error(self):
        with pytest.raises(ConfigurationError, match="Timeout must be positive"):
            CoralogixConfig(api_key="key", domain="eu2.coralogix.com", timeout=0)

    def test_positive_timeout(self):
        config = CoralogixConfig(api_key="key", domain="eu2.coralogix.com", timeout=12.5)
        assert config.timeout == 12.5


class TestLoadConfig:
    """Test cases for load_config function."""

    def test_load_config_required_values(self):
        env = {"CORALOGIX_API_KEY": "cxtp_abc", "CORALOGIX_DOMAIN": "eu2.coralogix.com"}
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        assert config.api_key == "cxtp_abc"
        assert config.domain == "eu2.coralogix.com"
        assert config.timeout is None

    def test_load_config_with_timeout(self):
        env = {
            "CORALOGIX_API_KEY": "cxtp_abc",
            "CORALOGIX_DOMAIN": "eu2.coralogix.com",
            "CORALOGIX_TIMEOUT": "45",
        }
        with patch.dict(os.environ, env, clear=True):
            assert load_config().timeout == 45.0

    def test_values_are_stripped(self):
        env = {"CORALOGIX_API_KEY": " key ", "CORALOGIX_DOMAIN": " coralogix.in\n"}
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        assert config.api_key == "key"
        assert config.domain == "coralogix.in"

    @pytest.mark.parametrize("env", [
        {},
        {"CORALOGIX_API_KEY": "key"},
        {"CORALOGIX_DOMAIN": "eu2.coralogix.com"},
        {"CORALOGIX_API_KEY": "", "CORALOGIX_DOMAIN": "eu2.coralogix.com"},
    ])
    def test_missing_required_values(self, env):
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError, match="CORALOGIX_API_KEY and CORALOGIX_DOMAIN"):
                load_config()

    def test_invalid_timeout(self):
        env = {
            "CORALOGIX_API_KEY": "key",
            "CORALOGIX_DOMAIN": "eu2.coralogix.com",
            "CORALOGIX_TIMEOUT": "soon",
        }
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError, match="Invalid numeric configuration value"):
                load_config()
