"""Logging configuration for the Coralogix MCP server."""

import logging
import os
import sys
from typing import Optional

import structlog
from structlog.stdlib import LoggerFactory


SENSITIVE_KEYS = {
    'api_key', 'apikey', 'authorization', 'token', 'secret', 'password',
    'bearer_token', 'access_token', 'credential'
}


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structured logging for the Coralogix MCP server.

    Logs are written to stderr; stdout carries the MCP stdio protocol.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Whether to output logs in JSON format
        include_timestamp: Whether to include timestamps in logs
        include_caller: Whether to include caller information
        extra_processors: Additional log processors
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="ISO"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    processors.extend([
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ])

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_error_context_processor():
    """
    Create a processor that adds an error category to error-level log entries.

    Returns:
        Log processor function
    """
    def add_error_context(logger, method_name, event_dict):
        if method_name in ('error', 'critical', 'exception') and 'error' in event_dict:
            error = str(event_dict['error']).lower()

            if 'connect' in error or 'timed out' in error:
                event_dict['error_category'] = 'connection'
            elif ' 401 ' in f" {error} " or ' 403 ' in f" {error} " or 'auth' in error:
                event_dict['error_category'] = 'authentication'
            elif ' 429 ' in f" {error} " or 'rate limit' in error:
                event_dict['error_category'] = 'rate_limit'
            elif 'environment variable' in error:
                event_dict['error_category'] = 'configuration'
            elif 'query' in error or 'dataprime' in error:
                event_dict['error_category'] = 'query'
            else:
                event_dict['error_category'] = 'unknown'

        return event_dict

    return add_error_context


def get_performance_processor():
    """
    Create a processor that formats operation durations.

    Returns:
        Log processor function
    """
    def add_performance_metrics(logger, method_name, event_dict):
        duration = event_dict.get('duration')
        if isinstance(duration, (int, float)):
            if duration < 1:
                event_dict['duration_formatted'] = f"{duration*1000:.1f}ms"
            else:
                event_dict['duration_formatted'] = f"{duration:.2f}s"

        return event_dict

    return add_performance_metrics


def get_security_processor():
    """
    Create a processor that masks credentials in log entries.

    Returns:
        Log processor function
    """
    def sanitize_sensitive_data(logger, method_name, event_dict):
        def sanitize(value, key=""):
            if key and any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
                return "***REDACTED***" if value else value
            if isinstance(value, dict):
                return {k: sanitize(v, str(k)) for k, v in value.items()}
            return value

        return {key: sanitize(value, key) for key, value in event_dict.items()}

    return sanitize_sensitive_data


def setup_default_logging(level: Optional[str] = None) -> None:
    """
    Set up default logging configuration for the Coralogix MCP server.

    Args:
        level: Optional log level override
    """
    log_level = (level or os.getenv('CORALOGIX_LOG_LEVEL', 'INFO')).upper()
    log_format = os.getenv('CORALOGIX_LOG_FORMAT', 'console').lower()

    configure_logging(
        level=log_level,
        format_json=(log_format == 'json'),
        include_timestamp=True,
        include_caller=(log_level == 'DEBUG'),
        extra_processors=[
            get_error_context_processor(),
            get_performance_processor(),
            get_security_processor()
        ]
    )
