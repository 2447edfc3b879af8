"""Main entry point for the Coralogix MCP server."""

import argparse
import asyncio
import signal
import sys

import structlog

from . import __version__
from .config import ConfigurationError, load_config
from .logging_config import setup_default_logging


class GracefulShutdown:
    """Handle graceful shutdown of the server."""

    def __init__(self):
        self.shutdown_event = asyncio.Event()
        self._setup_signal_handlers()

    def _setup_signal_handlers(self):
        """Set up signal handlers for graceful shutdown."""
        if sys.platform != "win32":
            for sig in (signal.SIGTERM, signal.SIGINT):
                signal.signal(sig, self._signal_handler)
        else:
            signal.signal(signal.SIGINT, self._signal_handler)

    def _signal_handler(self, signum, frame):
        logger = structlog.get_logger(__name__)
        logger.info("Shutdown signal received", signal=signum)
        self.shutdown_event.set()

    async def wait_for_shutdown(self):
        """Wait for shutdown signal."""
        await self.shutdown_event.wait()


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Coralogix MCP Server - Model Context Protocol server for Coralogix logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  CORALOGIX_API_KEY       Coralogix API key with DataPrime query access (required)
  CORALOGIX_DOMAIN        Coralogix account domain, e.g. eu2.coralogix.com (required)
  CORALOGIX_TIMEOUT       Request timeout in seconds (default: none)
  CORALOGIX_LOG_LEVEL     Log level (default: INFO)
  CORALOGIX_LOG_FORMAT    Log format: console or json (default: console)

Examples:
  export CORALOGIX_API_KEY=...
  export CORALOGIX_DOMAIN=eu2.coralogix.com
  coralogix-mcp-server

  # Check configuration without starting
  coralogix-mcp-server --validate-only
        """
    )

    parser.add_argument(
        "--transport",
        choices=["stdio"],
        default="stdio",
        help="Transport type for MCP communication (default: stdio)"
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration, then exit"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: CORALOGIX_LOG_LEVEL or INFO)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"coralogix-mcp-server {__version__}"
    )

    return parser.parse_args(argv)


async def main() -> None:
    """Main entry point for the Coralogix MCP server."""
    args = parse_arguments()

    setup_default_logging(level=args.log_level)
    logger = structlog.get_logger(__name__)

    logger.info(
        "Starting Coralogix MCP Server",
        version=__version__,
        transport=args.transport
    )

    from .server import CoralogixMCPServer

    config = None
    config_error = None
    try:
        config = load_config()
        logger.info(
            "Configuration loaded successfully",
            domain=config.domain,
            api_url=config.api_url,
            timeout=config.timeout
        )
    except ConfigurationError as e:
        config_error = e
        logger.error("Configuration error", error=str(e))

    if args.validate_only:
        if config_error is not None:
            sys.exit(1)
        logger.info("Configuration validation completed successfully")
        sys.exit(0)

    shutdown_handler = GracefulShutdown()

    server = CoralogixMCPServer(config, config_error)

    server_task = asyncio.create_task(server.run(args.transport))
    shutdown_task = asyncio.create_task(shutdown_handler.wait_for_shutdown())

    logger.info("Server started successfully", transport=args.transport)

    done, pending = await asyncio.wait(
        [server_task, shutdown_task],
        return_when=asyncio.FIRST_COMPLETED
    )

    for task in pending:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    if server_task in done:
        try:
            await server_task
        except Exception as e:
            logger.error("Server task failed", error=str(e))
            raise

    logger.info("Server shutdown completed")


def cli_main() -> None:
    """CLI entry point that handles asyncio setup."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except Exception:
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
