"""Allow running the server with ``python -m coralogix_mcp``."""

from .main import cli_main

cli_main()
