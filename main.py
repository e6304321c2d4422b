"""Entry point for the Auth0 configuration MCP server."""

import logging
import os
import sys

from auth0_mcp.server import build_server
from auth0_mcp.settings import ConfigurationError, Settings


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    # stderr keeps stdout free for the stdio transport.
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Bootstrap and run the MCP server."""
    _configure_logging()
    logger = logging.getLogger("auth0-mcp-server")
    try:
        settings = Settings.load()
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    server = build_server(settings)

    try:
        server.startup()
        if settings.mcp_transport == "sse":
            logger.info(
                "MCP SSE server ready at http://localhost:%s/sse",
                settings.mcp_sse_port,
            )
        else:
            logger.info("Auth0 MCP server running on stdio")
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutdown requested (Ctrl+C).")
    except Exception:
        logger.exception("Server stopped due to an unexpected error.")
        raise
    finally:
        server.shutdown()
        logger.info("Server shutdown complete.")


if __name__ == "__main__":
    main()
