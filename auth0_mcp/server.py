"""
Core server bootstrap for the Auth0 configuration MCP server.

Wires up the FastMCP instance, the Management API client, and the dispatcher
that the registered tools and resources delegate to.
"""

import asyncio
import logging
from typing import Any

import httpx
from fastmcp import FastMCP

from auth0_mcp.client import Auth0ManagementClient
from auth0_mcp.dispatcher import Auth0Dispatcher
from auth0_mcp.settings import Settings
from auth0_mcp.tools import Auth0ToolDependencies, install_protocol_handlers, register_auth0_tools

SERVER_NAME = "auth0-server"


class ServerApp:
    """Owns the MCP application and the lifetime of its upstream client."""

    def __init__(self, settings: Settings) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._state: dict[str, Any] = {"settings": settings}
        self._management_client: Auth0ManagementClient | None = None
        self._tool_dependencies = Auth0ToolDependencies()
        self._mcp_app = FastMCP(
            name=SERVER_NAME,
            instructions=(
                "Inspect Auth0 applications and tenant settings, and diagnose common "
                "SPA/API login misconfigurations."
            ),
        )
        register_auth0_tools(self._mcp_app, self._tool_dependencies)
        install_protocol_handlers(self._mcp_app, self._tool_dependencies)
        self._state["mcp_app"] = self._mcp_app

    def startup(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Create the Management API client and hand it to the tools."""
        self._logger.info(
            "Starting server bootstrap",
            extra={"domain": self._settings.auth0_domain},
        )
        if self._settings.auth0_audience:
            self._logger.info(
                "AUTH0_AUDIENCE is set but ignored; tokens are requested for %s",
                self._settings.management_audience,
            )
        self._management_client = Auth0ManagementClient.from_settings(self._settings, transport)
        self._tool_dependencies.attach_dispatcher(Auth0Dispatcher(self._management_client))
        self._state["initialized"] = True

    def shutdown(self) -> None:
        """Release acquired resources outside of a running event loop."""
        asyncio.run(self.ashutdown())

    async def ashutdown(self) -> None:
        """Release acquired resources from within a running event loop."""
        self._logger.info("Shutting down server bootstrap")
        if self._management_client is not None:
            await self._management_client.aclose()
            self._management_client = None
        self._tool_dependencies.detach_dispatcher()
        self._state.clear()

    def serve_forever(self) -> None:
        """Run the configured FastMCP transport until interrupted."""
        if self._settings.mcp_transport == "sse":
            host = "0.0.0.0"
            port = self._settings.mcp_sse_port
            self._logger.info("Starting SSE transport", extra={"host": host, "port": port})
            self._mcp_app.run(transport="sse", host=host, port=port)
        else:
            self._logger.info("Starting stdio transport")
            self._mcp_app.run(transport="stdio")

    async def serve_sse_async(self, host: str = "0.0.0.0") -> None:
        """Async helper for running the SSE transport (used by smoke tests)."""
        await self._mcp_app.run_http_async(
            transport="sse",
            host=host,
            port=self._settings.mcp_sse_port,
        )

    @property
    def mcp(self) -> FastMCP:
        """Expose the configured FastMCP instance."""
        return self._mcp_app

    @property
    def dispatcher(self) -> Auth0Dispatcher:
        return self._tool_dependencies.require_dispatcher()


def build_server(settings: Settings) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(settings)
