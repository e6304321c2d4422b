"""MCP tool and resource registrations for the Auth0 server."""

import logging
from dataclasses import dataclass
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp import types
from pydantic import Field

from auth0_mcp.dispatcher import JSON_MIME_TYPE, Auth0Dispatcher

logger = logging.getLogger(__name__)


@dataclass
class Auth0ToolDependencies:
    """Runtime dependencies required by the MCP tools."""

    dispatcher: Auth0Dispatcher | None = None

    def attach_dispatcher(self, dispatcher: Auth0Dispatcher) -> None:
        self.dispatcher = dispatcher

    def detach_dispatcher(self) -> None:
        self.dispatcher = None

    def require_dispatcher(self) -> Auth0Dispatcher:
        if self.dispatcher is None:
            raise RuntimeError("Auth0 dispatcher is not initialized.")
        return self.dispatcher


def register_auth0_tools(
    mcp: FastMCP,
    dependencies: Auth0ToolDependencies,
) -> None:
    """Register MCP tools that proxy to the Auth0 Management API."""

    async def _call(tool_name: str, arguments: dict[str, Any]) -> str:
        response = await dependencies.require_dispatcher().call_tool(tool_name, arguments)
        if response.is_error:
            raise ToolError(response.text)
        return response.text

    @mcp.tool(
        name="get_application",
        description="Get details of a specific Auth0 application by client ID",
    )
    async def get_application(
        client_id: Annotated[str, Field(description="The client ID of the Auth0 application")],
    ) -> str:
        return await _call("get_application", {"client_id": client_id})

    @mcp.tool(
        name="list_applications",
        description="List all Auth0 applications in the tenant",
    )
    async def list_applications() -> str:
        return await _call("list_applications", {})

    @mcp.tool(
        name="analyze_configuration",
        description="Analyze Auth0 configuration for common issues",
    )
    async def analyze_configuration(
        webapp_client_id: Annotated[str, Field(description="Client ID used by the webapp")],
        api_client_id: Annotated[str | None, Field(description="Client ID used by the API")] = None,
        callback_url: Annotated[str | None, Field(description="Expected callback URL")] = None,
    ) -> str:
        return await _call(
            "analyze_configuration",
            {
                "webapp_client_id": webapp_client_id,
                "api_client_id": api_client_id,
                "callback_url": callback_url,
            },
        )

    @mcp.tool(
        name="get_tenant_settings",
        description="Get Auth0 tenant settings and configuration",
    )
    async def get_tenant_settings() -> str:
        return await _call("get_tenant_settings", {})

    logger.info("Auth0 MCP tools registered.")


def install_protocol_handlers(
    mcp: FastMCP,
    dependencies: Auth0ToolDependencies,
) -> None:
    """
    Serve the Auth0 resources and tool-name checks from the low-level MCP server.

    FastMCP turns exceptions raised inside its own tool and resource handlers
    into generic results, which would hide the ``McpError`` codes raised by the
    dispatcher. Handlers installed on the underlying ``mcp`` server let those
    faults reach the client as JSON-RPC errors.
    """
    low_level = mcp._mcp_server
    handlers = low_level.request_handlers
    fastmcp_call_tool = handlers[types.CallToolRequest]

    async def _list_resources(request: types.ListResourcesRequest) -> types.ServerResult:
        resources = [
            types.Resource(
                uri=descriptor.uri,
                name=descriptor.name,
                description=descriptor.description,
                mimeType=descriptor.mime_type,
            )
            for descriptor in dependencies.require_dispatcher().list_resources()
        ]
        return types.ServerResult(types.ListResourcesResult(resources=resources))

    async def _read_resource(request: types.ReadResourceRequest) -> types.ServerResult:
        uri = str(request.params.uri)
        text = await dependencies.require_dispatcher().read_resource(uri)
        return types.ServerResult(
            types.ReadResourceResult(
                contents=[
                    types.TextResourceContents(uri=request.params.uri, mimeType=JSON_MIME_TYPE, text=text)
                ]
            )
        )

    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        dependencies.require_dispatcher().require_tool(request.params.name)
        return await fastmcp_call_tool(request)

    handlers[types.ListResourcesRequest] = _list_resources
    handlers[types.ReadResourceRequest] = _read_resource
    handlers[types.CallToolRequest] = _call_tool

    logger.info("Auth0 MCP resource and protocol handlers installed.")
