import json
from collections.abc import AsyncIterator

import httpx
import pytest
from fastmcp import Client
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND

from auth0_mcp.server import ServerApp, build_server
from tests.conftest import token_response

CLIENTS = [
    {
        "client_id": "webapp",
        "name": "Storefront",
        "app_type": "spa",
        "callbacks": ["https://shop/cb"],
        "allowed_origins": [],
        "web_origins": ["https://shop"],
        "grant_types": ["authorization_code"],
    },
]


async def _tenant(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/oauth/token":
        return token_response()
    if request.url.path == "/api/v2/clients":
        return httpx.Response(200, json=CLIENTS)
    if request.url.path == "/api/v2/tenants/settings":
        return httpx.Response(500, text="tenant store unavailable")
    return httpx.Response(404, json={"message": "The client does not exist"})


@pytest.fixture
async def server(settings) -> AsyncIterator[ServerApp]:
    app = build_server(settings)
    app.startup(transport=httpx.MockTransport(_tenant))
    yield app
    await app.ashutdown()


@pytest.mark.anyio
async def test_unknown_tool_is_method_not_found_fault(server: ServerApp) -> None:
    async with Client(server.mcp) as client:
        with pytest.raises(McpError) as exc:
            await client.call_tool_mcp("delete_everything", {})

    assert exc.value.error.code == METHOD_NOT_FOUND
    assert "delete_everything" in exc.value.error.message


@pytest.mark.anyio
async def test_unknown_resource_is_invalid_request_fault(server: ServerApp) -> None:
    async with Client(server.mcp) as client:
        with pytest.raises(McpError) as exc:
            await client.read_resource_mcp("auth0://users")

    assert exc.value.error.code == INVALID_REQUEST


@pytest.mark.anyio
async def test_resource_upstream_failure_is_internal_error_fault(server: ServerApp) -> None:
    async with Client(server.mcp) as client:
        with pytest.raises(McpError) as exc:
            await client.read_resource_mcp("auth0://tenant-settings")

    assert exc.value.error.code == INTERNAL_ERROR
    assert "tenant store unavailable" in exc.value.error.message


@pytest.mark.anyio
async def test_tool_upstream_failure_is_error_flagged_result(server: ServerApp) -> None:
    async with Client(server.mcp) as client:
        result = await client.call_tool_mcp("get_tenant_settings", {})

    assert result.isError is True
    assert "Failed to get tenant settings" in result.content[0].text


@pytest.mark.anyio
async def test_analyze_configuration_over_protocol(server: ServerApp) -> None:
    async with Client(server.mcp) as client:
        result = await client.call_tool_mcp("analyze_configuration", {"webapp_client_id": "webapp"})

    assert result.isError is False
    analysis = json.loads(result.content[0].text)
    assert analysis["issues"] == []
    assert analysis["api_application"] == {"not_provided": True}


@pytest.mark.anyio
async def test_resources_listed_and_readable(server: ServerApp) -> None:
    async with Client(server.mcp) as client:
        resources = await client.list_resources()
        contents = await client.read_resource("auth0://applications")

    assert sorted(str(resource.uri) for resource in resources) == [
        "auth0://applications",
        "auth0://tenant-settings",
    ]
    assert json.loads(contents[0].text) == CLIENTS


@pytest.mark.anyio
async def test_tool_schemas_mark_required_arguments(server: ServerApp) -> None:
    async with Client(server.mcp) as client:
        tools = {tool.name: tool for tool in await client.list_tools()}

    assert set(tools) == {
        "get_application",
        "list_applications",
        "analyze_configuration",
        "get_tenant_settings",
    }
    assert tools["get_application"].inputSchema["required"] == ["client_id"]
    analyze = tools["analyze_configuration"].inputSchema
    assert analyze["required"] == ["webapp_client_id"]
    assert {"api_client_id", "callback_url"} <= set(analyze["properties"])
    assert tools["list_applications"].inputSchema.get("required", []) == []
