"""
Routes named MCP operations and resources onto the Management API client.

Failures travel on one of two channels:

* failures inside a known tool (bad credentials, upstream errors) come back as
  a normal ``ToolResponse`` with ``is_error`` set;
* protocol misuse (unknown tool name, unknown resource URI) raises ``McpError``.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND, ErrorData

from auth0_mcp.analyzer import analyze_configuration, find_application
from auth0_mcp.client import Auth0ApiError, Auth0ManagementClient

logger = logging.getLogger(__name__)

APPLICATIONS_URI = "auth0://applications"
TENANT_SETTINGS_URI = "auth0://tenant-settings"
JSON_MIME_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    uri: str
    name: str
    description: str
    mime_type: str = JSON_MIME_TYPE


RESOURCES: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor(
        uri=APPLICATIONS_URI,
        name="Auth0 Applications",
        description="List of all Auth0 applications in your tenant",
    ),
    ResourceDescriptor(
        uri=TENANT_SETTINGS_URI,
        name="Auth0 Tenant Settings",
        description="Auth0 tenant configuration and settings",
    ),
)


@dataclass(frozen=True, slots=True)
class ToolResponse:
    """Text payload of a tool call, flagged when the operation failed."""

    text: str
    is_error: bool = False


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def _optional_str(arguments: Mapping[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string.")
    return value or None


def _required_str(arguments: Mapping[str, Any], key: str) -> str:
    value = _optional_str(arguments, key)
    if value is None:
        raise ValueError(f"{key} is required.")
    return value


class Auth0Dispatcher:
    """Executes the Auth0 MCP operations against a Management API client."""

    def __init__(self, client: Auth0ManagementClient) -> None:
        self._client = client
        self._tools: dict[str, tuple[str, Callable[[Mapping[str, Any]], Awaitable[str]]]] = {
            "get_application": ("get application", self._get_application),
            "list_applications": ("list applications", self._list_applications),
            "analyze_configuration": ("analyze configuration", self._analyze_configuration),
            "get_tenant_settings": ("get tenant settings", self._get_tenant_settings),
        }

    @property
    def tool_names(self) -> tuple[str, ...]:
        return tuple(self._tools)

    def list_resources(self) -> tuple[ResourceDescriptor, ...]:
        return RESOURCES

    async def read_resource(self, uri: str) -> str:
        """Return the JSON document behind a resource URI."""
        if uri == APPLICATIONS_URI:
            action, fetch = "fetch applications", self._client.list_application_records
        elif uri == TENANT_SETTINGS_URI:
            action, fetch = "fetch tenant settings", self._client.get_tenant_settings
        else:
            raise McpError(ErrorData(code=INVALID_REQUEST, message=f"Unknown resource URI: {uri}"))

        try:
            data = await fetch()
        except Auth0ApiError as exc:
            logger.warning("Resource read failed", extra={"uri": uri}, exc_info=True)
            raise McpError(ErrorData(code=INTERNAL_ERROR, message=f"Failed to {action}: {exc}")) from exc
        return to_json(data)

    def require_tool(self, name: str) -> None:
        """Raise a METHOD_NOT_FOUND fault unless ``name`` is a known tool."""
        if name not in self._tools:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        """Run a named tool; unknown names are a protocol fault."""
        self.require_tool(name)
        action, handler = self._tools[name]

        try:
            text = await handler(arguments or {})
        except (Auth0ApiError, ValueError) as exc:
            logger.warning("%s failed due to API error", name, exc_info=True)
            _log_tool_event(name, "api_error", error=str(exc))
            return ToolResponse(f"Failed to {action}: {exc}", is_error=True)
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s failed unexpectedly", name)
            _log_tool_event(name, "unexpected_error", error=str(exc))
            return ToolResponse(f"Failed to {action}: Unexpected error: {exc}", is_error=True)

        _log_tool_event(name, "success")
        return ToolResponse(text)

    async def _get_application(self, arguments: Mapping[str, Any]) -> str:
        client_id = _required_str(arguments, "client_id")
        return to_json(await self._client.get_application(client_id))

    async def _list_applications(self, arguments: Mapping[str, Any]) -> str:
        applications = await self._client.list_applications()
        return to_json([app.summary() for app in applications])

    async def _analyze_configuration(self, arguments: Mapping[str, Any]) -> str:
        webapp_client_id = _required_str(arguments, "webapp_client_id")
        api_client_id = _optional_str(arguments, "api_client_id")
        callback_url = _optional_str(arguments, "callback_url")

        applications = await self._client.list_applications()
        analysis = analyze_configuration(
            webapp_client_id,
            find_application(applications, webapp_client_id),
            api_client_id,
            find_application(applications, api_client_id),
            callback_url,
        )
        logger.info(
            "Configuration analyzed",
            extra={"webapp_client_id": webapp_client_id, "issue_count": len(analysis.issues)},
        )
        return to_json(analysis.to_dict())

    async def _get_tenant_settings(self, arguments: Mapping[str, Any]) -> str:
        return to_json(await self._client.get_tenant_settings())


def _log_tool_event(tool_name: str, event: str, **fields: object) -> None:
    logger.info(
        "auth0_tool_event",
        extra={"tool": tool_name, "event": event, **fields},
    )
