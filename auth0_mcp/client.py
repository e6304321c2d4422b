"""
Auth0 Management API client.

Wraps the shared AsyncClient with the client-credentials token exchange, the
single-slot token cache, and the three read endpoints used by the MCP tools.
Errors are normalized into ``Auth0ApiError`` subclasses with readable messages.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from auth0_mcp.http_client import create_management_client
from auth0_mcp.models import Application, ManagementToken
from auth0_mcp.settings import Settings
from auth0_mcp.token_cache import TokenCache

logger = logging.getLogger(__name__)

_MAX_ERROR_SNIPPET = 512


class Auth0ApiError(RuntimeError):
    """Represents failures when communicating with the Auth0 tenant."""


class AuthenticationError(Auth0ApiError):
    """The client-credentials exchange for a management token failed."""


class UpstreamError(Auth0ApiError):
    """A Management API read call failed or returned an unusable body."""


def _require_non_empty(value: str, field_name: str) -> str:
    """Reject blank request arguments; the value itself is passed on untouched."""
    if not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string.")
    return value


def _error_snippet(response: httpx.Response) -> str:
    snippet = response.text.strip()
    if len(snippet) > _MAX_ERROR_SNIPPET:
        snippet = f"{snippet[:_MAX_ERROR_SNIPPET]}..."
    return snippet


@dataclass(slots=True)
class Auth0ManagementClient:
    """Typed wrapper around the shared AsyncClient."""

    _client: httpx.AsyncClient
    _settings: Settings
    _token_cache: TokenCache = field(default_factory=TokenCache)
    _clock: Callable[[], float] = time.time
    _refresh_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "Auth0ManagementClient":
        """Factory that builds the client from Settings."""
        return cls(create_management_client(settings, transport), settings)

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    @property
    def token_cache(self) -> TokenCache:
        return self._token_cache

    async def get_management_token(self) -> str:
        """Return a valid bearer token, exchanging client credentials if needed."""
        cached = self._token_cache.get(self._clock())
        if cached is not None:
            return cached

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited.
            cached = self._token_cache.get(self._clock())
            if cached is not None:
                return cached
            token = await self._exchange_client_credentials()
            logger.info(
                "Obtained Auth0 management token",
                extra={"domain": self._settings.auth0_domain, "expires_in": token.expires_in},
            )
            return self._token_cache.store(token, self._clock())

    async def list_application_records(self) -> list[dict[str, Any]]:
        """Return the raw application array exactly as Auth0 sent it."""
        logger.debug("Listing Auth0 applications")
        data = await self._authorized_get("/api/v2/clients")
        if not isinstance(data, list):
            raise UpstreamError("Auth0 API returned an unexpected payload for GET /api/v2/clients.")
        return data

    async def list_applications(self) -> list[Application]:
        """Return every application in the tenant as typed records."""
        records = await self.list_application_records()
        try:
            return [Application.model_validate(record) for record in records]
        except ValidationError as exc:
            raise UpstreamError(f"Auth0 API returned malformed application records: {exc}") from exc

    async def get_application(self, client_id: str) -> dict[str, Any]:
        """Retrieve one application by client ID, without trimming any fields."""
        client_id = _require_non_empty(client_id, "client_id")
        logger.debug("Fetching Auth0 application", extra={"client_id": client_id})
        return await self._authorized_get(f"/api/v2/clients/{quote(client_id, safe='')}")

    async def get_tenant_settings(self) -> dict[str, Any]:
        """Retrieve the tenant settings document."""
        logger.debug("Fetching Auth0 tenant settings")
        return await self._authorized_get("/api/v2/tenants/settings")

    async def _exchange_client_credentials(self) -> ManagementToken:
        # The configured AUTH0_AUDIENCE is intentionally not sent here.
        payload = {
            "client_id": self._settings.auth0_client_id,
            "client_secret": self._settings.auth0_client_secret,
            "audience": self._settings.management_audience,
            "grant_type": "client_credentials",
        }
        self._token_cache.clear()
        try:
            data = await self._request("POST", "/oauth/token", json=payload)
            return ManagementToken.model_validate(data)
        except UpstreamError as exc:
            raise AuthenticationError(f"Failed to get Auth0 management token: {exc}") from exc
        except ValidationError as exc:
            logger.error("Auth0 token endpoint returned an unexpected body")
            raise AuthenticationError(
                "Failed to get Auth0 management token: token response was missing required fields."
            ) from exc

    async def _authorized_get(self, path: str) -> Any:
        token = await self.get_management_token()
        return await self._request(
            "GET",
            path,
            headers={"Authorization": f"Bearer {token}"},
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Normalized request handler for all outgoing API calls."""

        def _transport_error(message: str, *, exc: Exception | None = None) -> UpstreamError:
            logger.error(
                message,
                extra={"method": method, "path": path},
                exc_info=exc,
            )
            return UpstreamError(message)

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise _transport_error(
                f"Auth0 API request timed out ({method} {path}).",
                exc=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise _transport_error(
                f"Auth0 API request failed ({method} {path}): {exc!s}",
                exc=exc,
            ) from exc

        if response.is_error:
            snippet = _error_snippet(response)
            logger.warning(
                "Auth0 API responded with error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise UpstreamError(
                f"Auth0 API error ({response.status_code}) during {method} {path}: {snippet or 'no body provided.'}"
            )

        try:
            return response.json()
        except json.JSONDecodeError as exc:
            logger.error(
                "Auth0 API returned invalid JSON",
                extra={"method": method, "path": path},
            )
            raise UpstreamError(f"Auth0 API returned invalid JSON during {method} {path}.") from exc
