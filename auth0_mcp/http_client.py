"""HTTP client factory for the Auth0 Management API."""

import httpx

from auth0_mcp.settings import Settings


def create_management_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build an AsyncClient rooted at the tenant domain.

    ``transport`` lets callers route traffic to an in-process mock service.
    Bearer credentials are attached per request by the Management API client.
    """
    return httpx.AsyncClient(
        base_url=settings.management_api_url,
        timeout=settings.api_timeout,
        transport=transport,
    )
