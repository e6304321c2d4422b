import json
from typing import Any, Callable

import httpx
import pytest

from auth0_mcp.client import Auth0ManagementClient
from auth0_mcp.settings import Settings

TENANT_DOMAIN = "tenant.example.com"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        auth0_domain=TENANT_DOMAIN,
        auth0_client_id="m2m-client",
        auth0_client_secret="m2m-secret",
        auth0_audience="https://api.example.com",
    )


@pytest.fixture
def build_client(settings: Settings) -> Callable[..., Auth0ManagementClient]:
    def _build(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> Auth0ManagementClient:
        async_client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=settings.management_api_url,
        )
        return Auth0ManagementClient(async_client, settings, **kwargs)

    return _build


def token_response(access_token: str = "mgmt-token", expires_in: int = 86400) -> httpx.Response:
    return httpx.Response(
        200,
        json={"access_token": access_token, "token_type": "Bearer", "expires_in": expires_in},
    )


def request_json(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content.decode())
