"""Environment-driven configuration utilities for the MCP server."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

SUPPORTED_TRANSPORTS = ("stdio", "sse")


class ConfigurationError(ValueError):
    """Raised when the process environment cannot produce valid Settings."""


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigurationError(f"{name} is required but was not provided.")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    auth0_domain: str
    auth0_client_id: str
    auth0_client_secret: str
    # Loaded for completeness only. The token exchange always requests the
    # Management API audience derived from the domain.
    auth0_audience: str | None = None
    api_timeout: float = 30.0
    mcp_transport: str = "stdio"
    mcp_sse_port: int = 8000

    @property
    def management_api_url(self) -> str:
        return f"https://{self.auth0_domain}"

    @property
    def management_audience(self) -> str:
        return f"https://{self.auth0_domain}/api/v2/"

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally.
        """
        load_dotenv()

        auth0_domain = _require_env("AUTH0_DOMAIN")
        auth0_client_id = _require_env("AUTH0_CLIENT_ID")
        auth0_client_secret = _require_env("AUTH0_CLIENT_SECRET")
        auth0_audience = os.getenv("AUTH0_AUDIENCE", "").strip() or None

        api_timeout_raw = os.getenv("API_TIMEOUT", "").strip() or "30"
        try:
            api_timeout = float(api_timeout_raw)
        except ValueError as exc:
            raise ConfigurationError("API_TIMEOUT must be a numeric value.") from exc
        if api_timeout <= 0:
            raise ConfigurationError("API_TIMEOUT must be greater than zero.")

        mcp_transport = (os.getenv("MCP_TRANSPORT", "").strip() or "stdio").lower()
        if mcp_transport not in SUPPORTED_TRANSPORTS:
            raise ConfigurationError(
                f"MCP_TRANSPORT must be one of: {', '.join(SUPPORTED_TRANSPORTS)}."
            )

        mcp_sse_port_raw = os.getenv("MCP_SSE_PORT", "").strip() or "8000"
        try:
            mcp_sse_port = int(mcp_sse_port_raw)
        except ValueError as exc:
            raise ConfigurationError("MCP_SSE_PORT must be an integer.") from exc
        if mcp_sse_port <= 0:
            raise ConfigurationError("MCP_SSE_PORT must be greater than zero.")

        return cls(
            auth0_domain=auth0_domain,
            auth0_client_id=auth0_client_id,
            auth0_client_secret=auth0_client_secret,
            auth0_audience=auth0_audience,
            api_timeout=api_timeout,
            mcp_transport=mcp_transport,
            mcp_sse_port=mcp_sse_port,
        )
