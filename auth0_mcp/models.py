"""Typed views over Auth0 Management API payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Fields returned by the list_applications tool.
APPLICATION_SUMMARY_FIELDS = frozenset(
    {
        "client_id",
        "name",
        "app_type",
        "callbacks",
        "allowed_origins",
        "web_origins",
        "grant_types",
    }
)


class JwtConfiguration(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    alg: str | None = None
    lifetime_in_seconds: int | None = None


class Application(BaseModel):
    """Snapshot of an Auth0 application (client) record."""

    model_config = ConfigDict(extra="allow", frozen=True)

    client_id: str
    name: str = ""
    app_type: str | None = None
    callbacks: list[str] = Field(default_factory=list)
    allowed_origins: list[str] = Field(default_factory=list)
    web_origins: list[str] = Field(default_factory=list)
    allowed_logout_urls: list[str] = Field(default_factory=list)
    grant_types: list[str] = Field(default_factory=list)
    jwt_configuration: JwtConfiguration | None = None

    def summary(self) -> dict[str, Any]:
        # Fields Auth0 omitted stay omitted.
        return self.model_dump(include=set(APPLICATION_SUMMARY_FIELDS), exclude_unset=True)


class ManagementToken(BaseModel):
    """Response body of the client-credentials exchange."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
