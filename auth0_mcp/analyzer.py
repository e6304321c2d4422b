"""
Rule-based checks for a webapp/API pair of Auth0 applications.

Everything here is pure: results depend only on the arguments, so the same
inputs always produce the same issues and recommendations in the same order.
Identifiers and URLs are compared as exact strings.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from auth0_mcp.models import Application

EXPECTED_APP_TYPE = "spa"
REQUIRED_GRANT_TYPE = "authorization_code"


@dataclass(slots=True)
class ConfigurationAnalysis:
    """Outcome of ``analyze_configuration``."""

    webapp_application: dict[str, Any]
    api_application: dict[str, Any]
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def add(self, issue: str, recommendation: str | None = None) -> None:
        self.issues.append(issue)
        if recommendation is not None:
            self.recommendations.append(recommendation)

    def to_dict(self) -> dict[str, Any]:
        return {
            "webapp_application": self.webapp_application,
            "api_application": self.api_application,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
        }


def find_application(
    applications: Iterable[Application],
    client_id: str | None,
) -> Application | None:
    """Return the first application whose client_id equals ``client_id``."""
    if not client_id:
        return None
    return next((app for app in applications if app.client_id == client_id), None)


def _describe_webapp(app: Application | None) -> dict[str, Any]:
    if app is None:
        return {"found": False}
    return {
        "found": True,
        "name": app.name,
        "app_type": app.app_type,
        "callbacks": list(app.callbacks),
        "allowed_origins": list(app.allowed_origins),
        "web_origins": list(app.web_origins),
        "grant_types": list(app.grant_types),
    }


def _describe_api(api_client_id: str | None, app: Application | None) -> dict[str, Any]:
    if app is not None:
        return {
            "found": True,
            "name": app.name,
            "app_type": app.app_type,
            "callbacks": list(app.callbacks),
            "grant_types": list(app.grant_types),
        }
    if api_client_id:
        return {"found": False, "searched_for": api_client_id}
    return {"not_provided": True}


def analyze_configuration(
    webapp_client_id: str,
    webapp_app: Application | None,
    api_client_id: str | None = None,
    api_app: Application | None = None,
    callback_url: str | None = None,
) -> ConfigurationAnalysis:
    """Check a webapp (and optionally its API) for common SPA login misconfigurations."""
    api_client_id = api_client_id or None
    callback_url = callback_url or None
    if api_client_id is None:
        api_app = None

    analysis = ConfigurationAnalysis(
        webapp_application=_describe_webapp(webapp_app),
        api_application=_describe_api(api_client_id, api_app),
    )

    if webapp_app is None:
        analysis.add(f"Webapp client ID {webapp_client_id} not found in Auth0 tenant")
    else:
        if webapp_app.app_type != EXPECTED_APP_TYPE:
            analysis.add(
                f"Webapp application type is '{webapp_app.app_type}', "
                f"should be '{EXPECTED_APP_TYPE}' for Single Page Applications",
                "Change application type to Single Page Application (SPA) in Auth0 dashboard",
            )

        if callback_url is not None and callback_url not in set(webapp_app.callbacks):
            analysis.add(
                f"Callback URL '{callback_url}' not configured in Auth0 application",
                f"Add '{callback_url}' to Allowed Callback URLs in Auth0 dashboard",
            )

        if REQUIRED_GRANT_TYPE not in set(webapp_app.grant_types):
            analysis.add(
                "Authorization Code grant type not enabled",
                "Enable Authorization Code grant type in Auth0 application settings",
            )

    if api_client_id is not None and api_app is None:
        analysis.add(f"API client ID {api_client_id} not found in Auth0 tenant")

    if api_client_id is not None and webapp_client_id == api_client_id:
        analysis.add(
            "Webapp and API are using the same client ID - this may cause authentication issues",
            "Consider using separate Auth0 applications for frontend and backend, "
            "or ensure proper configuration for shared application",
        )

    return analysis
