"""Single-slot cache for the Management API bearer token."""

from dataclasses import dataclass

from auth0_mcp.models import ManagementToken

# Seconds shaved off the provider-declared lifetime.
EXPIRY_SAFETY_MARGIN = 60


@dataclass(slots=True)
class TokenCache:
    """
    Holds at most one management token and the instant it stops being usable.

    Every method takes ``now`` (epoch seconds) explicitly so expiry decisions
    do not depend on the wall clock.
    """

    _token: str | None = None
    _expires_at: float = 0.0

    def get(self, now: float) -> str | None:
        """Return the cached token, or None when absent or expired."""
        if self._token is None:
            return None
        if now >= self._expires_at:
            self.clear()
            return None
        return self._token

    def store(self, token: ManagementToken, now: float) -> str:
        self._token = token.access_token
        self._expires_at = now + token.expires_in - EXPIRY_SAFETY_MARGIN
        return self._token

    def clear(self) -> None:
        self._token = None
        self._expires_at = 0.0

    @property
    def expires_at(self) -> float:
        return self._expires_at
