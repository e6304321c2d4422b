"""
Auth0 configuration MCP server.

Read-only access to an Auth0 tenant's applications and settings, plus a
diagnostic tool that flags common SPA/API misconfigurations.
"""

__all__ = []
