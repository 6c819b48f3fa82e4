"""Where: src/disconnect/platform/discogs/user_agent.py
What: Build the User-Agent string sent to the Discogs API.
Why: Discogs rejects anonymous agents, so every client needs a stable default.
"""

from __future__ import annotations

from typing import Final

CLIENT_NAME: Final[str] = "DisConnectClient"
CLIENT_VERSION: Final[str] = "0.1.0"
CLIENT_HOMEPAGE: Final[str] = "https://github.com/bartve/disconnect"


def format_user_agent(app_name: str, app_version: str, homepage: str) -> str:
    """Return ``App/Version +homepage`` when a homepage is available."""

    stripped = homepage.strip()
    if stripped:
        return f"{app_name}/{app_version} +{stripped}"
    return f"{app_name}/{app_version}"


DEFAULT_USER_AGENT: Final[str] = format_user_agent(CLIENT_NAME, CLIENT_VERSION, CLIENT_HOMEPAGE)


__all__ = [
    "CLIENT_HOMEPAGE",
    "CLIENT_NAME",
    "CLIENT_VERSION",
    "DEFAULT_USER_AGENT",
    "format_user_agent",
]
