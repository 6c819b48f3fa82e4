"""
Summary: Discogs API client with a process-wide request-rate governor.
Why: Expose the client, its sections, and the error types from one import path.
"""

from __future__ import annotations

from disconnect import util
from disconnect.client import ClientConfig, DiscogsClient
from disconnect.errors import AuthError, DiscogsError, QuotaExceededError
from disconnect.platform.discogs.auth import AuthData
from disconnect.platform.discogs.governor import (
    Admission,
    GovernorConfig,
    GovernorStatus,
    RequestGovernor,
    default_governor,
)
from disconnect.platform.discogs.oauth import DiscogsOAuth
from disconnect.platform.discogs.user_agent import CLIENT_VERSION as __version__

# Short alias matching the names used throughout the documentation.
Client = DiscogsClient

__all__ = [
    "Admission",
    "AuthData",
    "AuthError",
    "Client",
    "ClientConfig",
    "DiscogsClient",
    "DiscogsError",
    "DiscogsOAuth",
    "GovernorConfig",
    "GovernorStatus",
    "QuotaExceededError",
    "RequestGovernor",
    "__version__",
    "default_governor",
    "util",
]
