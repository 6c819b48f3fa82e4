"""Where: src/disconnect/platform/discogs/auth.py
What: Authentication data, access levels, and ``Authorization`` header building.
Why: Discogs accepts personal tokens, consumer key/secret pairs, and OAuth 1.0a;
     the request pipeline only needs one header string regardless of the method.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Final

from oauthlib.oauth1 import SIGNATURE_TYPE_AUTH_HEADER, Client as OAuth1Client

AUTH_METHOD_NONE: Final[str] = "none"
AUTH_METHOD_DISCOGS: Final[str] = "discogs"
AUTH_METHOD_OAUTH: Final[str] = "oauth"

# Access levels: anonymous, consumer key/secret, user token or OAuth access token.
LEVEL_ANONYMOUS: Final[int] = 0
LEVEL_CONSUMER: Final[int] = 1
LEVEL_USER: Final[int] = 2


@dataclass(slots=True)
class AuthData:
    """Credentials attached to a client instance."""

    method: str = AUTH_METHOD_NONE
    level: int = LEVEL_ANONYMOUS
    consumer_key: str | None = None
    consumer_secret: str | None = None
    user_token: str | None = None
    token: str | None = None
    token_secret: str | None = None
    authorize_url: str | None = None
    signature_method: str = "PLAINTEXT"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AuthData:
        """Build auth data, inferring the method and level when they are omitted."""

        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values.setdefault("method", AUTH_METHOD_DISCOGS)
        if "level" not in values:
            if values.get("user_token"):
                values["level"] = LEVEL_USER
            elif values.get("consumer_key") and values.get("consumer_secret"):
                values["level"] = LEVEL_CONSUMER
        return cls(**values)

    def has_credentials(self) -> bool:
        return bool(self.consumer_key or self.user_token)


def oauth_header(
    auth: AuthData,
    method: str,
    url: str,
    *,
    callback_uri: str | None = None,
    verifier: str | None = None,
) -> str:
    """Sign ``method url`` with OAuth 1.0a and return the ``Authorization`` value."""

    client = OAuth1Client(
        auth.consumer_key or "",
        client_secret=auth.consumer_secret,
        resource_owner_key=auth.token,
        resource_owner_secret=auth.token_secret,
        callback_uri=callback_uri,
        verifier=verifier,
        signature_method=auth.signature_method,
        signature_type=SIGNATURE_TYPE_AUTH_HEADER,
    )
    _, headers, _ = client.sign(url, http_method=method.upper())
    return headers["Authorization"]


def authorization_header(auth: AuthData, method: str, url: str) -> str | None:
    """Return the ``Authorization`` header for a request, or None when anonymous."""

    if not auth.has_credentials():
        return None
    if auth.method == AUTH_METHOD_OAUTH:
        return oauth_header(auth, method, url)
    if auth.method == AUTH_METHOD_DISCOGS:
        if auth.user_token:
            return f"Discogs token={auth.user_token}"
        return f"Discogs key={auth.consumer_key}, secret={auth.consumer_secret}"
    return None


__all__ = [
    "AUTH_METHOD_DISCOGS",
    "AUTH_METHOD_NONE",
    "AUTH_METHOD_OAUTH",
    "AuthData",
    "LEVEL_ANONYMOUS",
    "LEVEL_CONSUMER",
    "LEVEL_USER",
    "authorization_header",
    "oauth_header",
]
