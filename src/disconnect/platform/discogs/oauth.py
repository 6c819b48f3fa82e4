"""Where: src/disconnect/platform/discogs/oauth.py
What: OAuth 1.0a request-token and access-token flow against Discogs.
Why: Applications acting on behalf of a user need a three-legged token exchange
     before the client can reach level-2 resources.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from urllib.parse import parse_qs

from disconnect.errors import DiscogsError
from disconnect.platform.logging import logger

from .auth import AUTH_METHOD_OAUTH, LEVEL_USER, AuthData, oauth_header
from .http_client import DiscogsHTTPClient, HTTPClient, HTTPResult
from .user_agent import DEFAULT_USER_AGENT


@dataclass(slots=True)
class OAuthConfig:
    """Token endpoints and signing options."""

    request_token_url: str = "https://api.discogs.com/oauth/request_token"
    access_token_url: str = "https://api.discogs.com/oauth/access_token"
    authorize_url: str = "https://www.discogs.com/oauth/authorize"
    signature_method: str = "PLAINTEXT"


class DiscogsOAuth:
    """Drive the OAuth 1.0a dance and sign requests with the resulting tokens.

    Usage::

        oauth = DiscogsOAuth()
        auth = oauth.get_request_token(key, secret, "https://example.com/callback")
        # send the user to auth.authorize_url, receive the verifier
        auth = oauth.get_access_token(verifier)
        client = DiscogsClient(auth=oauth.export())
    """

    def __init__(
        self,
        auth: AuthData | None = None,
        *,
        http_client: HTTPClient | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._config: OAuthConfig = OAuthConfig()
        if auth is not None and auth.method == AUTH_METHOD_OAUTH:
            self._auth: AuthData = replace(auth)
            self._config.signature_method = auth.signature_method
        else:
            self._auth = AuthData(method=AUTH_METHOD_OAUTH)
        self._http: HTTPClient = http_client or DiscogsHTTPClient()
        self._user_agent: str = user_agent

    @property
    def config(self) -> OAuthConfig:
        return self._config

    def set_config(self, **options: str) -> DiscogsOAuth:
        """Override endpoints or the signature method (``PLAINTEXT`` or ``HMAC-SHA1``)."""

        known = {f.name for f in fields(OAuthConfig)}
        for key, value in options.items():
            if key in known:
                setattr(self._config, key, value)
            else:
                logger.debug("Ignoring unknown OAuth option '%s'", key)
        self._auth.signature_method = self._config.signature_method
        return self

    def get_request_token(
        self, consumer_key: str, consumer_secret: str, callback_url: str
    ) -> AuthData:
        """Obtain a request token and the URL the user must visit to authorize it."""

        self._auth.consumer_key = consumer_key
        self._auth.consumer_secret = consumer_secret
        url = self._config.request_token_url
        header = oauth_header(self._auth, "GET", url, callback_uri=callback_url)
        token, token_secret = self._token_pair(self._fetch(url, header))

        self._auth.token = token
        self._auth.token_secret = token_secret
        self._auth.authorize_url = f"{self._config.authorize_url}?oauth_token={token}"
        logger.info("Obtained Discogs OAuth request token")
        return self._auth

    def get_access_token(self, verifier: str) -> AuthData:
        """Exchange the verifier returned by Discogs for a user access token."""

        url = self._config.access_token_url
        header = oauth_header(self._auth, "POST", url, verifier=verifier)
        token, token_secret = self._token_pair(self._fetch(url, header, method="POST"))

        self._auth.token = token
        self._auth.token_secret = token_secret
        self._auth.level = LEVEL_USER
        self._auth.authorize_url = None
        logger.info("Obtained Discogs OAuth access token")
        return self._auth

    def export(self) -> AuthData:
        """Return the auth data, ready to pass to ``DiscogsClient(auth=...)``."""

        return self._auth

    def to_header(self, method: str, url: str) -> str:
        """Return the OAuth ``Authorization`` header for ``method url``."""

        return oauth_header(self._auth, method, url)

    def _fetch(self, url: str, authorization: str, *, method: str = "GET") -> HTTPResult:
        headers = {
            "User-Agent": self._user_agent,
            "Authorization": authorization,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        result = self._http.send(method, url, headers)
        if result.status > 399:
            raise DiscogsError(result.status, result.text().strip() or None)
        return result

    @staticmethod
    def _token_pair(result: HTTPResult) -> tuple[str, str]:
        values = parse_qs(result.text())
        token = values.get("oauth_token", [""])[0]
        token_secret = values.get("oauth_token_secret", [""])[0]
        if not token:
            raise DiscogsError(result.status, "OAuth response did not contain a token")
        return token, token_secret


__all__ = ["DiscogsOAuth", "OAuthConfig"]
