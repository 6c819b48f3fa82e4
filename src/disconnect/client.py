"""Where: src/disconnect/client.py
What: ``DiscogsClient`` facade with the governor-guarded request pipeline.
Why: Give callers one object that owns configuration, credentials, and sections,
     while every client in the process shares a single request governor.

The pipeline for each call is:

1. check the required auth level (``AuthError`` before any I/O)
2. unless ``queue=False``, wait for admission from the shared ``RequestGovernor``
   (``QuotaExceededError`` when the governor refuses, without a network call)
3. send the request through the ``HTTPClient``
4. map HTTP error statuses to ``DiscogsError`` and decode JSON bodies
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import asdict, dataclass, fields
from typing import Any, TypeVar, cast
from urllib.parse import urlsplit

from disconnect.config import settings
from disconnect.errors import AuthError, DiscogsError, QuotaExceededError
from disconnect.features import Database, Marketplace, RequestOptions, User
from disconnect.platform.discogs.auth import (
    AUTH_METHOD_NONE,
    AuthData,
    authorization_header,
)
from disconnect.platform.discogs.governor import RequestGovernor, default_governor
from disconnect.platform.discogs.http_client import (
    DiscogsHTTPClient,
    HTTPClient,
    HTTPResult,
    RateLimit,
)
from disconnect.platform.discogs.oauth import DiscogsOAuth
from disconnect.platform.discogs.user_agent import CLIENT_VERSION
from disconnect.platform.logging import logger
from disconnect.util import merge

_SectionT = TypeVar("_SectionT")


@dataclass(slots=True)
class ClientConfig:
    """Per-client options; rate-limit fields also drive the shared governor."""

    host: str
    port: int
    user_agent: str
    api_version: str
    output_format: str
    request_limit: int
    request_limit_auth: int
    request_limit_interval: int
    request_limit_queue_size: int
    admission_timeout: float | None

    @classmethod
    def from_settings(cls) -> ClientConfig:
        return cls(
            host=settings.HOST,
            port=settings.PORT,
            user_agent=settings.USER_AGENT,
            api_version=settings.API_VERSION,
            output_format=settings.OUTPUT_FORMAT,
            request_limit=settings.REQUEST_LIMIT,
            request_limit_auth=settings.REQUEST_LIMIT_AUTH,
            request_limit_interval=settings.REQUEST_LIMIT_INTERVAL,
            request_limit_queue_size=settings.REQUEST_LIMIT_QUEUE_SIZE,
            admission_timeout=settings.ADMISSION_TIMEOUT,
        )


_CONFIG_FIELDS = frozenset(f.name for f in fields(ClientConfig))


class DiscogsClient:
    """Client for the Discogs API.

    Args:
        user_agent: Optional User-Agent overriding the configured one.
        auth: Credentials as ``AuthData`` or a mapping such as
            ``{"user_token": "..."}`` or ``{"consumer_key": ..., "consumer_secret": ...}``.
        governor: Request governor to share; defaults to the process-wide one.
        http_client: Transport; defaults to a ``requests`` based client.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        auth: AuthData | Mapping[str, Any] | None = None,
        *,
        governor: RequestGovernor | None = None,
        http_client: HTTPClient | None = None,
    ) -> None:
        self._config: ClientConfig = ClientConfig.from_settings()
        if user_agent:
            self._config.user_agent = user_agent

        if isinstance(auth, AuthData):
            self._auth: AuthData = auth
        elif auth is not None:
            self._auth = AuthData.from_mapping(auth)
        else:
            self._auth = AuthData()

        self._governor: RequestGovernor = governor or default_governor()
        self._http: HTTPClient = http_client or DiscogsHTTPClient()
        self._sections: dict[type[Any], Any] = {}
        self._last_rate_limit: RateLimit | None = None

        # Authenticated clients raise the shared quota, anonymous ones lower it.
        self._governor.reconfigure(max_calls_per_interval=self._quota())

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def governor(self) -> RequestGovernor:
        return self._governor

    @property
    def last_rate_limit(self) -> RateLimit | None:
        """Remote quota figures from the most recent response, when Discogs sent them."""

        return self._last_rate_limit

    def _quota(self) -> int:
        if self._auth.method != AUTH_METHOD_NONE and self.authenticated():
            return self._config.request_limit_auth
        return self._config.request_limit

    def set_config(self, **options: Any) -> DiscogsClient:
        """Override configuration, e.g. ``host`` for proxies, and reconfigure the governor."""

        unknown = sorted(set(options) - _CONFIG_FIELDS)
        if unknown:
            logger.warning("Ignoring unknown client options: %s", ", ".join(unknown))
        merged = merge(asdict(self._config), {k: v for k, v in options.items() if k in _CONFIG_FIELDS})
        self._config = ClientConfig(**merged)
        self._governor.reconfigure(
            max_buffered_requests=self._config.request_limit_queue_size,
            max_calls_per_interval=self._quota(),
            interval_ms=self._config.request_limit_interval,
        )
        return self

    def authenticated(self, level: int = 0) -> bool:
        """Return whether the client is authenticated for at least ``level``."""

        return self._auth.level > 0 and self._auth.level >= level

    def get_identity(self) -> Any:
        return self.get(RequestOptions(url="/oauth/identity", auth_level=2))

    def about(self) -> Any:
        """Fetch the API root and attach information about this client."""

        data = self.get("/")
        if isinstance(data, dict):
            cast(dict[str, Any], data)["disconnect"] = {
                "version": CLIENT_VERSION,
                "user_agent": self._config.user_agent,
                "auth_method": self._auth.method,
                "auth_level": self._auth.level,
            }
        return data

    def get(self, options: RequestOptions | str) -> Any:
        return self._request(self._options(options))

    def post(self, options: RequestOptions | str, data: Any = None) -> Any:
        request = self._options(options)
        request.method = "POST"
        request.data = data
        return self._request(request)

    def put(self, options: RequestOptions | str, data: Any = None) -> Any:
        request = self._options(options)
        request.method = "PUT"
        request.data = data
        return self._request(request)

    def delete(self, options: RequestOptions | str) -> Any:
        request = self._options(options)
        request.method = "DELETE"
        return self._request(request)

    def oauth(self) -> DiscogsOAuth:
        """Return an OAuth helper bound to this client's credentials."""

        return DiscogsOAuth(self._auth, http_client=self._http, user_agent=self._config.user_agent)

    def _section(self, section_type: type[_SectionT]) -> _SectionT:
        section = self._sections.get(section_type)
        if section is None:
            section = section_type(self)  # pyright: ignore[reportCallIssue]
            self._sections[section_type] = section
        return cast(_SectionT, section)

    def database(self) -> Database:
        return self._section(Database)

    def marketplace(self) -> Marketplace:
        return self._section(Marketplace)

    def user(self) -> User:
        return self._section(User)

    @staticmethod
    def _options(options: RequestOptions | str) -> RequestOptions:
        if isinstance(options, str):
            return RequestOptions(url=options)
        return RequestOptions(**{f.name: getattr(options, f.name) for f in fields(options)})

    def _request(self, options: RequestOptions) -> Any:
        if options.auth_level and not self.authenticated(options.auth_level):
            raise AuthError()
        if options.queue:
            self._wait_for_admission()
        return self._decode(options, self._send(options))

    def _wait_for_admission(self) -> None:
        """Block until the governor admits this call; rejection raises ``QuotaExceededError``."""

        future = self._governor.admit()
        try:
            _ = future.result(timeout=self._config.admission_timeout)
        except FutureTimeoutError:
            if future.cancel():
                logger.warning(
                    "Gave up waiting %.1fs for a request slot",
                    self._config.admission_timeout,
                )
                raise QuotaExceededError("Timed out waiting for a request slot") from None
            # Released while timing out; the slot is ours.
            _ = future.result()

    def _url(self, path: str) -> str:
        parts = urlsplit(path)
        if parts.scheme and parts.netloc:
            return path
        netloc = self._config.host
        if self._config.port != 443:
            netloc = f"{netloc}:{self._config.port}"
        if not path.startswith("/"):
            path = f"/{path}"
        return f"https://{netloc}{path}"

    def _send(self, options: RequestOptions) -> HTTPResult:
        url = self._url(options.url)
        config = self._config
        headers = {
            "User-Agent": config.user_agent,
            "Accept": (
                "application/json,"
                f"application/vnd.discogs.{config.api_version}.{config.output_format}+json,"
                "application/octet-stream"
            ),
            "Accept-Encoding": "gzip,deflate",
        }

        body: bytes | None = None
        if options.data is not None:
            payload = options.data if isinstance(options.data, str) else json.dumps(options.data)
            body = payload.encode("utf-8")
            headers["Content-Type"] = "application/json"

        authorization = authorization_header(self._auth, options.method, url)
        if authorization:
            headers["Authorization"] = authorization

        result = self._http.send(options.method, url, headers, body)
        if result.rate_limit is not None:
            self._last_rate_limit = result.rate_limit
        return result

    @staticmethod
    def _error_message(text: str) -> str:
        try:
            payload = json.loads(text)
        except ValueError:
            return ""
        if isinstance(payload, dict):
            message = cast(dict[str, Any], payload).get("message")
            if isinstance(message, str):
                return message
        return ""

    def _raise_for_status(self, options: RequestOptions, result: HTTPResult, text: str) -> None:
        if result.status <= 399:
            return
        message = self._error_message(text)
        logger.warning(
            "Discogs HTTP error: status=%s %s",
            result.status,
            message,
            extra={
                "http_event": "http.error",
                "method": options.method,
                "url": options.url,
                "status": result.status,
                "error_message": message,
            },
        )
        raise DiscogsError(result.status, message)

    def _decode(self, options: RequestOptions, result: HTTPResult) -> Any:
        if options.encoding is None:
            self._raise_for_status(options, result, result.text())
            return result.content

        text = result.text(options.encoding)
        self._raise_for_status(options, result, text)

        if not options.json or not text or text.startswith("<!"):
            return text or None
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DiscogsError(result.status, f"Malformed JSON response: {exc}") from exc


__all__ = ["ClientConfig", "DiscogsClient"]
