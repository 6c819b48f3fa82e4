"""Where: src/disconnect/platform/discogs/http_client.py
What: HTTP adapter performing single Discogs API requests through ``requests``.
Why: Decouple network concerns from rate governing and response interpretation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol, cast

import requests

from disconnect.errors import DiscogsError
from disconnect.platform.logging import logger


@dataclass(frozen=True, slots=True)
class RateLimit:
    """Remote quota figures reported by Discogs on every response."""

    limit: int
    used: int
    remaining: int


@dataclass(slots=True)
class HTTPResult:
    """Represent an HTTP response payload relevant to the Discogs client."""

    status: int
    headers: dict[str, str]
    content: bytes
    rate_limit: RateLimit | None = None

    def text(self, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding, errors="replace")


class HTTPClient(Protocol):
    """Protocol for transports able to send one request and return the raw result."""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> HTTPResult:
        ...


class DiscogsHTTPClient:
    """Send requests with a shared ``requests.Session``.

    Transport failures surface as ``DiscogsError`` with status 0; HTTP error
    statuses are returned untouched for the caller to interpret.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: tuple[float, float] = (5.0, 30.0),
    ) -> None:
        self._session: requests.Session = session or requests.Session()
        self._timeout: tuple[float, float] = timeout

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> HTTPResult:
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning(
                "Discogs request error: %s",
                exc,
                extra={"http_event": "http.error", "method": method, "url": url, "error_message": str(exc)},
            )
            raise DiscogsError(0, str(exc)) from exc

        status = int(response.status_code)
        header_items = cast(Iterable[tuple[str, str]], response.headers.items())
        response_headers = {str(key).lower(): str(value) for key, value in header_items}
        rate_limit = parse_rate_limit(response_headers)

        logger.debug(
            "%s %s -> %s",
            method,
            url,
            status,
            extra={
                "http_event": "http.response",
                "method": method,
                "url": url,
                "status": status,
                "ratelimit_remaining": rate_limit.remaining if rate_limit else None,
            },
        )
        return HTTPResult(
            status=status,
            headers=response_headers,
            content=response.content,
            rate_limit=rate_limit,
        )

    def close(self) -> None:
        self._session.close()


def parse_rate_limit(headers: Mapping[str, str]) -> RateLimit | None:
    """Read the ``X-Discogs-Ratelimit*`` headers from lower-cased response headers."""

    raw_limit = headers.get("x-discogs-ratelimit")
    if not raw_limit:
        return None
    try:
        return RateLimit(
            limit=int(raw_limit),
            used=int(headers.get("x-discogs-ratelimit-used", "0")),
            remaining=int(headers.get("x-discogs-ratelimit-remaining", "0")),
        )
    except ValueError:
        logger.debug("Unparseable Discogs rate limit headers: %s", raw_limit)
        return None


__all__ = [
    "DiscogsHTTPClient",
    "HTTPClient",
    "HTTPResult",
    "RateLimit",
    "parse_rate_limit",
]
