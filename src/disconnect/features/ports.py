"""Ports for Discogs resource sections.

Where: features/ports.py
What: Request options record and the request protocol every section depends on.
Why: Sections only build paths; the client behind the port owns auth, rate governing, and I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(slots=True)
class RequestOptions:
    """One API call as seen by the request pipeline.

    ``url`` may be a path relative to the API host or an absolute URL.
    ``encoding=None`` returns the raw response bytes.
    """

    url: str
    method: str = "GET"
    data: Any = None
    auth_level: int = 0
    queue: bool = True
    json: bool = True
    encoding: str | None = "utf-8"


@runtime_checkable
class RequestPort(Protocol):
    """The client surface sections rely on."""

    def get(self, options: RequestOptions | str) -> Any:
        """Perform a GET request."""
        ...

    def post(self, options: RequestOptions | str, data: Any = None) -> Any:
        """Perform a POST request with a JSON body."""
        ...

    def put(self, options: RequestOptions | str, data: Any = None) -> Any:
        """Perform a PUT request with a JSON body."""
        ...

    def delete(self, options: RequestOptions | str) -> Any:
        """Perform a DELETE request."""
        ...

    def authenticated(self, level: int = 0) -> bool:
        """Return whether the client holds credentials of at least ``level``."""
        ...

    def get_identity(self) -> Any:
        """Return the identity of the authenticated user."""
        ...


__all__ = ["RequestOptions", "RequestPort"]
