"""Where: src/disconnect/features/wantlist.py
What: A user's wantlist.
Why: Map the wantlist endpoints onto plain method calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from disconnect.platform.discogs.auth import LEVEL_USER
from disconnect.util import add_params, escape

from .ports import RequestOptions, RequestPort


class Wantlist:
    """Wantlist section of a client."""

    def __init__(self, client: RequestPort) -> None:
        self._client: RequestPort = client

    def get_releases(self, user: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._client.get(add_params(f"/users/{escape(user)}/wants", params))

    def add_release(
        self, user: str, release: int | str, data: Mapping[str, Any] | None = None
    ) -> Any:
        """Add a release, optionally with ``notes`` and ``rating``."""

        return self._client.put(
            RequestOptions(url=f"/users/{escape(user)}/wants/{release}", auth_level=LEVEL_USER),
            dict(data) if data is not None else None,
        )

    def edit_notes(self, user: str, release: int | str, data: Mapping[str, Any]) -> Any:
        return self._client.put(
            RequestOptions(url=f"/users/{escape(user)}/wants/{release}", auth_level=LEVEL_USER),
            dict(data),
        )

    def remove_release(self, user: str, release: int | str) -> Any:
        return self._client.delete(
            RequestOptions(url=f"/users/{escape(user)}/wants/{release}", auth_level=LEVEL_USER)
        )


__all__ = ["Wantlist"]
