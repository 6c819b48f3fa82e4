"""Where: src/disconnect/features/database.py
What: Artists, releases, masters, labels, images, and search.
Why: Map the Discogs database endpoints onto plain method calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from disconnect.platform.discogs.auth import LEVEL_CONSUMER, LEVEL_USER
from disconnect.util import add_params, escape

from .ports import RequestOptions, RequestPort

MAX_RATING: Final[int] = 5


class Database:
    """Database section of a client."""

    # Release statuses as returned in the ``status`` field.
    STATUS: Final[dict[str, str]] = {
        "accepted": "Accepted",
        "draft": "Draft",
        "deleted": "Deleted",
        "rejected": "Rejected",
    }

    def __init__(self, client: RequestPort) -> None:
        self._client: RequestPort = client

    def get_artist(self, artist: int | str) -> Any:
        return self._client.get(f"/artists/{artist}")

    def get_artist_releases(
        self, artist: int | str, params: Mapping[str, Any] | None = None
    ) -> Any:
        return self._client.get(add_params(f"/artists/{artist}/releases", params))

    def get_release(self, release: int | str) -> Any:
        return self._client.get(f"/releases/{release}")

    def get_release_rating(self, release: int | str, user: str) -> Any:
        return self._client.get(f"/releases/{release}/rating/{escape(user)}")

    def set_release_rating(self, release: int | str, user: str, rating: int | None) -> Any:
        """Set a rating (capped at 5); a falsy rating removes it."""

        url = f"/releases/{release}/rating/{escape(user)}"
        if not rating:
            return self._client.delete(RequestOptions(url=url, auth_level=LEVEL_USER))
        return self._client.put(
            RequestOptions(url=url, auth_level=LEVEL_USER),
            {"rating": min(rating, MAX_RATING)},
        )

    def get_master(self, master: int | str) -> Any:
        return self._client.get(f"/masters/{master}")

    def get_master_versions(
        self, master: int | str, params: Mapping[str, Any] | None = None
    ) -> Any:
        return self._client.get(add_params(f"/masters/{master}/versions", params))

    def get_label(self, label: int | str) -> Any:
        return self._client.get(f"/labels/{label}")

    def get_label_releases(
        self, label: int | str, params: Mapping[str, Any] | None = None
    ) -> Any:
        return self._client.get(add_params(f"/labels/{label}/releases", params))

    def get_image(self, url: str) -> bytes:
        """Download an image. Image hosts are not rate governed, so this skips the queue."""

        return self._client.get(RequestOptions(url=url, queue=False, json=False, encoding=None))

    def search(
        self,
        query: str | Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Search the database.

        Args:
            query: Free-text query, or the params mapping itself.
            params: Search parameters such as ``artist``, ``title`` or ``type``.
        """

        search_params: dict[str, Any] = {}
        if params is not None:
            search_params.update(params)
        elif isinstance(query, Mapping):
            search_params.update(query)
        if isinstance(query, str):
            search_params["q"] = query
        return self._client.get(
            RequestOptions(url=add_params("/database/search", search_params), auth_level=LEVEL_CONSUMER)
        )


__all__ = ["Database"]
