"""Where: src/disconnect/features/user.py
What: User profiles, inventories, contributions, and access to the per-user sections.
Why: Collection, wantlist, and list sections hang off the user section of a client.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from disconnect.util import add_params, escape

from .collection import Collection
from .lists import List
from .ports import RequestPort
from .wantlist import Wantlist


def get_inventory(client: RequestPort, user: str, params: Mapping[str, Any] | None = None) -> Any:
    """Fetch a seller inventory; shared by the user and marketplace sections."""

    return client.get(add_params(f"/users/{escape(user)}/inventory", params))


class User:
    """User section of a client."""

    def __init__(self, client: RequestPort) -> None:
        self._client: RequestPort = client
        self._collection: Collection | None = None
        self._wantlist: Wantlist | None = None
        self._list: List | None = None

    def get_profile(self, user: str) -> Any:
        return self._client.get(f"/users/{escape(user)}")

    def get_inventory(self, user: str, params: Mapping[str, Any] | None = None) -> Any:
        """Params may hold ``status``, ``sort``, ``sort_order`` and pagination."""

        return get_inventory(self._client, user, params)

    def get_contributions(self, user: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._client.get(add_params(f"/users/{escape(user)}/contributions", params))

    def get_submissions(self, user: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._client.get(add_params(f"/users/{escape(user)}/submissions", params))

    def get_lists(self, user: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._client.get(add_params(f"/users/{escape(user)}/lists", params))

    def get_identity(self) -> Any:
        return self._client.get_identity()

    def collection(self) -> Collection:
        if self._collection is None:
            self._collection = Collection(self._client)
        return self._collection

    def wantlist(self) -> Wantlist:
        if self._wantlist is None:
            self._wantlist = Wantlist(self._client)
        return self._wantlist

    def list(self) -> List:
        if self._list is None:
            self._list = List(self._client)
        return self._list


__all__ = ["User", "get_inventory"]
