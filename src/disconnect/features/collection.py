"""Where: src/disconnect/features/collection.py
What: Collection folders and the release instances they contain.
Why: Folder 0 ("All") is public; every other folder needs the owner's token.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from disconnect.errors import AuthError
from disconnect.platform.discogs.auth import LEVEL_USER
from disconnect.util import add_params, escape

from .ports import RequestOptions, RequestPort

PUBLIC_FOLDER: Final[int] = 0
UNCATEGORIZED_FOLDER: Final[int] = 1


def _is_public_folder(folder: int | str) -> bool:
    try:
        return int(folder) == PUBLIC_FOLDER
    except (TypeError, ValueError):
        return False


class Collection:
    """Collection section of a client."""

    def __init__(self, client: RequestPort) -> None:
        self._client: RequestPort = client

    def _folders_path(self, user: str) -> str:
        return f"/users/{escape(user)}/collection/folders"

    def _require_folder_access(self, folder: int | str) -> None:
        if not (self._client.authenticated(LEVEL_USER) or _is_public_folder(folder)):
            raise AuthError()

    def get_folders(self, user: str) -> Any:
        return self._client.get(self._folders_path(user))

    def get_folder(self, user: str, folder: int | str) -> Any:
        self._require_folder_access(folder)
        return self._client.get(f"{self._folders_path(user)}/{folder}")

    def add_folder(self, user: str, name: str) -> Any:
        return self._client.post(
            RequestOptions(url=self._folders_path(user), auth_level=LEVEL_USER), {"name": name}
        )

    def set_folder_name(self, user: str, folder: int | str, name: str) -> Any:
        """Rename a folder. Folders 0 and 1 cannot be renamed."""

        return self._client.post(
            RequestOptions(url=f"{self._folders_path(user)}/{folder}", auth_level=LEVEL_USER),
            {"name": name},
        )

    def delete_folder(self, user: str, folder: int | str) -> Any:
        """Delete a folder. It must be empty."""

        return self._client.delete(
            RequestOptions(url=f"{self._folders_path(user)}/{folder}", auth_level=LEVEL_USER)
        )

    def get_releases(
        self, user: str, folder: int | str, params: Mapping[str, Any] | None = None
    ) -> Any:
        self._require_folder_access(folder)
        return self._client.get(
            add_params(f"{self._folders_path(user)}/{folder}/releases", params)
        )

    def get_release_instances(self, user: str, release: int | str) -> Any:
        return self._client.get(f"/users/{escape(user)}/collection/releases/{release}")

    def add_release(
        self, user: str, release: int | str, folder: int | str = UNCATEGORIZED_FOLDER
    ) -> Any:
        return self._client.post(
            RequestOptions(
                url=f"{self._folders_path(user)}/{folder or UNCATEGORIZED_FOLDER}/releases/{release}",
                auth_level=LEVEL_USER,
            )
        )

    def edit_release(
        self,
        user: str,
        folder: int | str,
        release: int | str,
        instance: int | str,
        data: Mapping[str, Any],
    ) -> Any:
        """Edit an instance, e.g. ``{"rating": 4, "folder_id": 1532}``."""

        return self._client.post(
            RequestOptions(
                url=f"{self._folders_path(user)}/{folder}/releases/{release}/instances/{instance}",
                auth_level=LEVEL_USER,
            ),
            dict(data),
        )

    def remove_release(
        self, user: str, folder: int | str, release: int | str, instance: int | str
    ) -> Any:
        return self._client.delete(
            RequestOptions(
                url=f"{self._folders_path(user)}/{folder}/releases/{release}/instances/{instance}",
                auth_level=LEVEL_USER,
            )
        )


__all__ = ["Collection"]
