"""Where: src/disconnect/features/lists.py
What: User-curated lists.
Why: Lists are addressed by ID rather than through a user name.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from disconnect.util import add_params, escape

from .ports import RequestPort


class List:
    """List section of a client."""

    def __init__(self, client: RequestPort) -> None:
        self._client: RequestPort = client

    def get_items(self, list_id: int | str, params: Mapping[str, Any] | None = None) -> Any:
        return self._client.get(add_params(f"/lists/{escape(str(list_id))}", params))


__all__ = ["List"]
