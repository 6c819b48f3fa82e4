"""Where: src/disconnect/errors.py
What: Error hierarchy shared by the request pipeline, sections, and governor.
Why: Give callers one base class to catch whether a failure was local or remote.
"""

from __future__ import annotations

from typing import Final, override

QUOTA_EXCEEDED_STATUS: Final[int] = 429


class DiscogsError(Exception):
    """An error reported by the Discogs API or raised on its behalf."""

    def __init__(self, status_code: int | None = None, message: str | None = None) -> None:
        self.status_code: int = status_code if status_code is not None else 404
        self.message: str = message or "Unknown error."
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return type(self).__name__

    @override
    def __str__(self) -> str:
        return f"{self.name}: {self.status_code} {self.message}"


class AuthError(DiscogsError):
    """Raised before any I/O when a resource needs a higher auth level."""

    def __init__(self) -> None:
        super().__init__(401, "You must authenticate to access this resource.")


class QuotaExceededError(DiscogsError):
    """Local 429: the request governor refused to buffer another call."""

    def __init__(self, message: str = "Too many requests") -> None:
        super().__init__(QUOTA_EXCEEDED_STATUS, message)


__all__ = [
    "AuthError",
    "DiscogsError",
    "QUOTA_EXCEEDED_STATUS",
    "QuotaExceededError",
]
