"""
Summary: Discogs resource sections built on top of the request port.
Why: Keep endpoint path building apart from the request pipeline in ``disconnect.client``.
"""

from __future__ import annotations

from .collection import Collection
from .database import Database
from .lists import List
from .marketplace import Marketplace
from .ports import RequestOptions, RequestPort
from .user import User
from .wantlist import Wantlist

__all__ = [
    "Collection",
    "Database",
    "List",
    "Marketplace",
    "RequestOptions",
    "RequestPort",
    "User",
    "Wantlist",
]
