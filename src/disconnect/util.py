"""Where: src/disconnect/util.py
What: Small string and mapping helpers used when building API paths.
Why: Keep URL formatting rules in one place for every section class.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping
from typing import Any, cast
from urllib.parse import quote, urlencode

_VARIATION_SUFFIX = re.compile(r"\s\(\d+\)$")
# Characters a query-string escaper leaves untouched besides the RFC 3986 unreserved set.
_ESCAPE_SAFE = "!'()*"


def strip_variation(name: str) -> str:
    """Strip the trailing disambiguation number: ``Artist (2)`` -> ``Artist``."""

    return _VARIATION_SUFFIX.sub("", name)


def add_params(url: str, params: Mapping[str, Any] | None) -> str:
    """Append ``params`` to ``url`` as a query string, honouring an existing one."""

    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params, doseq=True, quote_via=quote)}"


def escape(value: str) -> str:
    """Percent-encode ``value`` for use in a path segment or query string."""

    return quote(str(value), safe=_ESCAPE_SAFE)


def merge(target: MutableMapping[str, Any], source: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Deep merge ``source`` into ``target`` in place and return ``target``.

    Nested mappings are merged recursively. Lists replace by index, so a
    shorter source list overwrites only the leading items of the target.
    """

    for key, value in source.items():
        if isinstance(value, Mapping):
            existing = target.get(key)
            sub_target: MutableMapping[str, Any] = (
                cast(MutableMapping[str, Any], existing)
                if isinstance(existing, MutableMapping)
                else {}
            )
            target[key] = merge(sub_target, cast(Mapping[str, Any], value))
        elif isinstance(value, list):
            existing = target.get(key)
            merged: list[Any] = list(cast(list[Any], existing)) if isinstance(existing, list) else []
            for index, item in enumerate(cast(list[Any], value)):
                if index < len(merged):
                    merged[index] = item
                else:
                    merged.append(item)
            target[key] = merged
        else:
            target[key] = value
    return target


__all__ = ["add_params", "escape", "merge", "strip_variation"]
