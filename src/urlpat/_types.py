"""Core protocols and type aliases for urlpat.

- SearchValue is what a query capture extracts: one string, or a list of
  strings for array captures
- RouteMatcher is the callable port the router consults for each route
"""

from __future__ import annotations

from typing import Any, Protocol, TypeAlias, runtime_checkable

SearchValue: TypeAlias = str | list[str]


@runtime_checkable
class RouteMatcher(Protocol):
    """Match a candidate URL string.

    Returns None for "no match". Anything else is a match and must carry
    ``params``, ``search`` and ``raw``: a UrlMatch, a RouteMatch, or a
    mapping with those keys plus any extra fields.

    A compiled UrlPattern satisfies this protocol.
    """

    def __call__(self, url: str, /) -> Any: ...
