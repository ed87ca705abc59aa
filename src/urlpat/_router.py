"""Router: named routes with first-match-wins semantics.

Each route is a pattern source (compiled when the router is built) or any
RouteMatcher callable. Routes are tried in declaration order and the first
non-None result wins; later routes are never consulted. There is no
specificity scoring, so put ``/users/profile`` before ``/users/:id``.

Example::

    router = Router({
        "home": "/",
        "post": "/posts/:id",
        "numeric_post": lambda url: ...,
    })
    match = router.match("/posts/7")
    match.name, match.params  # ("post", {"id": "7"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from urlpat._pattern import (
    PatternSyntaxError,
    PatternTooLongError,
    UrlMatch,
    UrlPattern,
    UrlPatternError,
)
from urlpat._types import RouteMatcher

if TYPE_CHECKING:
    from urlpat._config import RouterConfig
    from urlpat._url import RawUrl

logger = logging.getLogger("urlpat")

MAX_ROUTES = 256

# Keys of a mapping result that are not carried into RouteMatch.extra.
_RESERVED_KEYS = frozenset({"name", "params", "search", "raw"})

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class TooManyRoutesError(UrlPatternError):
    """Route table is larger than MAX_ROUTES."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many routes: {count} exceeds maximum {max_}")


class DuplicateRouteError(UrlPatternError):
    """A route name was registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"duplicate route name: {name!r}")


class RouteResultError(UrlPatternError, TypeError):
    """A custom route matcher returned something that is not a match."""

    def __init__(self, route: str, result: object) -> None:
        self.route = route
        self.result = result
        super().__init__(
            f"route {route!r} returned {type(result).__name__}; expected "
            "None, UrlMatch, RouteMatch or a mapping with 'params', 'search' and 'raw'"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A router match: the route name plus the matcher's result.

    ``params`` and ``search`` come from a UrlPattern as strings; custom
    matchers may put anything there. Extra fields a custom matcher returned
    are kept in ``extra``.
    """

    name: str
    params: Mapping[str, Any]
    search: Mapping[str, Any]
    raw: RawUrl
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


def _to_route_match(name: str, result: object) -> RouteMatch:
    """Merge the route name into a matcher result."""
    match result:
        case UrlMatch(params=params, search=search, raw=raw):
            return RouteMatch(name=name, params=params, search=search, raw=raw)
        case RouteMatch():
            return replace(result, name=name)
        case Mapping():
            try:
                params, search, raw = result["params"], result["search"], result["raw"]
            except KeyError as e:
                raise RouteResultError(name, result) from e
            extra = {k: v for k, v in result.items() if k not in _RESERVED_KEYS}
            return RouteMatch(
                name=name,
                params=params,
                search=search,
                raw=raw,
                extra=MappingProxyType(extra),
            )
        case _:
            raise RouteResultError(name, result)


# ═══════════════════════════════════════════════════════════════════════════════
# Router
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Router:
    """Ordered table of named routes, evaluated first-match-wins.

    String entries are compiled at construction time. An empty router never
    matches.

    Raises:
        PatternSyntaxError: A pattern is malformed; ``route`` names the entry.
        PatternTooLongError: A pattern is too long; ``route`` names the entry.
        TooManyRoutesError: More than MAX_ROUTES entries.
        TypeError: An entry is neither a str nor callable.
    """

    routes: Mapping[str, str | RouteMatcher]
    _table: tuple[tuple[str, RouteMatcher], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if len(self.routes) > MAX_ROUTES:
            raise TooManyRoutesError(len(self.routes), MAX_ROUTES)

        table = tuple(
            (name, _prepare(name, target)) for name, target in self.routes.items()
        )
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))
        object.__setattr__(self, "_table", table)

        logger.debug("built router with %d routes", len(table))

    @classmethod
    def from_config(cls, config: RouterConfig) -> Router:
        """Build a Router from a parsed RouterConfig."""
        return cls({route.name: route.pattern for route in config.routes})

    @property
    def names(self) -> tuple[str, ...]:
        """Route names in evaluation order."""
        return tuple(name for name, _ in self._table)

    def get(self, name: str) -> RouteMatcher | None:
        """Return the compiled pattern or callable registered under *name*."""
        for route_name, matcher in self._table:
            if route_name == name:
                return matcher
        return None

    def match(self, url: str, /) -> RouteMatch | None:
        """Return the first route that matches *url*, or None.

        INV: First-match-wins, later routes are never consulted.
        """
        for name, matcher in self._table:
            result = matcher(url)
            if result is not None:
                return _to_route_match(name, result)
        return None

    def __call__(self, url: str, /) -> RouteMatch | None:
        return self.match(url)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, name: object) -> bool:
        return name in self.routes


def _prepare(name: str, target: str | RouteMatcher) -> RouteMatcher:
    """Compile a pattern source, or pass a callable through."""
    if isinstance(target, str):
        try:
            return UrlPattern(target)
        except PatternSyntaxError as e:
            raise PatternSyntaxError(e.pattern, e.token, route=name) from e
        except PatternTooLongError as e:
            raise PatternTooLongError(e.length, e.max, route=name) from e
    if isinstance(target, RouteMatcher):
        return target
    msg = f"route {name!r} must be a pattern str or callable, got {type(target).__name__}"
    raise TypeError(msg)


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════


class RouterBuilder:
    """Builder for constructing a Router one route at a time.

    Register routes in evaluation order, then call build() to produce an
    immutable Router.
    """

    def __init__(self) -> None:
        self._routes: dict[str, str | RouteMatcher] = {}

    def route(self, name: str, target: str | RouteMatcher) -> RouterBuilder:
        """Append a route. Names must be unique."""
        if name in self._routes:
            raise DuplicateRouteError(name)
        self._routes[name] = target
        return self

    def build(self) -> Router:
        """Compile the registered routes into a Router."""
        return Router(dict(self._routes))
