"""Config types for building a Router from plain data.

Config-driven construction path:
  dict (from JSON/YAML) → parse_router_config() → RouterConfig → Router.from_config()

Two document shapes are accepted. The list form::

    routes:
      - name: home
        pattern: /
      - name: post
        pattern: /posts/:id

and the mapping form, which relies on mappings keeping insertion order::

    routes:
      home: /
      post: /posts/:id

Only pattern sources can be configured; callable routes are code, not config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RouteConfig:
    """A single named route and its pattern source."""

    name: str
    pattern: str


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """An ordered route table. Order is evaluation order."""

    routes: tuple[RouteConfig, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(route.name for route in self.routes)


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════


class ConfigParseError(Exception):
    """Error parsing a config dict into config types."""


def parse_router_config(data: dict[str, Any]) -> RouterConfig:
    """Parse a dict into a RouterConfig.

    Patterns are not compiled here; Router.from_config() does that.

    Raises:
        ConfigParseError: If the dict is malformed or names repeat.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_routes = data.get("routes")
    if raw_routes is None:
        msg = "missing required field 'routes'"
        raise ConfigParseError(msg)

    if isinstance(raw_routes, dict):
        routes = tuple(
            _parse_route({"name": name, "pattern": pattern})
            for name, pattern in raw_routes.items()
        )
    elif isinstance(raw_routes, list):
        routes = tuple(_parse_route(route) for route in raw_routes)
    else:
        msg = f"'routes' must be a list or dict, got {type(raw_routes).__name__}"
        raise ConfigParseError(msg)

    seen: set[str] = set()
    for route in routes:
        if route.name in seen:
            msg = f"duplicate route name: {route.name!r}"
            raise ConfigParseError(msg)
        seen.add(route.name)

    return RouterConfig(routes=routes)


def _parse_route(data: dict[str, Any]) -> RouteConfig:
    """Parse a single route dict."""
    if not isinstance(data, dict):
        msg = f"route must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    for key in ("name", "pattern"):
        if key not in data:
            msg = f"route missing required field {key!r}"
            raise ConfigParseError(msg)
        if not isinstance(data[key], str):
            msg = f"route {key!r} must be a string, got {type(data[key]).__name__}"
            raise ConfigParseError(msg)

    if not data["name"]:
        msg = "route 'name' must be non-empty"
        raise ConfigParseError(msg)

    return RouteConfig(name=data["name"], pattern=data["pattern"])
