"""urlpat: compiled URL patterns and a first-match-wins router.

All public types are exported from this module for flat imports:

    from urlpat import Router, UrlPattern, compile_pattern
"""

__version__ = "0.1.0"

# Config types, see urlpat._config for details
from urlpat._config import (
    ConfigParseError,
    RouteConfig,
    RouterConfig,
    parse_router_config,
)

# Patterns
from urlpat._pattern import (
    MAX_PATTERN_LENGTH,
    PatternSyntaxError,
    PatternTooLongError,
    QueryCapture,
    UrlMatch,
    UrlPattern,
    UrlPatternError,
    compile_pattern,
)

# Router
from urlpat._router import (
    MAX_ROUTES,
    DuplicateRouteError,
    RouteMatch,
    Router,
    RouterBuilder,
    RouteResultError,
    TooManyRoutesError,
)
from urlpat._types import RouteMatcher, SearchValue
from urlpat._url import BASE_URL, RawUrl, parse_url

__all__ = [
    # Protocols
    "RouteMatcher",
    "SearchValue",
    # URLs
    "BASE_URL",
    "RawUrl",
    "parse_url",
    # Patterns
    "UrlPattern",
    "UrlMatch",
    "QueryCapture",
    "compile_pattern",
    "MAX_PATTERN_LENGTH",
    # Router
    "Router",
    "RouterBuilder",
    "RouteMatch",
    "MAX_ROUTES",
    # Config types
    "RouteConfig",
    "RouterConfig",
    "parse_router_config",
    # Errors
    "UrlPatternError",
    "PatternSyntaxError",
    "PatternTooLongError",
    "TooManyRoutesError",
    "DuplicateRouteError",
    "RouteResultError",
    "ConfigParseError",
]
