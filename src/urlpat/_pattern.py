"""UrlPattern: compile a URL pattern once, match candidate URLs many times.

Pattern grammar, one path segment at a time (empty segments are skipped)::

    foo             literal segment
    {a|b|c}         one of several literals
    :name           named capture, exactly one segment
    :name{a|b|c}    named capture restricted to the literals
    *               any single segment, not captured
    **              one or more segments, not captured

An optional query spec follows ``?``, entries joined by ``&``::

    name            scalar, any value
    name{a|b}       scalar, only the listed values
    name[]          every value, in order
    name{a|b}[]     every listed value, in order

A pattern with a scheme (``http://example.com/:id``) only matches candidates
with the same origin. Patterns without one match any origin.

The path compiles into a single anchored RE2 expression. Every alternation is
over escaped literals, so matching is linear in the candidate length.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, unquote, unquote_plus

import re2

from urlpat._url import (
    canonical_segment,
    encode_segment,
    is_absolute,
    normalize_path,
    parse_url,
)

if TYPE_CHECKING:
    from urlpat._types import SearchValue
    from urlpat._url import RawUrl

logger = logging.getLogger("urlpat")

MAX_PATTERN_LENGTH = 8192

# (capture marker, name, {union})
_SEGMENT_RE = re2.compile(r"^(:)?([^{]+)?(\{[^}]+\})?$")
# (name, {union}, [])
_QUERY_ENTRY_RE = re2.compile(r"^([^{\[\]]+)?(\{[^}]+\})?(\[\])?$")

# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class UrlPatternError(Exception):
    """Base class for pattern compilation and router construction errors."""


class PatternSyntaxError(UrlPatternError, ValueError):
    """A path segment or query entry does not match any known shape.

    ``route`` is set when the pattern belongs to a named router entry.
    """

    def __init__(self, pattern: str, token: str, route: str | None = None) -> None:
        self.pattern = pattern
        self.token = token
        self.route = route
        msg = f"invalid token {token!r} in pattern {pattern!r}"
        if route is not None:
            msg = f"route {route!r}: {msg}"
        super().__init__(msg)


class PatternTooLongError(UrlPatternError):
    """A pattern source exceeds the length limit.

    ``route`` is set when the pattern belongs to a named router entry.
    """

    def __init__(self, length: int, max_: int, route: str | None = None) -> None:
        self.length = length
        self.max = max_
        self.route = route
        msg = f"pattern length {length} exceeds maximum {max_}"
        if route is not None:
            msg = f"route {route!r}: {msg}"
        super().__init__(msg)


# ═══════════════════════════════════════════════════════════════════════════════
# Compiled pattern
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class QueryCapture:
    """A query parameter the pattern extracts.

    An empty ``allowed`` set accepts every value.
    """

    name: str
    is_array: bool = False
    allowed: frozenset[str] = frozenset()

    def accepts(self, value: str) -> bool:
        return not self.allowed or value in self.allowed

    def extract(self, values: list[str]) -> SearchValue | None:
        """Pick this capture's value out of every value given for its name.

        Arrays keep the accepted values in order, possibly none. Scalars take
        the first value and return None if it is not accepted.
        """
        if self.is_array:
            return [v for v in values if self.accepts(v)]
        value = values[0]
        return value if self.accepts(value) else None


@dataclass(frozen=True, slots=True)
class UrlMatch:
    """A successful match: path params, filtered query values, raw URL parts."""

    params: dict[str, str]
    search: dict[str, SearchValue]
    raw: RawUrl


@dataclass(frozen=True, slots=True)
class UrlPattern:
    """A compiled URL pattern.

    Compilation happens at construction time. Two patterns built from the
    same source compare equal.

    >>> p = UrlPattern("/posts/:id?page")
    >>> p.match("/posts/7?page=2").params
    {'id': '7'}

    Raises:
        PatternSyntaxError: If a segment or query entry is malformed.
        PatternTooLongError: If the source exceeds MAX_PATTERN_LENGTH.
    """

    source: str
    regex: str = field(init=False, compare=False)
    path_captures: tuple[tuple[str, int], ...] = field(init=False, compare=False)
    query_captures: tuple[QueryCapture, ...] = field(init=False, compare=False)
    origin: str | None = field(init=False, compare=False)
    _compiled: re2.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.source, str):
            msg = f"pattern must be a str, got {type(self.source).__name__}"
            raise TypeError(msg)
        if len(self.source) > MAX_PATTERN_LENGTH:
            raise PatternTooLongError(len(self.source), MAX_PATTERN_LENGTH)

        try:
            url = parse_url(self.source)
        except ValueError as e:
            raise PatternSyntaxError(self.source, self.source) from e

        regex, path_captures = _compile_path(self.source, url.pathname)
        query_captures = _compile_query(self.source, url.search[1:])

        try:
            compiled = re2.compile(regex)
        except re2.error as e:
            raise PatternSyntaxError(self.source, regex) from e

        object.__setattr__(self, "regex", regex)
        object.__setattr__(self, "path_captures", path_captures)
        object.__setattr__(self, "query_captures", query_captures)
        object.__setattr__(
            self, "origin", url.origin if is_absolute(self.source) else None
        )
        object.__setattr__(self, "_compiled", compiled)

        logger.debug(
            "compiled pattern %r: regex=%r params=%d query=%d origin=%s",
            self.source,
            regex,
            len(path_captures),
            len(query_captures),
            self.origin,
        )

    @property
    def param_names(self) -> tuple[str, ...]:
        """Path parameter names, in declaration order."""
        return tuple(name for name, _ in self.path_captures)

    def match(self, url: str, /) -> UrlMatch | None:
        """Match a candidate URL.

        Returns None when the candidate does not match, including when it
        cannot be parsed at all.
        """
        if not isinstance(url, str):
            return None
        try:
            raw = parse_url(url)
        except ValueError:
            return None

        if self.origin is not None and raw.origin != self.origin:
            return None

        m = self._compiled.search(normalize_path(raw.pathname))
        if m is None:
            return None

        try:
            params = {
                name: unquote(m.group(index), errors="strict")
                for name, index in self.path_captures
            }
        except UnicodeDecodeError:
            return None

        return UrlMatch(params=params, search=self._extract_search(raw), raw=raw)

    def __call__(self, url: str, /) -> UrlMatch | None:
        return self.match(url)

    def _extract_search(self, raw: RawUrl) -> dict[str, SearchValue]:
        if not self.query_captures or not raw.search:
            return {}

        values: dict[str, list[str]] = {}
        for key, value in parse_qsl(raw.search[1:], keep_blank_values=True):
            values.setdefault(key, []).append(value)

        search: dict[str, SearchValue] = {}
        for capture in self.query_captures:
            given = values.get(capture.name)
            if given is None:
                continue
            picked = capture.extract(given)
            if picked is not None:
                search[capture.name] = picked
        return search


def compile_pattern(source: str) -> UrlPattern:
    """Compile a pattern source into a reusable UrlPattern."""
    return UrlPattern(source)


# ═══════════════════════════════════════════════════════════════════════════════
# Compilation
# ═══════════════════════════════════════════════════════════════════════════════


def _compile_path(
    source: str, pathname: str
) -> tuple[str, tuple[tuple[str, int], ...]]:
    """Translate a canonical pattern path into a regex and its capture slots."""
    regex = "^/"
    captures: list[tuple[str, int]] = []

    for part in pathname.split("/"):
        if not part:
            continue

        token = unquote(part)
        m = _SEGMENT_RE.search(token)
        if m is None:
            raise PatternSyntaxError(source, token)
        capture, name, union = m.groups()

        match (capture is not None, name, union):
            case (False, "*", None):
                regex += "[^/]+/"
            case (False, "**", None):
                regex += ".+/"
            case (False, str(), None):
                regex += re2.escape(canonical_segment(part)) + "/"
            case (False, None, str()):
                regex += f"(?:{_alternation(source, union)})/"
            case (True, str(), None):
                regex += "([^/]+)/"
                captures.append((name, len(captures) + 1))
            case (True, str(), str()):
                regex += f"({_alternation(source, union)})/"
                captures.append((name, len(captures) + 1))
            case _:
                raise PatternSyntaxError(source, token)

    return regex + "?$", tuple(captures)


def _compile_query(source: str, query: str) -> tuple[QueryCapture, ...]:
    """Parse the query spec of a pattern into QueryCaptures."""
    captures: list[QueryCapture] = []

    for part in query.split("&"):
        if not part:
            continue

        m = _QUERY_ENTRY_RE.search(part)
        if m is None or m.group(1) is None:
            raise PatternSyntaxError(source, part)
        name, union, array = m.groups()

        allowed: frozenset[str] = frozenset()
        if union is not None:
            allowed = frozenset(unquote_plus(v) for v in _alternatives(source, union))
        captures.append(
            QueryCapture(
                name=unquote_plus(name),
                is_array=array is not None,
                allowed=allowed,
            )
        )

    return tuple(captures)


def _literal(value: str) -> str:
    """Escape a decoded literal in its canonical encoded form."""
    return re2.escape(encode_segment(value))


def _alternatives(source: str, union: str) -> list[str]:
    """Split ``{a|b}`` into its alternatives, none of which may be empty."""
    values = union[1:-1].split("|")
    if not all(values):
        raise PatternSyntaxError(source, union)
    return values


def _alternation(source: str, union: str) -> str:
    """``{a|b}`` -> ``a|b`` with each literal escaped."""
    return "|".join(_literal(v) for v in _alternatives(source, union))
