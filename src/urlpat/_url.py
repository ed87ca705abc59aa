"""URL component breakdown for patterns and candidates.

Relative strings are resolved against a fixed base (``BASE_URL``) so that
``/posts/1`` and ``http://example.com/posts/1`` parse into the same shape.
The base is a resolution anchor only: it shows up in ``RawUrl`` for relative
candidates but never in a compiled pattern.

Paths are canonicalized: characters outside the path-safe set are
percent-encoded, existing ``%XX`` escapes are kept, and dot segments are
removed. Empty segments are preserved. Before matching, each segment is
re-encoded from its decoded form so that differently escaped spellings of the
same segment compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

BASE_URL = "http://localhost"

_BASE = urlsplit(BASE_URL)

# Schemes with a tuple origin, and their default ports.
SPECIAL_SCHEMES: dict[str, int] = {
    "ftp": 21,
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
}

# Sub-delims plus ":" and "@" (RFC 3986 pchar), and the characters browsers
# leave alone in paths. "/" and "%" are added for whole paths only.
_SEGMENT_SAFE = "!$&'()*+,;=:@[]|^"
_PATH_SAFE = _SEGMENT_SAFE + "/%"


def encode_segment(value: str) -> str:
    """Percent-encode a decoded segment into its canonical path form.

    ``/`` and ``%`` are encoded, so the result is always a single segment.
    """
    return quote(value, safe=_SEGMENT_SAFE)


def canonical_path(path: str) -> str:
    """Percent-encode unsafe characters in a path, keeping existing escapes."""
    return quote(path, safe=_PATH_SAFE)


def canonical_segment(segment: str) -> str:
    """Re-encode one raw segment so every spelling of it compares equal.

    ``%2f`` and ``%2F`` both become ``%2F``, ``%41`` becomes ``A`` and a lone
    ``%`` becomes ``%25``. Segments whose escapes are not valid UTF-8 are
    returned unchanged.
    """
    try:
        return encode_segment(unquote(segment, errors="strict"))
    except UnicodeDecodeError:
        return segment


def normalize_path(path: str) -> str:
    """Apply canonical_segment to every segment of a path."""
    return "/".join(canonical_segment(s) for s in path.split("/"))


def is_absolute(url: str) -> bool:
    """True if *url* carries its own scheme."""
    try:
        return bool(urlsplit(url).scheme)
    except ValueError:
        return False


@dataclass(frozen=True, slots=True)
class RawUrl:
    """The standard components of a parsed URL.

    Field names follow the WHATWG URL interface. Empty components are empty
    strings; ``search`` and ``hash`` keep their leading ``?`` and ``#``.
    """

    protocol: str
    username: str
    password: str
    host: str
    hostname: str
    port: str
    origin: str
    pathname: str
    search: str
    hash: str
    href: str

    @property
    def scheme(self) -> str:
        """Scheme without the trailing colon."""
        return self.protocol[:-1]


def parse_url(url: str) -> RawUrl:
    """Parse *url*, resolving it against ``BASE_URL`` when relative.

    Raises:
        ValueError: If the URL cannot be parsed (bad IPv6 host, bad port).
    """
    parts = urlsplit(url)

    if parts.scheme:
        scheme, netloc = parts.scheme.lower(), parts.netloc
    elif url.startswith("//"):
        scheme, netloc = _BASE.scheme, parts.netloc
    else:
        scheme, netloc = _BASE.scheme, _BASE.netloc

    # Re-split so username/password/hostname/port come from the resolved netloc.
    authority = urlsplit(f"{scheme}://{netloc}") if netloc else None
    hostname = (authority.hostname or "") if authority else ""
    port_number = authority.port if authority else None
    username = (authority.username or "") if authority else ""
    password = (authority.password or "") if authority else ""

    special = scheme in SPECIAL_SCHEMES
    port = ""
    if port_number is not None and port_number != SPECIAL_SCHEMES.get(scheme):
        port = str(port_number)

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port:
        host = f"{host}:{port}"

    path = parts.path
    if not parts.scheme and not path.startswith("/"):
        path = "/" + path
    if special and not path:
        path = "/"
    pathname = canonical_path(_remove_dot_segments(path))

    search = f"?{parts.query}" if parts.query else ""
    fragment = f"#{parts.fragment}" if parts.fragment else ""

    origin = f"{scheme}://{host}" if special and hostname else "null"

    userinfo = ""
    if username or password:
        userinfo = username + (f":{password}" if password else "") + "@"
    authority_part = f"//{userinfo}{host}" if special or netloc else ""
    href = f"{scheme}:{authority_part}{pathname}{search}{fragment}"

    return RawUrl(
        protocol=f"{scheme}:",
        username=username,
        password=password,
        host=host,
        hostname=hostname,
        port=port,
        origin=origin,
        pathname=pathname,
        search=search,
        hash=fragment,
        href=href,
    )


def _remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments (RFC 3986 §5.2.4), keeping empty ones."""
    if not path.startswith("/"):
        return path
    segments = path.split("/")[1:]
    output: list[str] = []
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        if segment == ".":
            if last:
                output.append("")
        elif segment == "..":
            if output:
                output.pop()
            if last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)
