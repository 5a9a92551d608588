"""
URL helpers for request builders.

Path composition is plain string work; parsing is stricter than
``urllib.parse`` so that malformed request URLs are reported instead of
being sent as relative paths.
"""

from __future__ import annotations
import re
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import SplitResult, parse_qs, urlencode, urlsplit, urlunsplit

from .errors import InvalidURLError

_SCHEME_CHARS = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def resolve_path(*paths: str) -> str:
    """
    Concatenate URI paths.

    Each segment loses one leading and one trailing slash, empty segments are
    dropped and the rest are joined with ``/``.

    Example:
        >>> resolve_path("http://x/y", "a", "/b/", "c")
        'http://x/y/a/b/c'
    """
    final: List[str] = []
    for path in paths:
        if path.startswith("/"):
            path = path[1:]
        if path.endswith("/"):
            path = path[:-1]

        if path:
            final.append(path)

    return "/".join(final)


def _split_scheme(uri: str) -> Tuple[str, str]:
    """Split off the scheme the same way a strict RFC 3986 parser does."""
    for i, char in enumerate(uri):
        if char == ":":
            if i == 0:
                raise InvalidURLError("missing protocol scheme", url=uri)
            scheme = uri[:i]
            if _SCHEME_CHARS.match(scheme):
                return scheme, uri[i + 1:]
            return "", uri
        if char in "/?#":
            break
    return "", uri


def parse_url(uri: str) -> SplitResult:
    """
    Parse a request URL.

    Args:
        uri: Absolute or relative URL

    Returns:
        The split URL

    Raises:
        InvalidURLError: If the URL is malformed
    """
    if any(ord(char) < 0x20 or ord(char) == 0x7F for char in uri):
        raise InvalidURLError("invalid control character in URL", url=uri)

    scheme, rest = _split_scheme(uri)

    if not scheme and not rest.startswith("/"):
        first_segment = re.split(r"[/?#]", rest, maxsplit=1)[0]
        if ":" in first_segment:
            raise InvalidURLError("first path segment in URL cannot contain colon", url=uri)

    try:
        parts = urlsplit(uri)
        # accessing the port validates it
        parts.port
    except ValueError as e:
        raise InvalidURLError(str(e), url=uri) from e

    if _BAD_ESCAPE.search(parts.path) or _BAD_ESCAPE.search(parts.netloc):
        raise InvalidURLError("invalid URL escape", url=uri)

    return parts


def encode_query(values: Dict[str, List[str]]) -> str:
    """Encode query values sorted by key, keeping the order of repeated values."""
    return urlencode(sorted(values.items()), doseq=True)


def set_param(uri: str, key: str, value: str) -> str:
    """
    Set (overwrite) a query string parameter.

    Raises:
        InvalidURLError: If the URL is malformed
    """
    parts = parse_url(uri)
    query = parse_qs(parts.query, keep_blank_values=True)
    query[key] = [value]
    return urlunsplit(parts._replace(query=encode_query(query)))


def get_params(uri: str) -> Optional[Dict[str, List[str]]]:
    """Decoded query string parameters, or None if the URL is malformed."""
    try:
        parts = parse_url(uri)
    except InvalidURLError:
        return None

    return parse_qs(parts.query, keep_blank_values=True)


def encode_form(pairs: Iterable[Tuple[str, str]]) -> str:
    """URL-encode form pairs, sorted by key."""
    return urlencode(sorted(pairs, key=lambda pair: pair[0]))


__all__ = [
    "resolve_path",
    "parse_url",
    "encode_query",
    "set_param",
    "get_params",
    "encode_form",
]
