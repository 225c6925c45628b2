"""Shared URI helpers: absolute-URI validation and query string codecs."""

from __future__ import annotations

import re
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Iterable, Optional, Union
from urllib.parse import SplitResult, quote, quote_plus, unquote_plus, urlsplit

from yarl import URL

from ..errors import InvalidUriError, NullArgumentError

UriLike = Union[str, URL]

QueryPair = tuple[Optional[str], str]

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_INVALID_HOST_RE = re.compile(r"[\s<>\"{}|\\^`%]")
_HEX_ESCAPE_RE = re.compile(r"%[0-9A-F]{2}")
_ESCAPE_RUN_RE = re.compile(r"(?:%[0-9A-Fa-f]{2})+")

# Schemes whose URIs are meaningless without an authority component
AUTHORITY_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})

# Characters that stay percent-escaped in safe-unescaped output
QUERY_KEEP_ESCAPED = frozenset('%&=+#<>"{}|\\^`')

_PATH_SAFE = "/%:@!$&'()*+,;=~"


def split_absolute_uri(uri: UriLike, argument: str = "uri") -> SplitResult:
    """
    Validate an absolute URI and split it into its components.

    Args:
        uri: URI as a string or ``yarl.URL``
        argument: Argument name reported when ``uri`` is None

    Returns:
        The ``urllib.parse.SplitResult`` of the URI

    Raises:
        NullArgumentError: If uri is None
        InvalidUriError: If uri is malformed or not absolute
    """
    if uri is None:
        raise NullArgumentError(argument)

    if isinstance(uri, URL):
        if not uri.is_absolute():
            raise InvalidUriError(uri, "The URI is not absolute.")
        text = str(uri)
    elif isinstance(uri, str):
        text = uri.strip()
    else:
        raise InvalidUriError(uri, f"Unsupported URI type: {type(uri).__name__}.")

    try:
        parts = urlsplit(text)
        # Accessing port validates it
        _ = parts.port
    except ValueError as err:
        raise InvalidUriError(uri, f"Invalid URI: '{text}'.") from err

    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        raise InvalidUriError(uri, "The URI is not absolute.")

    if parts.scheme.lower() in AUTHORITY_SCHEMES and not parts.netloc:
        raise InvalidUriError(uri, "The URI is not absolute.")

    if not parts.netloc and not parts.path:
        raise InvalidUriError(uri, f"Invalid URI: '{text}'.")

    if parts.netloc:
        host = parts.hostname or ""
        if not host:
            raise InvalidUriError(uri, f"Invalid host in URI: '{text}'.")
        if _INVALID_HOST_RE.search(host):
            raise InvalidUriError(uri, f"Invalid host in URI: '{text}'.")

    return parts


def quote_path(path: str) -> str:
    """Escape characters not allowed in a URI path, keeping existing escapes."""
    return quote(path, safe=_PATH_SAFE)


def parse_query(query: str) -> list[QueryPair]:
    """
    Parse a query string into ordered (name, value) pairs.

    A leading ``?`` is ignored. Names and values are form-decoded
    (``+`` becomes a space). A segment without ``=`` is a bare flag and is
    returned with name ``None``; empty segments yield ``(None, "")``.
    """
    if query.startswith("?"):
        query = query[1:]

    if not query:
        return []

    pairs: list[QueryPair] = []
    for segment in query.split("&"):
        name, sep, value = segment.partition("=")
        if sep:
            pairs.append((unquote_plus(name), unquote_plus(value)))
        else:
            pairs.append((None, unquote_plus(segment)))
    return pairs


def encode_component(value: str) -> str:
    """Form-encode a query name or value with lowercase hex escapes."""
    encoded = quote_plus(value, safe="!*()")
    return _HEX_ESCAPE_RE.sub(lambda m: m.group(0).lower(), encoded)


def encode_query(pairs: Iterable[tuple[Optional[str], Optional[str]]]) -> str:
    """
    Serialize (name, value) pairs into a query string without leading ``?``.

    A ``None`` value is written as an empty string; a ``None`` name writes
    the value alone (a bare flag).
    """
    parts = []
    for name, value in pairs:
        encoded_value = encode_component(value or "")
        if name is None:
            parts.append(encoded_value)
        else:
            parts.append(f"{encode_component(name)}={encoded_value}")
    return "&".join(parts)


def _keep_escaped(ch: str, keep: frozenset[str]) -> bool:
    return ch in keep or ch.isspace() or not ch.isprintable()


def safe_unescape(text: str, keep: frozenset[str] = QUERY_KEEP_ESCAPED) -> str:
    """
    Decode percent escapes except those that are syntactically required.

    Escaped runs are decoded as UTF-8; characters in ``keep``, whitespace and
    non-printable characters are re-escaped with lowercase hex. Runs that are
    not valid UTF-8 are left untouched.
    """

    def replace(match: re.Match) -> str:
        raw = match.group(0)
        try:
            decoded = bytes.fromhex(raw.replace("%", "")).decode("utf-8")
        except UnicodeDecodeError:
            return raw
        out = []
        for ch in decoded:
            if _keep_escaped(ch, keep):
                out.append(quote(ch, safe="").lower())
            else:
                out.append(ch)
        return "".join(out)

    return _ESCAPE_RUN_RE.sub(replace, text)


def format_query_value(value: Any) -> Optional[str]:
    """
    Format a query value in a locale-independent way.

    Strings and None pass through, enums use their value, dates and times use
    ISO 8601, anything else uses ``str()``.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return format_query_value(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)
