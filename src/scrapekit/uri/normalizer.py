"""Canonical string form of absolute URIs, used for deduplication."""

from __future__ import annotations

import logging
from typing import Optional

from url_normalize import url_normalize
from yarl import URL

from ..errors import InvalidUriError, NullArgumentError
from .parsing import UriLike, encode_query, parse_query, safe_unescape, split_absolute_uri

logger = logging.getLogger(__name__)


def _sort_key(name: Optional[str]) -> str:
    return "" if name is None else name


def normalize_uri_as_string(uri: UriLike) -> str:
    """
    Normalize an absolute URI.

    1. Query parameters are sorted by name (ordinal comparison).
    2. Values of each parameter are sorted (ordinal comparison).
    3. Empty separators (``&&``, trailing ``&``) are dropped.
    4. Scheme and host are lowercased, default ports removed and an empty
       path becomes ``/``.
    5. Query escapes are decoded where it is safe to do so.

    The fragment is kept as-is after the query.

    Args:
        uri: Absolute URI as a string or ``yarl.URL``

    Returns:
        The canonical URI string

    Raises:
        NullArgumentError: If uri is None
        InvalidUriError: If uri is not absolute
    """
    if uri is None:
        raise NullArgumentError("uri")

    try:
        parts = split_absolute_uri(uri)
    except InvalidUriError as err:
        raise InvalidUriError(uri, "The uri is not absolute.") from err

    grouped: dict[Optional[str], list[str]] = {}
    for name, value in parse_query(parts.query):
        grouped.setdefault(name, []).append(value)

    pairs = []
    for name in sorted(grouped, key=_sort_key):
        for value in sorted(grouped[name]):
            if not name and not value:
                continue
            pairs.append((name, value))

    if parts.netloc:
        try:
            result: str = url_normalize(f"{parts.scheme}://{parts.netloc}{parts.path}")
        except (ValueError, UnicodeError) as err:
            raise InvalidUriError(uri) from err
    else:
        # Opaque URIs (mailto:, urn:) have no host or port to normalize
        result = f"{parts.scheme.lower()}:{parts.path}"

    query = safe_unescape(encode_query(pairs))
    if query:
        result += f"?{query}"
    if parts.fragment:
        result += f"#{parts.fragment}"

    logger.debug(f"Normalized {uri} -> {result}")
    return result


def normalize_uri(uri: UriLike) -> URL:
    """Normalize an absolute URI; see :func:`normalize_uri_as_string`."""
    return URL(normalize_uri_as_string(uri), encoded=True)
