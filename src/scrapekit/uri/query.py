"""Mutable builder over the query string of an absolute URI."""

from __future__ import annotations

from typing import Any, Iterator, Optional
from urllib.parse import urlunsplit

from yarl import URL

from .parsing import (
    UriLike,
    encode_query,
    format_query_value,
    parse_query,
    quote_path,
    safe_unescape,
    split_absolute_uri,
)


class QueryBuilder:
    """
    Build the query of an absolute URI.

    Parameters are kept as an ordered multi-map: ``add`` appends a value,
    ``set`` replaces every value of a name. Mutators return the builder so
    calls can be chained. Not safe for concurrent mutation.

    Example:
        builder = QueryBuilder("https://example.com/search")
        builder.set("q", "lxml").add("tag", "python").add("tag", "html")
        print(builder.uri)  # https://example.com/search?q=lxml&tag=python&tag=html
    """

    def __init__(self, uri: UriLike):
        """
        Initialize the builder.

        Args:
            uri: Absolute base URI, as a string or ``yarl.URL``

        Raises:
            NullArgumentError: If uri is None
            InvalidUriError: If uri is malformed or not absolute
        """
        parts = split_absolute_uri(uri)

        self._scheme = parts.scheme
        self._netloc = parts.netloc
        self._path = quote_path(parts.path)
        self._fragment = parts.fragment

        self._query: dict[Optional[str], list[str]] = {}
        for name, value in parse_query(parts.query):
            self._query.setdefault(name, []).append(value)

    @property
    def keys(self) -> list[Optional[str]]:
        """Parameter names in insertion order (None for bare flags)."""
        return list(self._query)

    @property
    def uri(self) -> URL:
        """The absolute URI with the current query string."""
        return URL(self._render(unescape=False), encoded=True)

    def has(self, name: Optional[str]) -> bool:
        """Check whether at least one value is set for name."""
        return bool(self._query.get(name))

    def add(self, name: Optional[str], value: Any) -> QueryBuilder:
        """Append a value for name, keeping existing values."""
        self._query.setdefault(name, []).append(format_query_value(value) or "")
        return self

    def set(self, name: Optional[str], value: Any) -> QueryBuilder:
        """Replace every value of name with a single value."""
        self._query[name] = [format_query_value(value) or ""]
        return self

    def remove(self, name: Optional[str]) -> QueryBuilder:
        """Remove every value of name; no-op if absent."""
        self._query.pop(name, None)
        return self

    def get(self, name: Optional[str]) -> Optional[list[str]]:
        """Return the values of name in insertion order, or None if absent."""
        values = self._query.get(name)
        return list(values) if values is not None else None

    def clear(self) -> QueryBuilder:
        """Remove every parameter."""
        self._query.clear()
        return self

    def _pairs(self) -> Iterator[tuple[Optional[str], str]]:
        for name, values in self._query.items():
            for value in values:
                yield name, value

    def _render(self, unescape: bool) -> str:
        query = encode_query(self._pairs())
        if unescape:
            query = safe_unescape(query)

        path = self._path
        if not path and self._netloc:
            path = "/"

        return urlunsplit((self._scheme, self._netloc, path, query, self._fragment))

    def __iter__(self) -> Iterator[tuple[Optional[str], list[str]]]:
        for name, values in self._query.items():
            yield name, list(values)

    def __len__(self) -> int:
        return len(self._query)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, (str, type(None))) and self.has(name)

    def __str__(self) -> str:
        return self._render(unescape=True)

    def __repr__(self) -> str:
        return f"QueryBuilder({self._render(unescape=False)!r})"
