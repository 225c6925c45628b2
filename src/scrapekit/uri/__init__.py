"""URI query building and normalization."""

from .normalizer import normalize_uri, normalize_uri_as_string
from .parsing import UriLike, parse_query
from .query import QueryBuilder

__all__ = [
    "QueryBuilder",
    "UriLike",
    "normalize_uri",
    "normalize_uri_as_string",
    "parse_query",
]
