"""HTTP client and content negotiation for scrapekit."""

from .client import AsyncHttpClient, HttpMethod
from .content import (
    ContentKind,
    decode_content,
    ensure_content_type,
    read_as,
    read_as_html,
    read_as_json,
    read_as_text,
    read_as_xml,
)
from .protocols import HttpClient, HttpResponse, parse_media_type

__all__ = [
    "AsyncHttpClient",
    "ContentKind",
    "HttpClient",
    "HttpMethod",
    "HttpResponse",
    "decode_content",
    "ensure_content_type",
    "parse_media_type",
    "read_as",
    "read_as_html",
    "read_as_json",
    "read_as_text",
    "read_as_xml",
]
