"""
scrapekit - Typed content negotiation, node selection and URI helpers for scraping.

Usage:
    from scrapekit import AsyncHttpClient, ContentKind, css_all, href, text

    async with AsyncHttpClient() as client:
        document = await client.get("https://example.com", kind=ContentKind.HTML)

    for link in css_all(document, "a[href]"):
        print(text(link), href(link))
"""

__version__ = "1.0.0"

from .dom import (
    CoercionRegistry,
    NodeList,
    NodeSelector,
    attr,
    css,
    css_all,
    css_or_fail,
    href,
    html,
    inner_html,
    parse_html,
    parse_xml,
    select,
    select_all,
    select_or_fail,
    src,
    text,
    xpath,
    xpath_all,
    xpath_or_fail,
)
from .errors import (
    AttributeNotFoundError,
    CancelOperation,
    ContentTypeMismatchError,
    ErrorKind,
    InvalidNodeError,
    InvalidUriError,
    NodeNotFoundError,
    NullArgumentError,
    ScrapeError,
    UnsupportedCoercionError,
)
from .http import AsyncHttpClient, ContentKind, HttpResponse, ensure_content_type, read_as
from .models.config import AuthConfig, ClientConfig, ScrapeConfig
from .uri import QueryBuilder, normalize_uri, normalize_uri_as_string

__all__ = [
    "__version__",
    # URI
    "QueryBuilder",
    "normalize_uri",
    "normalize_uri_as_string",
    # DOM
    "parse_html",
    "parse_xml",
    "NodeSelector",
    "NodeList",
    "CoercionRegistry",
    "select",
    "select_or_fail",
    "select_all",
    "css",
    "css_or_fail",
    "css_all",
    "xpath",
    "xpath_or_fail",
    "xpath_all",
    "text",
    "html",
    "inner_html",
    "attr",
    "src",
    "href",
    # HTTP
    "AsyncHttpClient",
    "ContentKind",
    "HttpResponse",
    "ensure_content_type",
    "read_as",
    # Config
    "AuthConfig",
    "ClientConfig",
    "ScrapeConfig",
    # Errors
    "ErrorKind",
    "ScrapeError",
    "NullArgumentError",
    "InvalidUriError",
    "AttributeNotFoundError",
    "NodeNotFoundError",
    "ContentTypeMismatchError",
    "UnsupportedCoercionError",
    "InvalidNodeError",
    "CancelOperation",
]
