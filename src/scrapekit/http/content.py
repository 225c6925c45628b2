"""
Content-type guards and typed reading of HTTP response bodies.

Example:
    response = await client.get("https://example.com/")
    document = read_as_html(response)
    title = text(css_or_fail(document, "title"))
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable, Optional

from charset_normalizer import from_bytes as detect_encoding

from ..dom.documents import parse_html, parse_xml
from ..dom.nodes import Document
from ..errors import ContentTypeMismatchError
from .protocols import HttpResponse, parse_media_type

logger = logging.getLogger(__name__)

# Media types
MEDIA_TYPE_HTML = "text/html"
MEDIA_TYPE_XHTML = "application/xhtml+xml"
MEDIA_TYPE_TEXT_XML = "text/xml"
MEDIA_TYPE_XML = "application/xml"
MEDIA_TYPE_SVG = "image/svg+xml"
MEDIA_TYPE_JSON = "application/json"

HTML_MEDIA_TYPES = (MEDIA_TYPE_HTML, MEDIA_TYPE_XHTML)
XML_MEDIA_TYPES = (MEDIA_TYPE_TEXT_XML, MEDIA_TYPE_XML, MEDIA_TYPE_SVG)
JSON_MEDIA_TYPES = (MEDIA_TYPE_JSON,)


class ContentKind(str, Enum):
    """How a response body should be read."""

    HTML = "html"
    XML = "xml"
    JSON = "json"
    TEXT = "text"
    RESPONSE = "response"


def ensure_content_type(response: HttpResponse, *media_types: str) -> HttpResponse:
    """
    Check the response media type against an expected set.

    Parameters such as ``charset`` are ignored and the comparison is
    case-insensitive.

    Args:
        response: Response to check
        *media_types: Accepted media types

    Returns:
        The response, unchanged

    Raises:
        ContentTypeMismatchError: If the media type is missing or not accepted
    """
    received = response.media_type
    accepted = {media_type.lower() for media_type in media_types}

    if received is None or received not in accepted:
        expected = ", ".join(media_types)
        logger.debug(f"Content type mismatch for {response.url}: expected {expected}, found {received}")
        raise ContentTypeMismatchError(expected, received)

    return response


def decode_content(content: bytes, content_type: Optional[str] = None) -> str:
    """
    Decode content with intelligent encoding detection.

    Fallback chain:
    1. Content-Type header charset
    2. charset-normalizer detection
    3. UTF-8 with replacement

    Args:
        content: Raw bytes content
        content_type: Content-Type header value

    Returns:
        Decoded string
    """
    if not content:
        return ""

    encoding = parse_media_type(content_type)[1].get("charset")
    if encoding:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Failed to decode with declared encoding: {encoding}")

    best_match = detect_encoding(content).best()
    if best_match is not None:
        logger.debug(f"Detected encoding: {best_match.encoding}")
        return str(best_match)

    return content.decode("utf-8", errors="replace")


def read_as_text(response: HttpResponse) -> str:
    """Decode the body as text; no content-type check."""
    return decode_content(response.content, response.content_type)


def read_as_html(response: HttpResponse) -> Document:
    """
    Parse an HTML response into a document whose URL is the response URL.

    Raises:
        ContentTypeMismatchError: If the response is not text/html or application/xhtml+xml
    """
    ensure_content_type(response, *HTML_MEDIA_TYPES)
    markup = read_as_text(response)
    # Decoded already; keep lxml from re-sniffing a <meta charset>
    return parse_html(markup.encode("utf-8"), base_url=response.url or None, encoding="utf-8")


def read_as_xml(response: HttpResponse) -> Document:
    """
    Parse an XML response into a document whose URL is the response URL.

    Raises:
        ContentTypeMismatchError: If the response is not an XML media type
        lxml.etree.XMLSyntaxError: If the body is not well-formed
    """
    ensure_content_type(response, *XML_MEDIA_TYPES)
    return parse_xml(response.content, base_url=response.url or None, encoding=response.charset)


def strip_json_comments(text: str) -> str:
    """
    Remove ``//`` and ``/* */`` comments outside of string literals.

    Raises:
        json.JSONDecodeError: If a block comment is not terminated
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]
        if in_string:
            if ch == "\\":
                out.append(text[i : i + 2])
                i += 2
                continue
            if ch == '"':
                in_string = False
            out.append(ch)
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise json.JSONDecodeError("Unterminated comment", text, i)
            out.append(" ")
            i = end + 2
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """
    Remove commas that follow a value and precede ``]`` or ``}`` (whitespace aside).

    A comma right after ``[``, ``{`` or another comma is kept, so ``[,]``
    still fails to parse.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    # Last non-whitespace character kept outside a string
    previous = ""

    while i < n:
        ch = text[i]
        if in_string:
            if ch == "\\":
                out.append(text[i : i + 2])
                i += 2
                continue
            if ch == '"':
                in_string = False
                previous = ch
        elif ch == '"':
            in_string = True
        elif ch == "," and previous not in ("", "[", "{", ","):
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "]}":
                i += 1
                continue
        if not in_string and not ch.isspace() and ch != '"':
            previous = ch
        out.append(ch)
        i += 1

    return "".join(out)


def loads_lenient(text: str) -> Any:
    """Parse JSON that may contain comments and trailing commas."""
    return json.loads(strip_trailing_commas(strip_json_comments(text)))


def read_as_json(response: HttpResponse) -> Any:
    """
    Parse a JSON response, tolerating comments and trailing commas.

    Raises:
        ContentTypeMismatchError: If the response is not application/json
        json.JSONDecodeError: If the body is not valid JSON
    """
    ensure_content_type(response, *JSON_MEDIA_TYPES)
    return loads_lenient(read_as_text(response))


_READERS: dict[ContentKind, Callable[[HttpResponse], Any]] = {
    ContentKind.HTML: read_as_html,
    ContentKind.XML: read_as_xml,
    ContentKind.JSON: read_as_json,
    ContentKind.TEXT: read_as_text,
    ContentKind.RESPONSE: lambda response: response,
}


def read_as(response: HttpResponse, kind: ContentKind = ContentKind.RESPONSE) -> Any:
    """Read response as the given kind of content."""
    return _READERS[ContentKind(kind)](response)
