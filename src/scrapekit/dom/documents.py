"""Build lxml documents from HTML or XML markup."""

from __future__ import annotations

from typing import Optional, Union

import lxml.html
from lxml import etree
from yarl import URL

from .nodes import Document

Markup = Union[str, bytes]

_EMPTY_HTML = "<html><head></head><body></body></html>"


def _base_url(base_url: Optional[Union[str, URL]]) -> Optional[str]:
    return str(base_url) if base_url is not None else None


def parse_html(
    content: Markup,
    base_url: Optional[Union[str, URL]] = None,
    encoding: Optional[str] = None,
) -> Document:
    """
    Parse HTML into a document.

    Args:
        content: HTML markup as text or bytes
        base_url: Document URL, used to resolve relative links
        encoding: Encoding of byte content; sniffed from ``<meta>`` when omitted

    Returns:
        The parsed document; an empty input yields an empty ``<html>`` document
    """
    if not content.strip():
        content = _EMPTY_HTML

    parser = None
    if encoding and isinstance(content, bytes):
        parser = lxml.html.HTMLParser(encoding=encoding)

    root = lxml.html.document_fromstring(content, parser=parser, base_url=_base_url(base_url))
    return root.getroottree()


def parse_xml(
    content: Markup,
    base_url: Optional[Union[str, URL]] = None,
    encoding: Optional[str] = None,
) -> Document:
    """
    Parse XML into a document.

    Entities are not resolved and no network access is allowed while parsing.

    Args:
        content: XML markup as text or bytes
        base_url: Document URL, used to resolve relative links
        encoding: Encoding of byte content, overriding the XML declaration

    Returns:
        The parsed document

    Raises:
        lxml.etree.XMLSyntaxError: If the markup is not well-formed
    """
    if isinstance(content, str):
        # lxml refuses text with an encoding declaration; parse it as UTF-8 bytes
        content = content.encode("utf-8")
        encoding = "utf-8"

    parser = etree.XMLParser(resolve_entities=False, no_network=True, encoding=encoding)
    root = etree.fromstring(content, parser, base_url=_base_url(base_url))
    return root.getroottree()
