"""
Accessors over lxml nodes: text, markup, attributes, links and selection.

Every function takes the node (or document, or iterable of nodes) first.
Strings extracted from the tree go through the same pipeline: HTML entities
are decoded, percent escapes are decoded, then the result is trimmed.
Accessors never return None for absent data unless the caller passed None
as the default.

Example:
    document = parse_html(page, base_url="https://example.com/")
    title = text(css_or_fail(document, "title"))
    links = [href(a) for a in css_all(document, "a[href]")]
    size = attr(css_or_fail(document, "img"), "width", 0, as_type=int)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from html import unescape as html_unescape
from typing import Any, Iterable, Mapping, Optional, Union
from urllib.parse import unquote

from lxml import etree
from lxml.html import HtmlMixin
from yarl import URL

from ..errors import AttributeNotFoundError, InvalidNodeError, InvalidUriError, NodeNotFoundError
from .coercion import CoercionRegistry, coerce
from .nodes import Node, NodeList, NodeOrDocument, document_root, inner_markup, is_element, is_node, outer_markup
from .selector import NodeSelector

logger = logging.getLogger(__name__)

Nodes = Union[NodeOrDocument, Iterable[Optional[NodeOrDocument]], None]
XPathLike = Union[str, etree.XPath]

ATTR_SRC = "src"
ATTR_HREF = "href"

_MISSING: Any = object()

_STRING_VALUE = etree.XPath("string()")
_HTML_BASE_HREF = etree.XPath("(//base[@href])[1]/@href")


def _clean(value: str) -> str:
    return unquote(html_unescape(value)).strip()


def _parse_url(value: str) -> URL:
    try:
        return URL(value)
    except ValueError as err:
        raise InvalidUriError(value) from err


def _join_url(base: URL, target: URL) -> URL:
    try:
        return base.join(target)
    except ValueError as err:
        raise InvalidUriError(str(target)) from err


# --- text and markup ---------------------------------------------------------


def text(node: Optional[NodeOrDocument]) -> str:
    """
    Text content of a node and all its descendants.

    Comments and processing instructions return their own data. The result
    is decoded, unescaped, trimmed and never None.
    """
    node = document_root(node)

    if is_element(node):
        content = str(_STRING_VALUE(node))
    elif is_node(node):
        content = node.text or ""
    else:
        return ""

    return _clean(content)


def text_content(node: Optional[NodeOrDocument]) -> str:
    """Alias of :func:`text`."""
    return text(node)


def html(node: Optional[NodeOrDocument]) -> str:
    """Outer markup of an element (its own tag included); empty for non-elements."""
    markup = outer_markup(document_root(node))
    return _clean(markup) if markup is not None else ""


def html_content(node: Optional[NodeOrDocument]) -> str:
    """Alias of :func:`html`."""
    return html(node)


def inner_html(node: Optional[NodeOrDocument]) -> str:
    """Markup of an element's children; empty for non-elements."""
    markup = inner_markup(document_root(node))
    return _clean(markup) if markup is not None else ""


def inner_html_content(node: Optional[NodeOrDocument]) -> str:
    """Alias of :func:`inner_html`."""
    return inner_html(node)


# --- attributes --------------------------------------------------------------


def _raw_attr(node: Any, name: str) -> Optional[str]:
    node = document_root(node)
    if not is_element(node):
        return None
    return node.get(name)


def attr(
    node: Optional[NodeOrDocument],
    name: str,
    default: Any = _MISSING,
    *,
    as_type: type = str,
    registry: Optional[CoercionRegistry] = None,
) -> Any:
    """
    Read an attribute (namespace-less lookup) and convert it.

    Args:
        node: Element to read from
        name: Attribute name
        default: Returned as-is when the attribute is missing
        as_type: Type to convert the value to (``str`` by default)
        registry: Converters to use instead of the default registry

    Returns:
        The decoded, trimmed and converted value, or default

    Raises:
        AttributeNotFoundError: If the attribute is missing and no default was given
        UnsupportedCoercionError: If the value cannot be converted to as_type
    """
    value = _raw_attr(node, name)

    if value is None:
        if default is _MISSING:
            raise AttributeNotFoundError(name)
        return default

    return coerce(_clean(value), as_type, registry)


# --- links -------------------------------------------------------------------


def base_uri(node: Optional[NodeOrDocument]) -> Optional[URL]:
    """
    Base URI used to resolve links found on node.

    For HTML, the first ``<base href>`` of the document wins, resolved
    against the document URL. Otherwise the element's own base is used
    (``xml:base`` or the document URL).

    Raises:
        InvalidNodeError: If node is not a tree node
        InvalidUriError: If the document URL or <base href> is malformed
    """
    node = document_root(node)
    if not is_node(node):
        raise InvalidNodeError(node, "Cannot compute the base URI of a non-node value.")

    if isinstance(node, HtmlMixin):
        document_url = node.getroottree().docinfo.URL
        base_hrefs = _HTML_BASE_HREF(node)
        if base_hrefs:
            base_href = _parse_url(_clean(str(base_hrefs[0])))
            if document_url and not base_href.scheme:
                return _join_url(_parse_url(document_url), base_href)
            return base_href
        return _parse_url(document_url) if document_url else None

    element_base = node.base
    return _parse_url(element_base) if element_base else None


def resolve_uri(node: Optional[NodeOrDocument], value: str) -> URL:
    """
    Resolve value against the base URI of node.

    Raises:
        InvalidNodeError: If node is not an element
        InvalidUriError: If value or the base URI is malformed, or value is
            relative and node has no absolute base URI
    """
    node = document_root(node)
    if not is_element(node):
        raise InvalidNodeError(node, "Cannot resolve a URI against a non-element node.")

    target = _parse_url(value)
    if target.scheme:
        return target

    base = base_uri(node)
    if base is None or not base.scheme or not base.is_absolute():
        raise InvalidUriError(value, f"Cannot resolve relative URI '{value}' without an absolute base URI.")

    return _join_url(base, target)


def _link(
    node: Optional[NodeOrDocument],
    name: str,
    default: Any,
    as_type: Optional[type],
    registry: Optional[CoercionRegistry],
) -> Any:
    node = document_root(node)
    value = attr(node, name, None)

    if value is None:
        if default is _MISSING:
            raise AttributeNotFoundError(name)
        return default

    url = resolve_uri(node, value)
    if as_type is None:
        return url

    return coerce(url.human_repr(), as_type, registry)


def src(
    node: Optional[NodeOrDocument],
    default: Any = _MISSING,
    *,
    as_type: Optional[type] = None,
    registry: Optional[CoercionRegistry] = None,
) -> Any:
    """
    The ``src`` attribute as an absolute URL.

    With ``as_type`` the URL is rendered unescaped and converted.

    Raises:
        AttributeNotFoundError: If src is missing and no default was given
    """
    return _link(node, ATTR_SRC, default, as_type, registry)


def href(
    node: Optional[NodeOrDocument],
    default: Any = _MISSING,
    *,
    as_type: Optional[type] = None,
    registry: Optional[CoercionRegistry] = None,
) -> Any:
    """
    The ``href`` attribute as an absolute URL.

    With ``as_type`` the URL is rendered unescaped and converted.

    Raises:
        AttributeNotFoundError: If href is missing and no default was given
    """
    return _link(node, ATTR_HREF, default, as_type, registry)


# --- selection ---------------------------------------------------------------


@lru_cache(maxsize=256)
def _css_selector(selector: str) -> NodeSelector:
    return NodeSelector.css(selector)


@lru_cache(maxsize=256)
def _xpath_selector(selector: str) -> NodeSelector:
    return NodeSelector.xpath(selector)


def _to_xpath_selector(selector: XPathLike, namespaces: Optional[Mapping[str, str]]) -> NodeSelector:
    if isinstance(selector, str) and not namespaces:
        return _xpath_selector(selector)
    return NodeSelector.xpath(selector, namespaces=namespaces)


def _is_single(nodes: Any) -> bool:
    return nodes is None or isinstance(nodes, (etree._Element, etree._ElementTree))


def select(nodes: Nodes, selector: NodeSelector, *, of_type: Optional[type] = None) -> Optional[Node]:
    """
    First node found by selector, or None.

    On an iterable of nodes the first match across the nodes wins. With
    ``of_type``, a first match of another type yields None.
    """
    if _is_single(nodes):
        found = selector.select(document_root(nodes))
    else:
        found = selector.select_first(document_root(node) for node in nodes)

    if of_type is not None and found is not None and not isinstance(found, of_type):
        return None
    return found


def select_or_fail(nodes: Nodes, selector: NodeSelector, *, of_type: Optional[type] = None) -> Node:
    """
    First node found by selector.

    Raises:
        NodeNotFoundError: If nothing is selected
        InvalidNodeError: If the match is not an instance of of_type
    """
    found = select(nodes, selector)

    if found is None:
        logger.debug(f"Select '{selector}' matched nothing")
        raise NodeNotFoundError(str(selector))

    if of_type is not None and not isinstance(found, of_type):
        raise InvalidNodeError(
            found,
            f"Select '{selector}' matched {type(found).__name__}, expected {of_type.__name__}.",
        )
    return found


def select_all(nodes: Nodes, selector: NodeSelector, *, of_type: Optional[type] = None) -> NodeList:
    """Every node found by selector; with ``of_type`` other matches are dropped."""
    if _is_single(nodes):
        results = selector.select_all(document_root(nodes))
    else:
        results = selector.select_all_from(document_root(node) for node in nodes)

    if of_type is not None:
        return NodeList(node for node in results if isinstance(node, of_type))
    return NodeList(results)


def css(nodes: Nodes, selector: str, *, of_type: Optional[type] = None) -> Optional[Node]:
    """First element matching a CSS selector, or None."""
    return select(nodes, _css_selector(selector), of_type=of_type)


def css_or_fail(nodes: Nodes, selector: str, *, of_type: Optional[type] = None) -> Node:
    """First element matching a CSS selector; raises NodeNotFoundError otherwise."""
    return select_or_fail(nodes, _css_selector(selector), of_type=of_type)


def css_all(nodes: Nodes, selector: str, *, of_type: Optional[type] = None) -> NodeList:
    """Every element matching a CSS selector."""
    return select_all(nodes, _css_selector(selector), of_type=of_type)


def xpath(
    nodes: Nodes,
    selector: XPathLike,
    namespaces: Optional[Mapping[str, str]] = None,
    *,
    of_type: Optional[type] = None,
) -> Optional[Node]:
    """First node matching an XPath expression, or None."""
    return select(nodes, _to_xpath_selector(selector, namespaces), of_type=of_type)


def xpath_or_fail(
    nodes: Nodes,
    selector: XPathLike,
    namespaces: Optional[Mapping[str, str]] = None,
    *,
    of_type: Optional[type] = None,
) -> Node:
    """First node matching an XPath expression; raises NodeNotFoundError otherwise."""
    return select_or_fail(nodes, _to_xpath_selector(selector, namespaces), of_type=of_type)


def xpath_all(
    nodes: Nodes,
    selector: XPathLike,
    namespaces: Optional[Mapping[str, str]] = None,
    *,
    of_type: Optional[type] = None,
) -> NodeList:
    """Every node matching an XPath expression."""
    return select_all(nodes, _to_xpath_selector(selector, namespaces), of_type=of_type)
