"""DOM parsing, selection, accessors and value coercion over lxml trees."""

from .accessors import (
    attr,
    base_uri,
    css,
    css_all,
    css_or_fail,
    href,
    html,
    html_content,
    inner_html,
    inner_html_content,
    resolve_uri,
    select,
    select_all,
    select_or_fail,
    src,
    text,
    text_content,
    xpath,
    xpath_all,
    xpath_or_fail,
)
from .coercion import CoercionRegistry, coerce, default_registry
from .documents import parse_html, parse_xml
from .nodes import Document, Node, NodeList, document_root, is_element, is_node
from .protocols import Selector
from .selector import CssSelector, FunctionSelector, NodeSelector, XPathSelector

__all__ = [
    # Documents
    "parse_html",
    "parse_xml",
    "Document",
    "Node",
    "NodeList",
    "document_root",
    "is_element",
    "is_node",
    # Selectors
    "Selector",
    "NodeSelector",
    "CssSelector",
    "XPathSelector",
    "FunctionSelector",
    "select",
    "select_or_fail",
    "select_all",
    "css",
    "css_or_fail",
    "css_all",
    "xpath",
    "xpath_or_fail",
    "xpath_all",
    # Accessors
    "text",
    "text_content",
    "html",
    "html_content",
    "inner_html",
    "inner_html_content",
    "attr",
    "src",
    "href",
    "base_uri",
    "resolve_uri",
    # Coercion
    "CoercionRegistry",
    "coerce",
    "default_registry",
]
