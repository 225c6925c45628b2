"""CSS, XPath and custom-function node selectors over lxml trees."""

from __future__ import annotations

from abc import abstractmethod
from typing import Callable, Iterable, Iterator, Mapping, Optional, Union

from cssselect import GenericTranslator, HTMLTranslator
from lxml import etree
from lxml.html import HtmlMixin

from ..errors import NullArgumentError
from .nodes import Node, is_element, is_node
from .protocols import Selector

SelectOne = Callable[[Node], Optional[Node]]
SelectMany = Callable[[Node], Optional[Iterable[Optional[Node]]]]


class NodeSelector(Selector[Node, Node]):
    """
    Select lxml nodes with a CSS or XPath selector, or custom functions.

    Example:
        title = NodeSelector.css("head > title").select(document.getroot())
        links = list(NodeSelector.xpath("//a[@href]").select_all(root))
    """

    DISPLAY_TEXT = "Selector()"

    def __init__(self, display_text: Optional[str] = None):
        self._display_text = display_text

    @staticmethod
    def css(selector: str) -> CssSelector:
        """Create a CSS selector."""
        return CssSelector(selector)

    @staticmethod
    def xpath(
        selector: Union[str, etree.XPath],
        namespaces: Optional[Mapping[str, str]] = None,
    ) -> XPathSelector:
        """Create an XPath selector from an expression or a compiled ``etree.XPath``."""
        return XPathSelector(selector, namespaces=namespaces)

    @staticmethod
    def custom(
        select_one: SelectOne,
        select_many: SelectMany,
        display_text: Optional[str] = None,
    ) -> FunctionSelector:
        """Create a selector from two selection functions."""
        return FunctionSelector(select_one, select_many, display_text=display_text)

    @abstractmethod
    def _select_one(self, node: Node) -> Optional[Node]: ...

    @abstractmethod
    def _select_many(self, node: Node) -> Optional[Iterable[Optional[Node]]]: ...

    def select(self, node: Optional[Node]) -> Optional[Node]:
        if node is None:
            return None
        return self._select_one(node)

    def select_all(self, node: Optional[Node]) -> Iterator[Node]:
        if node is None:
            return

        results = self._select_many(node)
        if results is None:
            return

        for item in results:
            if item is not None:
                yield item

    def __str__(self) -> str:
        return self._display_text if self._display_text is not None else self.DISPLAY_TEXT

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class CssSelector(NodeSelector):
    """
    CSS selector compiled once to XPath with ``cssselect``.

    Only descendants of the context element can match, as with the DOM
    ``querySelector``. HTML elements are matched with the HTML translator
    (case-insensitive element names), anything else with the generic one.
    Non-element nodes select nothing.
    """

    def __init__(self, selector: str):
        if selector is None:
            raise NullArgumentError("selector")

        super().__init__(selector)
        self._html_query = etree.XPath(HTMLTranslator().css_to_xpath(selector, prefix="descendant::"))
        self._xml_query = etree.XPath(GenericTranslator().css_to_xpath(selector, prefix="descendant::"))

    def _query(self, node: Node) -> Optional[list]:
        if not is_element(node):
            return None

        query = self._html_query if isinstance(node, HtmlMixin) else self._xml_query
        return query(node)

    def _select_one(self, node: Node) -> Optional[Node]:
        results = self._query(node)
        return results[0] if results else None

    def _select_many(self, node: Node) -> Optional[Iterable[Optional[Node]]]:
        return self._query(node)


class XPathSelector(NodeSelector):
    """
    XPath selector evaluated with the node as context.

    Expressions are evaluated over the node's whole document, so absolute
    paths (``//a``) search the document. Results that are not tree nodes,
    such as strings from ``text()`` or numbers from ``count()``, are dropped.
    """

    def __init__(
        self,
        selector: Union[str, etree.XPath],
        namespaces: Optional[Mapping[str, str]] = None,
    ):
        if selector is None:
            raise NullArgumentError("selector")

        if isinstance(selector, etree.XPath):
            self._query = selector
            display_text = selector.path
        else:
            self._query = etree.XPath(selector, namespaces=dict(namespaces) if namespaces else None)
            display_text = selector

        super().__init__(display_text)

    def _evaluate(self, node: Node) -> Optional[list]:
        if not is_node(node):
            return None

        result = self._query(node)
        if not isinstance(result, list):
            return None
        return [item for item in result if is_node(item)]

    def _select_one(self, node: Node) -> Optional[Node]:
        results = self._evaluate(node)
        return results[0] if results else None

    def _select_many(self, node: Node) -> Optional[Iterable[Optional[Node]]]:
        return self._evaluate(node)


class FunctionSelector(NodeSelector):
    """Selector backed by caller-supplied functions, for engines other than CSS or XPath."""

    def __init__(
        self,
        select_one: SelectOne,
        select_many: SelectMany,
        display_text: Optional[str] = None,
    ):
        if select_one is None:
            raise NullArgumentError("select_one")
        if select_many is None:
            raise NullArgumentError("select_many")

        super().__init__(display_text)
        self._select_one_fn = select_one
        self._select_many_fn = select_many

    def _select_one(self, node: Node) -> Optional[Node]:
        return self._select_one_fn(node)

    def _select_many(self, node: Node) -> Optional[Iterable[Optional[Node]]]:
        return self._select_many_fn(node)
