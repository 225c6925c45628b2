"""Node helpers over lxml trees and the immutable NodeList result type."""

from __future__ import annotations

from html import escape
from typing import Any, Iterable, Iterator, Optional, Sequence, Union, overload

from lxml import etree
from lxml.html import HtmlMixin

Node = etree._Element
Document = etree._ElementTree
NodeOrDocument = Union[Node, Document]


def is_node(obj: Any) -> bool:
    """Check whether obj is a tree node (element, comment or processing instruction)."""
    return isinstance(obj, etree._Element)


def is_element(obj: Any) -> bool:
    """Check whether obj is an element; comments and PIs are not."""
    return isinstance(obj, etree._Element) and isinstance(obj.tag, str)


def document_root(node: Any) -> Any:
    """Redirect a document to its root element; other values pass through."""
    if isinstance(node, etree._ElementTree):
        return node.getroot()
    return node


def _serialize_method(node: Node) -> str:
    return "html" if isinstance(node, HtmlMixin) else "xml"


def node_markup(node: Node, with_tail: bool = False) -> str:
    """Serialize any tree node to markup."""
    return etree.tostring(node, encoding="unicode", method=_serialize_method(node), with_tail=with_tail)


def outer_markup(node: Any) -> Optional[str]:
    """Markup of an element including its own tag, or None for non-elements."""
    if not is_element(node):
        return None
    return node_markup(node)


def inner_markup(node: Any) -> Optional[str]:
    """Markup of an element's children, or None for non-elements."""
    if not is_element(node):
        return None

    parts = []
    if node.text:
        parts.append(escape(node.text, quote=False))
    for child in node:
        parts.append(node_markup(child, with_tail=True))
    return "".join(parts)


class NodeList(Sequence[Node]):
    """
    Ordered, immutable sequence of selected nodes.

    Example:
        links = css_all(document, "a")
        print(len(links), links.to_html())
    """

    __slots__ = ("_entries",)

    def __init__(self, nodes: Iterable[Node] = ()):
        self._entries: tuple[Node, ...] = tuple(nodes)

    @overload
    def __getitem__(self, index: int) -> Node: ...

    @overload
    def __getitem__(self, index: slice) -> NodeList: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Node, NodeList]:
        if isinstance(index, slice):
            return NodeList(self._entries[index])
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NodeList):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"NodeList({list(self._entries)!r})"

    def to_html(self) -> str:
        """Concatenate the markup of every node."""
        return "".join(node_markup(node) for node in self._entries)
