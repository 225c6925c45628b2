"""Selector abstraction over a node type and an element type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Iterator, Optional, TypeVar

TNode = TypeVar("TNode")
TElement = TypeVar("TElement")


class Selector(ABC, Generic[TNode, TElement]):
    """
    Select elements from a node or from a sequence of nodes.

    Implementations provide the single-node forms; the sequence forms are
    derived from them:

    - ``select_first`` returns the first match across the nodes, in order
    - ``select_all_from`` concatenates per-node results, in node order
    """

    @abstractmethod
    def select(self, node: Optional[TNode]) -> Optional[TElement]:
        """Select the first element from node, or None."""
        ...

    @abstractmethod
    def select_all(self, node: Optional[TNode]) -> Iterator[TElement]:
        """Select every element from node."""
        ...

    def select_first(self, nodes: Optional[Iterable[Optional[TNode]]]) -> Optional[TElement]:
        """Select the first element found in any of nodes."""
        if nodes is None:
            return None

        for node in nodes:
            if node is None:
                continue
            selected = self.select(node)
            if selected is not None:
                return selected
        return None

    def select_all_from(self, nodes: Optional[Iterable[Optional[TNode]]]) -> Iterator[TElement]:
        """Select every element from every node."""
        if nodes is None:
            return

        for node in nodes:
            if node is not None:
                yield from self.select_all(node)
