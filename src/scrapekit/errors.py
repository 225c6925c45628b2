"""Error types raised by scrapekit.

Every failure is a direct subclass of :class:`ScrapeError` and carries an
:class:`ErrorKind` tag plus the structured context needed to build a message
(attribute name, selector text, content types). Each class also inherits the
closest builtin exception so generic handlers keep working.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by scrapekit."""

    NULL_ARGUMENT = "null_argument"
    INVALID_URI = "invalid_uri"
    ATTRIBUTE_NOT_FOUND = "attribute_not_found"
    NODE_NOT_FOUND = "node_not_found"
    CONTENT_TYPE_MISMATCH = "content_type_mismatch"
    UNSUPPORTED_COERCION = "unsupported_coercion"
    INVALID_NODE = "invalid_node"


class ScrapeError(Exception):
    """Base class for all scrapekit errors."""

    kind: ErrorKind

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class NullArgumentError(ScrapeError, TypeError):
    """A required argument was None."""

    def __init__(self, argument: str, message: Optional[str] = None):
        super().__init__(message or f"Argument '{argument}' must not be None.", ErrorKind.NULL_ARGUMENT)
        self.argument = argument


class InvalidUriError(ScrapeError, ValueError):
    """A URI was malformed or not absolute."""

    def __init__(self, uri: Any, message: Optional[str] = None):
        super().__init__(message or f"Invalid URI: '{uri}'.", ErrorKind.INVALID_URI)
        self.uri = uri


class AttributeNotFoundError(ScrapeError, LookupError):
    """A required attribute is missing on a node."""

    def __init__(self, attribute_name: str, message: Optional[str] = None):
        super().__init__(message or f"Missing '{attribute_name}' attribute.", ErrorKind.ATTRIBUTE_NOT_FOUND)
        self.attribute_name = attribute_name


class NodeNotFoundError(ScrapeError, LookupError):
    """A required selection produced no node."""

    def __init__(self, selector: str, message: Optional[str] = None):
        super().__init__(message or f"Select '{selector}' not found.", ErrorKind.NODE_NOT_FOUND)
        self.selector = selector


class ContentTypeMismatchError(ScrapeError):
    """The declared content type of a response is not in the expected set."""

    def __init__(
        self,
        expected_type: Optional[str],
        received_type: Optional[str],
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"Invalid content type, expected '{expected_type}', found: '{received_type}'",
            ErrorKind.CONTENT_TYPE_MISMATCH,
        )
        self.expected_type = expected_type
        self.received_type = received_type


class UnsupportedCoercionError(ScrapeError, TypeError):
    """A string value could not be converted to the requested type."""

    def __init__(self, value: Any, target: Any, message: Optional[str] = None):
        target_name = getattr(target, "__name__", repr(target))
        super().__init__(
            message or f"Cannot convert {value!r} to {target_name}.",
            ErrorKind.UNSUPPORTED_COERCION,
        )
        self.value = value
        self.target = target


class InvalidNodeError(ScrapeError, TypeError):
    """A node is not of the kind an operation requires."""

    def __init__(self, node: Any, message: Optional[str] = None):
        super().__init__(message or f"Unexpected node: {node!r}.", ErrorKind.INVALID_NODE)
        self.node = node


class CancelOperation(asyncio.CancelledError):
    """
    Abort an operation cleanly.

    Derives from ``asyncio.CancelledError`` (a ``BaseException``), so
    ``except Exception`` blocks do not treat it as a failure and raising it
    inside a task cancels that task.
    """
