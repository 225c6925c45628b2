"""
Conversion of extracted strings into typed values.

Conversions go through an explicit, ordered list of strategies instead of
runtime type discovery:

1. ``str`` is returned unchanged
2. ``yarl.URL`` is parsed as an absolute URI
3. converters registered for the exact target type
4. ``Enum`` subclasses, by member name then by value
5. last resort: calling ``target(value)``
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, cast
from uuid import UUID

from yarl import URL

from ..errors import UnsupportedCoercionError
from ..uri.parsing import split_absolute_uri

logger = logging.getLogger(__name__)

T = TypeVar("T")

Converter = Callable[[str], Any]

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def _to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _to_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except InvalidOperation as err:
        raise ValueError(f"Not a decimal: {value!r}") from err


def _to_url(value: str) -> URL:
    split_absolute_uri(value, argument="value")
    return URL(value)


class CoercionRegistry:
    """
    Ordered table of string converters.

    Example:
        registry = CoercionRegistry()
        registry.register(Money, Money.parse)
        price = attr(node, "data-price", as_type=Money, registry=registry)
    """

    def __init__(self, include_defaults: bool = True):
        """
        Initialize the registry.

        Args:
            include_defaults: Register converters for int, float, bool,
                Decimal, datetime, date, UUID and Path
        """
        self._converters: dict[type, Converter] = {}
        if include_defaults:
            self.register(int, lambda value: int(value.strip()))
            self.register(float, lambda value: float(value.strip()))
            self.register(bool, _to_bool)
            self.register(Decimal, _to_decimal)
            self.register(datetime, lambda value: datetime.fromisoformat(value.strip()))
            self.register(date, lambda value: date.fromisoformat(value.strip()))
            self.register(UUID, lambda value: UUID(value.strip()))
            self.register(Path, Path)

    def register(self, target: type, converter: Converter) -> CoercionRegistry:
        """Register (or replace) the converter for an exact target type."""
        self._converters[target] = converter
        return self

    def unregister(self, target: type) -> CoercionRegistry:
        """Remove the converter for target; no-op if absent."""
        self._converters.pop(target, None)
        return self

    def converter_for(self, target: type) -> Optional[Converter]:
        """Return the converter registered for target, if any."""
        return self._converters.get(target)

    def coerce(self, value: str, target: type[T]) -> T:
        """
        Convert value to target.

        Args:
            value: The string to convert
            target: The requested type

        Returns:
            The converted value

        Raises:
            InvalidUriError: If target is ``yarl.URL`` and value is not absolute
            UnsupportedCoercionError: If no strategy converts the value
        """
        if target is str:
            return cast(T, value)

        if target is URL:
            return cast(T, _to_url(value))

        converter = self.converter_for(target)
        if converter is not None:
            try:
                return cast(T, converter(value))
            except (ValueError, TypeError, ArithmeticError) as err:
                raise UnsupportedCoercionError(value, target) from err

        if isinstance(target, type) and issubclass(target, Enum):
            return cast(T, self._to_enum(value, target))

        if not callable(target):
            raise UnsupportedCoercionError(value, target)

        try:
            return cast(T, target(value))  # type: ignore[call-arg]
        except (ValueError, TypeError, ArithmeticError) as err:
            logger.debug(f"Fallback conversion of {value!r} to {target!r} failed: {err}")
            raise UnsupportedCoercionError(value, target) from err

    @staticmethod
    def _to_enum(value: str, target: type[Enum]) -> Enum:
        key = value.strip()
        members = target.__members__
        if key in members:
            return members[key]

        lowered = key.lower()
        for name, member in members.items():
            if name.lower() == lowered:
                return member

        try:
            return target(key)
        except ValueError:
            pass

        # Numeric member values written as text
        for member in target:
            if str(member.value) == key:
                return member

        raise UnsupportedCoercionError(value, target)


default_registry = CoercionRegistry()


def coerce(value: str, target: type[T], registry: Optional[CoercionRegistry] = None) -> T:
    """Convert value to target with registry (or the default registry)."""
    return (registry or default_registry).coerce(value, target)
