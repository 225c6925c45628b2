"""Tests for string-to-type coercion."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum, IntEnum
from pathlib import Path
from uuid import UUID

import pytest
from yarl import URL

from scrapekit.dom import CoercionRegistry, coerce
from scrapekit.errors import ErrorKind, InvalidUriError, UnsupportedCoercionError


class Size(Enum):
    SMALL = "s"
    LARGE = "l"


class Level(IntEnum):
    LOW = 1
    HIGH = 2


class Money:
    def __init__(self, amount: Decimal, currency: str):
        self.amount = amount
        self.currency = currency

    @classmethod
    def parse(cls, value: str) -> "Money":
        amount, currency = value.split()
        return cls(Decimal(amount), currency)


class Slug:
    def __init__(self, value: str):
        self.value = value


class TestDefaultConverters:
    """Tests for the built-in converter table."""

    def test_str_passthrough(self):
        """Test that str returns the value unchanged."""
        assert coerce(" x ", str) == " x "

    def test_numbers(self):
        """Test int, float and Decimal."""
        assert coerce("42", int) == 42
        assert coerce(" 42 ", int) == 42
        assert coerce("1.5", float) == 1.5
        assert coerce("9.99", Decimal) == Decimal("9.99")

    @pytest.mark.parametrize("value", ["true", "True", "1", "yes", "on"])
    def test_bool_true(self, value):
        """Test truthy spellings."""
        assert coerce(value, bool) is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "off"])
    def test_bool_false(self, value):
        """Test falsy spellings."""
        assert coerce(value, bool) is False

    def test_dates_and_ids(self):
        """Test datetime, date, UUID and Path."""
        assert coerce("2024-01-02T03:04:05", datetime) == datetime(2024, 1, 2, 3, 4, 5)
        assert coerce("2024-01-02", date) == date(2024, 1, 2)
        uuid_text = "12345678-1234-5678-1234-567812345678"
        assert coerce(uuid_text, UUID) == UUID(uuid_text)
        assert coerce("a/b.txt", Path) == Path("a/b.txt")

    def test_url(self):
        """Test that URLs must be absolute."""
        assert coerce("https://example.com/a", URL) == URL("https://example.com/a")
        with pytest.raises(InvalidUriError):
            coerce("relative/path", URL)

    def test_invalid_value_raises(self):
        """Test that unconvertible values raise UnsupportedCoercionError."""
        with pytest.raises(UnsupportedCoercionError) as exc_info:
            coerce("abc", int)
        assert exc_info.value.value == "abc"
        assert exc_info.value.target is int
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_COERCION

    def test_invalid_bool_and_decimal(self):
        """Test failures of the custom parsers."""
        with pytest.raises(UnsupportedCoercionError):
            coerce("maybe", bool)
        with pytest.raises(UnsupportedCoercionError):
            coerce("nine", Decimal)


class TestEnums:
    """Tests for enum coercion."""

    def test_by_name(self):
        """Test lookup by member name."""
        assert coerce("SMALL", Size) is Size.SMALL

    def test_by_name_case_insensitive(self):
        """Test case-insensitive member names."""
        assert coerce("large", Size) is Size.LARGE

    def test_by_value(self):
        """Test lookup by member value."""
        assert coerce("s", Size) is Size.SMALL

    def test_numeric_value(self):
        """Test numeric values written as text."""
        assert coerce("2", Level) is Level.HIGH

    def test_unknown_member(self):
        """Test that unknown members raise."""
        with pytest.raises(UnsupportedCoercionError):
            coerce("medium", Size)


class TestRegistry:
    """Tests for caller-supplied converters."""

    def test_register_custom_type(self):
        """Test that a registered converter is used."""
        registry = CoercionRegistry().register(Money, Money.parse)
        money = coerce("9.99 EUR", Money, registry)
        assert money.amount == Decimal("9.99")
        assert money.currency == "EUR"

    def test_registered_converter_failure(self):
        """Test that converter errors become UnsupportedCoercionError."""
        registry = CoercionRegistry().register(Money, Money.parse)
        with pytest.raises(UnsupportedCoercionError):
            registry.coerce("not money at all", Money)

    def test_override_default(self):
        """Test that a default converter can be replaced."""
        registry = CoercionRegistry().register(int, lambda value: int(value, 16))
        assert registry.coerce("ff", int) == 255

    def test_unregister(self):
        """Test that an unregistered type falls back to calling the type."""
        registry = CoercionRegistry().unregister(bool)
        assert registry.converter_for(bool) is None
        assert registry.coerce("false", bool) is True

    def test_empty_registry(self):
        """Test a registry without defaults."""
        registry = CoercionRegistry(include_defaults=False)
        assert registry.converter_for(int) is None
        assert registry.coerce("7", int) == 7

    def test_fallback_calls_type(self):
        """Test that unknown types are constructed from the string."""
        assert coerce("my-slug", Slug).value == "my-slug"

    def test_non_callable_target(self):
        """Test that a non-type target is rejected."""
        with pytest.raises(UnsupportedCoercionError):
            coerce("x", 5)
