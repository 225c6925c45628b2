"""Tests for QueryBuilder."""

from datetime import date
from enum import Enum

import pytest
from yarl import URL

from scrapekit.errors import ErrorKind, InvalidUriError, NullArgumentError
from scrapekit.uri import QueryBuilder, parse_query

RELATIVE_URIS = ["", "/", "relative", "/relative/url", "relative/url"]
INVALID_URIS = ["%$", "^^"]


class Color(Enum):
    RED = "red"


class TestConstruction:
    """Tests for building a QueryBuilder from a URI."""

    def test_none_uri_raises(self):
        """Test that None is rejected."""
        with pytest.raises(NullArgumentError) as exc_info:
            QueryBuilder(None)
        assert exc_info.value.kind == ErrorKind.NULL_ARGUMENT

    @pytest.mark.parametrize("uri", RELATIVE_URIS)
    def test_relative_string_raises(self, uri):
        """Test that relative strings are rejected."""
        with pytest.raises(InvalidUriError):
            QueryBuilder(uri)

    @pytest.mark.parametrize("uri", RELATIVE_URIS)
    def test_relative_url_raises(self, uri):
        """Test that relative yarl URLs are rejected."""
        with pytest.raises(InvalidUriError):
            QueryBuilder(URL(uri))

    @pytest.mark.parametrize("uri", INVALID_URIS)
    def test_invalid_string_raises(self, uri):
        """Test that malformed strings are rejected."""
        with pytest.raises(InvalidUriError) as exc_info:
            QueryBuilder(uri)
        assert exc_info.value.kind == ErrorKind.INVALID_URI

    def test_invalid_uri_is_value_error(self):
        """Test that InvalidUriError can be caught as ValueError."""
        with pytest.raises(ValueError):
            QueryBuilder("relative")

    def test_existing_query_is_parsed(self):
        """Test that the query of the base URI is loaded."""
        builder = QueryBuilder("https://example.com/search?q=hello+world&tag=a&tag=b")
        assert builder.get("q") == ["hello world"]
        assert builder.get("tag") == ["a", "b"]
        assert builder.keys == ["q", "tag"]

    def test_accepts_yarl_url(self):
        """Test construction from an absolute yarl URL."""
        builder = QueryBuilder(URL("https://example.com/path?a=1"))
        assert builder.get("a") == ["1"]


class TestRendering:
    """Tests for the rendered URI."""

    def test_missing_path_renders_slash(self):
        """Test that a URI without path gains '/' once a parameter is set."""
        builder = QueryBuilder("http://example").set("a", "1")
        assert str(builder.uri) == "http://example/?a=1"
        assert str(builder) == "http://example/?a=1"

    def test_none_and_empty_values_render_as_key_only(self):
        """Test that None and '' both render as 'key='."""
        builder = QueryBuilder("http://example/").set("a", None).set("b", "")
        assert str(builder) == "http://example/?a=&b="

    def test_reserved_characters_are_escaped_lowercase(self):
        """Test that reserved characters use lowercase hex escapes."""
        builder = QueryBuilder("http://example/").set("q", "<>")
        assert str(builder.uri) == "http://example/?q=%3c%3e"
        assert str(builder) == "http://example/?q=%3c%3e"

    def test_space_is_form_encoded(self):
        """Test that spaces become '+'."""
        builder = QueryBuilder("http://example/").set("q", "a b")
        assert str(builder.uri) == "http://example/?q=a+b"

    def test_unreserved_characters_are_kept(self):
        """Test that unreserved characters are not escaped."""
        builder = QueryBuilder("http://example/").set("q", "a-b_c.d!e*f(g)~")
        assert str(builder.uri) == "http://example/?q=a-b_c.d!e*f(g)~"

    def test_unicode_is_unescaped_in_str(self):
        """Test that str() decodes non-ASCII escapes."""
        builder = QueryBuilder("http://example/").set("q", "café")
        assert str(builder.uri) == "http://example/?q=caf%c3%a9"
        assert str(builder) == "http://example/?q=café"

    def test_empty_query_renders_no_question_mark(self):
        """Test that an empty multi-map renders no '?'."""
        builder = QueryBuilder("https://example.com/path?a=1").clear()
        assert str(builder) == "https://example.com/path"

    def test_fragment_is_kept(self):
        """Test that the base URI fragment survives."""
        builder = QueryBuilder("https://example.com/path#top").add("a", "1")
        assert str(builder) == "https://example.com/path?a=1#top"

    def test_bare_flag_round_trips(self):
        """Test that a segment without '=' renders back as bare text."""
        builder = QueryBuilder("https://example.com/?debug&a=1")
        assert builder.get(None) == ["debug"]
        assert str(builder) == "https://example.com/?debug&a=1"

    def test_uri_is_yarl_url(self):
        """Test that the uri property is a yarl URL."""
        builder = QueryBuilder("https://example.com/").add("a", "1")
        assert isinstance(builder.uri, URL)
        assert builder.uri.query["a"] == "1"


class TestMutation:
    """Tests for add, set, remove and friends."""

    def test_add_appends(self):
        """Test that add keeps earlier values."""
        builder = QueryBuilder("https://example.com/").add("a", "1").add("a", "2")
        assert builder.get("a") == ["1", "2"]
        assert str(builder) == "https://example.com/?a=1&a=2"

    def test_set_replaces_in_place(self):
        """Test that set replaces all values and keeps the name position."""
        builder = QueryBuilder("https://example.com/?a=1&b=2&a=3")
        builder.set("a", "x")
        assert builder.get("a") == ["x"]
        assert builder.keys == ["a", "b"]
        assert str(builder) == "https://example.com/?a=x&b=2"

    def test_set_new_name_appends(self):
        """Test that set on an unknown name appends it."""
        builder = QueryBuilder("https://example.com/?a=1").set("b", "2")
        assert builder.keys == ["a", "b"]

    def test_remove(self):
        """Test that remove deletes every value."""
        builder = QueryBuilder("https://example.com/?a=1&a=2&b=3").remove("a")
        assert not builder.has("a")
        assert builder.get("a") is None
        assert str(builder) == "https://example.com/?b=3"

    def test_remove_missing_is_noop(self):
        """Test that removing an absent name does nothing."""
        builder = QueryBuilder("https://example.com/?a=1").remove("zzz")
        assert builder.keys == ["a"]

    def test_get_returns_copy(self):
        """Test that mutating the returned list does not affect the builder."""
        builder = QueryBuilder("https://example.com/?a=1")
        values = builder.get("a")
        values.append("2")
        assert builder.get("a") == ["1"]

    def test_has_and_contains(self):
        """Test presence checks."""
        builder = QueryBuilder("https://example.com/?a=1")
        assert builder.has("a")
        assert "a" in builder
        assert "b" not in builder
        assert 42 not in builder

    def test_iteration_and_len(self):
        """Test iteration yields (name, values) in insertion order."""
        builder = QueryBuilder("https://example.com/?b=1&a=2&b=3")
        assert list(builder) == [("b", ["1", "3"]), ("a", ["2"])]
        assert len(builder) == 2

    def test_keys_are_case_sensitive(self):
        """Test that names differing in case are distinct."""
        builder = QueryBuilder("https://example.com/").add("a", "1").add("A", "2")
        assert builder.get("a") == ["1"]
        assert builder.get("A") == ["2"]

    def test_non_string_values_are_formatted(self):
        """Test locale-independent formatting of typed values."""
        builder = QueryBuilder("https://example.com/")
        builder.add("n", 42).add("f", 1.5).add("d", date(2024, 1, 31)).add("c", Color.RED)
        assert builder.get("n") == ["42"]
        assert builder.get("f") == ["1.5"]
        assert builder.get("d") == ["2024-01-31"]
        assert builder.get("c") == ["red"]

    def test_chaining_returns_same_builder(self):
        """Test that mutators return the builder itself."""
        builder = QueryBuilder("https://example.com/")
        assert builder.add("a", "1") is builder
        assert builder.set("a", "2") is builder
        assert builder.remove("a") is builder
        assert builder.clear() is builder


class TestParseQuery:
    """Tests for the query string parser."""

    def test_leading_question_mark_ignored(self):
        """Test that '?' is stripped."""
        assert parse_query("?a=1") == [("a", "1")]

    def test_empty_segments(self):
        """Test that empty segments become (None, '')."""
        assert parse_query("a=1&&b=2") == [("a", "1"), (None, ""), ("b", "2")]

    def test_percent_and_plus_decoding(self):
        """Test that names and values are form-decoded."""
        assert parse_query("q=a+b%26c") == [("q", "a b&c")]

    def test_empty_query(self):
        """Test that an empty query yields no pairs."""
        assert parse_query("") == []
