"""Tests for the command-line interface."""

import logging

import pytest

from scrapekit import __version__
from scrapekit.cli import create_parser, main

PAGE = """<html>
<head><title>Local page</title></head>
<body>
  <ul><li>One</li><li>Two</li></ul>
  <a href="https://example.com/about">About</a>
</body>
</html>"""


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("scrapekit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_version(self, capsys):
        """Test --version."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_command_required(self):
        """Test that a subcommand is required."""
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args([])
        assert exc_info.value.code == 2

    def test_bad_key_value(self):
        """Test that --add needs NAME=VALUE."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["query", "https://example.com/", "--add", "novalue"])

    def test_select_needs_engine(self):
        """Test that select requires --css or --xpath."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["select", "https://example.com/"])


class TestNormalizeCommand:
    """Tests for 'scrapekit normalize'."""

    def test_prints_canonical_urls(self, capsys):
        """Test that each URL is printed in canonical form."""
        exit_code = main(["normalize", "HTTP://Example.COM:80/?b=2&a=1", "http://example"])
        assert exit_code == 0
        assert capsys.readouterr().out.splitlines() == ["http://example.com/?a=1&b=2", "http://example/"]

    def test_relative_url_fails(self, capsys):
        """Test that invalid input exits with 1."""
        assert main(["normalize", "relative"]) == 1
        assert "The uri is not absolute." in capsys.readouterr().out


class TestQueryCommand:
    """Tests for 'scrapekit query'."""

    def test_edits_query(self, capsys):
        """Test remove, set and add."""
        exit_code = main(
            [
                "query",
                "https://example.com/?a=1&b=2",
                "--remove",
                "b",
                "--set",
                "a=9",
                "--add",
                "c=x y",
            ]
        )
        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "https://example.com/?a=9&c=x+y"

    def test_unescaped_output(self, capsys):
        """Test --unescaped."""
        assert main(["query", "https://example.com/", "--add", "q=café", "--unescaped"]) == 0
        assert capsys.readouterr().out.strip() == "https://example.com/?q=café"


class TestSelectCommand:
    """Tests for 'scrapekit select' on local files."""

    def test_first_text(self, page_file, capsys):
        """Test the text of the first match."""
        assert main(["select", str(page_file), "--css", "li"]) == 0
        assert capsys.readouterr().out.strip() == "One"

    def test_all_matches(self, page_file, capsys):
        """Test --all."""
        assert main(["select", str(page_file), "--xpath", "//li", "--all"]) == 0
        assert capsys.readouterr().out.splitlines() == ["One", "Two"]

    def test_attribute(self, page_file, capsys):
        """Test --attr."""
        assert main(["select", str(page_file), "--css", "a", "--attr", "href"]) == 0
        assert capsys.readouterr().out.strip() == "https://example.com/about"

    def test_markup(self, page_file, capsys):
        """Test --html."""
        assert main(["select", str(page_file), "--css", "li", "--html"]) == 0
        assert capsys.readouterr().out.strip() == "<li>One</li>"

    def test_no_match_fails(self, page_file, capsys):
        """Test that a missing node exits with 1."""
        assert main(["select", str(page_file), "--css", ".missing"]) == 1
        assert "Select '.missing' not found." in capsys.readouterr().out

    def test_missing_attribute_fails(self, page_file, capsys):
        """Test that a missing attribute exits with 1."""
        assert main(["select", str(page_file), "--css", "li", "--attr", "id"]) == 1
        assert "Missing 'id' attribute." in capsys.readouterr().out

    def test_missing_attribute_skipped_with_all(self, page_file, capsys):
        """Test that --all skips nodes without the attribute."""
        assert main(["select", str(page_file), "--css", "li", "--all", "--attr", "id"]) == 0
        assert capsys.readouterr().out.strip() == ""


class TestConfigOption:
    """Tests for --config."""

    def test_missing_config_file(self, tmp_path, capsys):
        """Test that an unreadable config exits with 1."""
        assert main(["--config", str(tmp_path / "missing.yaml"), "normalize", "http://example"]) == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path, capsys):
        """Test that an invalid config exits with 1."""
        path = tmp_path / "bad.yaml"
        path.write_text("client:\n  timeout: -1\n")
        assert main(["--config", str(path), "normalize", "http://example"]) == 1

    def test_valid_config(self, tmp_path, capsys):
        """Test that a valid config is accepted."""
        path = tmp_path / "good.yaml"
        path.write_text("log_level: WARNING\nclient:\n  timeout: 5\n")
        assert main(["--config", str(path), "normalize", "http://example"]) == 0
        assert capsys.readouterr().out.strip() == "http://example/"
