"""Command-line interface for scrapekit."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

import aiohttp
import yaml
from cssselect import SelectorError
from lxml import etree
from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .dom import attr, css_all, css_or_fail, html, parse_html, text, xpath_all, xpath_or_fail
from .dom.nodes import Document, NodeList
from .errors import ScrapeError
from .http import AsyncHttpClient, ContentKind, HttpResponse, read_as_html
from .logging_config import setup_logging
from .models.config import ScrapeConfig
from .uri import QueryBuilder, normalize_uri_as_string

CLI_ERRORS = (
    ScrapeError,
    ValidationError,
    yaml.YAMLError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
    ValueError,
    etree.LxmlError,
    SelectorError,
)


def _key_value(text_value: str) -> tuple[str, str]:
    name, sep, value = text_value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text_value!r}")
    return name, value


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="scrapekit",
        description="Normalize URLs, build query strings and select nodes from web pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Canonical form of a URL
  scrapekit normalize "HTTP://Example.COM:80/a?b=2&a=1"

  # Edit a query string
  scrapekit query "https://example.com/search?q=old" --set q=lxml --add page=2

  # Text of every link on a page
  scrapekit select https://example.com --css "a[href]" --all

  # href attribute of the first link
  scrapekit select https://example.com --xpath "//a" --attr href
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML configuration file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only log errors",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    normalize_parser = subparsers.add_parser("normalize", help="Print the canonical form of URLs")
    normalize_parser.add_argument("urls", nargs="+", metavar="URL", help="Absolute URL")

    query_parser = subparsers.add_parser(
        "query",
        help="Edit the query string of a URL",
        description="Removals apply first, then --set, then --add.",
    )
    query_parser.add_argument("url", metavar="URL", help="Absolute URL")
    query_parser.add_argument(
        "--add",
        type=_key_value,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Append a value",
    )
    query_parser.add_argument(
        "--set",
        type=_key_value,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Replace all values of NAME",
    )
    query_parser.add_argument(
        "--remove",
        action="append",
        default=[],
        metavar="NAME",
        help="Remove all values of NAME",
    )
    query_parser.add_argument(
        "--unescaped",
        action="store_true",
        help="Print the URL with safe characters unescaped",
    )

    select_parser = subparsers.add_parser("select", help="Select nodes from an HTML page")
    select_parser.add_argument("source", metavar="URL", help="Absolute URL or local HTML file")
    engine = select_parser.add_mutually_exclusive_group(required=True)
    engine.add_argument("--css", help="CSS selector")
    engine.add_argument("--xpath", help="XPath expression")
    select_parser.add_argument("--all", action="store_true", help="Print every match instead of the first")
    output = select_parser.add_mutually_exclusive_group()
    output.add_argument("--attr", metavar="NAME", help="Print an attribute instead of the text")
    output.add_argument("--html", action="store_true", help="Print the outer markup instead of the text")

    return parser


def load_config(path: Optional[Path]) -> ScrapeConfig:
    """Load the YAML config file, or defaults when no file is given."""
    if path is None:
        return ScrapeConfig()
    return ScrapeConfig.from_yaml_file(path)


def _echo(console: Console, value: str) -> None:
    console.print(value, markup=False, highlight=False, emoji=False, soft_wrap=True)


def run_normalize(args: argparse.Namespace, console: Console) -> int:
    for url in args.urls:
        _echo(console, normalize_uri_as_string(url))
    return 0


def run_query(args: argparse.Namespace, console: Console) -> int:
    builder = QueryBuilder(args.url)

    for name in args.remove:
        builder.remove(name)
    for name, value in args.set:
        builder.set(name, value)
    for name, value in args.add:
        builder.add(name, value)

    _echo(console, str(builder) if args.unescaped else str(builder.uri))
    return 0


async def fetch_document(source: str, config: ScrapeConfig) -> Document:
    """Parse a local HTML file, or fetch source and parse it as HTML."""
    path = Path(source)
    if "://" not in source and path.is_file():
        return parse_html(path.read_bytes(), base_url=path.resolve().as_uri())

    async with AsyncHttpClient.from_config(config.client) as client:
        response: HttpResponse = await client.get(source, kind=ContentKind.RESPONSE)

    if not response.ok:
        raise ValueError(f"HTTP {response.status_code} for {response.url}")
    return read_as_html(response)


def run_select(args: argparse.Namespace, console: Console, config: ScrapeConfig) -> int:
    document = asyncio.run(fetch_document(args.source, config))

    if args.all:
        nodes = css_all(document, args.css) if args.css else xpath_all(document, args.xpath)
    else:
        node = css_or_fail(document, args.css) if args.css else xpath_or_fail(document, args.xpath)
        nodes = NodeList([node])

    for node in nodes:
        if args.attr:
            value = attr(node, args.attr) if not args.all else attr(node, args.attr, None)
            if value is None:
                continue
        elif args.html:
            value = html(node)
        else:
            value = text(node)
        _echo(console, value)

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console()

    try:
        config = load_config(args.config)
    except CLI_ERRORS as e:
        console.print("[red]Configuration error:[/red] ", end="")
        _echo(console, str(e))
        return 1

    if args.verbose:
        log_level = "DEBUG"
    elif args.quiet:
        log_level = "ERROR"
    else:
        log_level = config.log_level
    setup_logging(log_level, config.log_file, force=True)

    try:
        if args.command == "normalize":
            return run_normalize(args, console)
        if args.command == "query":
            return run_query(args, console)
        return run_select(args, console, config)
    except CLI_ERRORS as e:
        console.print("[red]Error:[/red] ", end="")
        _echo(console, str(e))
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
