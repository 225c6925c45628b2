"""Protocol definitions for the HTTP client abstraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol


def parse_media_type(content_type: Optional[str]) -> tuple[Optional[str], dict[str, str]]:
    """
    Split a Content-Type header value into its media type and parameters.

    Args:
        content_type: Raw header value, e.g. ``"text/html; charset=UTF-8"``

    Returns:
        The lowercased media type (None if absent) and a dict of parameters
        with lowercased names and unquoted values
    """
    if not content_type:
        return None, {}

    media_type, *params = content_type.split(";")
    media_type = media_type.strip().lower() or None

    parameters: dict[str, str] = {}
    for param in params:
        name, sep, value = param.partition("=")
        if sep:
            parameters[name.strip().lower()] = value.strip().strip("\"'")

    return media_type, parameters


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by HttpClient.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        headers: All response headers
        url: Final URL after any redirects
        method: Request method that produced this response
    """

    status_code: int
    content: bytes
    content_type: str
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    method: str = "GET"

    @property
    def media_type(self) -> Optional[str]:
        """Content-Type without parameters, lowercased; None if the header is missing."""
        return parse_media_type(self.content_type)[0]

    @property
    def charset(self) -> Optional[str]:
        """Charset parameter of the Content-Type header, if any."""
        return parse_media_type(self.content_type)[1].get("charset")

    @property
    def ok(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status_code < 300


class HttpClient(Protocol):
    """
    Protocol for HTTP clients.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends behind the same content negotiation
    """

    async def request(
        self,
        method: str,
        url: Any,
        *,
        headers: dict[str, str] | None = None,
        data: Any = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP request.

        Args:
            method: HTTP method name
            url: Absolute URL to request
            headers: Optional additional headers
            data: Optional request body
            json: Optional JSON-serializable body
            timeout: Request timeout in seconds

        Returns:
            HttpResponse with status, content, and headers
        """
        ...
