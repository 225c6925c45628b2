"""Async HTTP client returning raw or typed response content."""

from __future__ import annotations

import logging
from enum import Enum
from types import TracebackType
from typing import TYPE_CHECKING, Any, Union

import aiohttp
from yarl import URL

from ..errors import NullArgumentError
from ..uri.query import QueryBuilder
from .content import ContentKind, read_as
from .protocols import HttpResponse

if TYPE_CHECKING:
    from ..models.config import ClientConfig

logger = logging.getLogger(__name__)

RequestUrl = Union[str, URL, QueryBuilder]


class HttpMethod(str, Enum):
    """HTTP methods supported by AsyncHttpClient."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


def _request_url(url: RequestUrl) -> Union[str, URL]:
    if url is None:
        raise NullArgumentError("url")
    if isinstance(url, QueryBuilder):
        return url.uri
    return url


class AsyncHttpClient:
    """
    Thin async HTTP client over one aiohttp session.

    Features:
    - Typed reading of the response body (HTML, XML, JSON, text)
    - Content size limits to prevent memory exhaustion
    - Default headers (User-Agent, authentication) on every request
    - Per-request timeout

    No retries are made; transport errors and cancellation propagate to the
    caller unchanged.

    Example:
        async with AsyncHttpClient() as client:
            document = await client.get("https://example.com", kind=ContentKind.HTML)
            data = await client.post(api_url, json={"q": "lxml"}, kind=ContentKind.JSON)
    """

    MAX_CONTENT_SIZE = 50 * 1024 * 1024  # 50 MB
    DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; scrapekit/1.0)"

    def __init__(
        self,
        max_content_size: int = MAX_CONTENT_SIZE,
        user_agent: str | None = None,
        proxy: str | None = None,
        default_timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            max_content_size: Maximum response size in bytes
            user_agent: Custom User-Agent string
            proxy: Proxy URL (http://)
            default_timeout: Default request timeout in seconds
            headers: Headers to include in all requests (authentication included)
        """
        self._max_content_size = max_content_size
        self._user_agent = user_agent or self.DEFAULT_USER_AGENT
        self._proxy = proxy
        self._default_timeout = default_timeout
        self._headers = dict(headers or {})

        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> AsyncHttpClient:
        """Create a client from a ClientConfig."""
        return cls(
            max_content_size=int(config.max_content_size),
            user_agent=config.user_agent,
            proxy=config.proxy,
            default_timeout=config.timeout,
            headers=config.request_headers(),
        )

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        connector = aiohttp.TCPConnector(
            limit=100,
            limit_per_host=10,
            ttl_dns_cache=300,
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            headers={"User-Agent": self._user_agent},
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def _read_body(self, response: aiohttp.ClientResponse) -> bytes:
        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
            raise ValueError(f"Content too large: {content_length} bytes")

        content = bytearray()
        async for chunk in response.content.iter_chunked(8192):
            content.extend(chunk)
            if len(content) > self._max_content_size:
                raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")
        return bytes(content)

    async def request(
        self,
        method: Union[str, HttpMethod],
        url: RequestUrl,
        *,
        headers: dict[str, str] | None = None,
        data: Any = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP request and read the whole body.

        Args:
            method: HTTP method
            url: Absolute URL, as text, ``yarl.URL`` or QueryBuilder
            headers: Optional additional headers
            data: Optional request body
            json: Optional JSON-serializable body
            timeout: Request timeout in seconds (uses default if None)

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            RuntimeError: If used outside ``async with``
            aiohttp.ClientError: On network errors
            ValueError: On content size exceeded
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        method_name = HttpMethod(method.upper() if isinstance(method, str) else method).value
        target = _request_url(url)

        request_headers = dict(self._headers)
        if headers:
            request_headers.update(headers)

        async with self._session.request(
            method_name,
            target,
            timeout=aiohttp.ClientTimeout(total=timeout or self._default_timeout),
            headers=request_headers or None,
            data=data,
            json=json,
            proxy=self._proxy,
            allow_redirects=True,
        ) as response:
            content = b"" if method_name == HttpMethod.HEAD.value else await self._read_body(response)
            logger.debug(f"{method_name} {target} -> {response.status} ({len(content)} bytes)")

            return HttpResponse(
                status_code=response.status,
                content=content,
                content_type=response.headers.get("Content-Type", ""),
                headers=dict(response.headers),
                url=str(response.url),
                method=method_name,
            )

    async def send(
        self,
        method: Union[str, HttpMethod],
        url: RequestUrl,
        *,
        kind: ContentKind = ContentKind.RESPONSE,
        **kwargs: Any,
    ) -> Any:
        """Perform a request and read the response as kind."""
        response = await self.request(method, url, **kwargs)
        return read_as(response, kind)

    async def get(self, url: RequestUrl, *, kind: ContentKind = ContentKind.RESPONSE, **kwargs: Any) -> Any:
        """GET url and read the response as kind."""
        return await self.send(HttpMethod.GET, url, kind=kind, **kwargs)

    async def post(self, url: RequestUrl, *, kind: ContentKind = ContentKind.RESPONSE, **kwargs: Any) -> Any:
        """POST to url and read the response as kind."""
        return await self.send(HttpMethod.POST, url, kind=kind, **kwargs)

    async def put(self, url: RequestUrl, *, kind: ContentKind = ContentKind.RESPONSE, **kwargs: Any) -> Any:
        """PUT to url and read the response as kind."""
        return await self.send(HttpMethod.PUT, url, kind=kind, **kwargs)

    async def patch(self, url: RequestUrl, *, kind: ContentKind = ContentKind.RESPONSE, **kwargs: Any) -> Any:
        """PATCH url and read the response as kind."""
        return await self.send(HttpMethod.PATCH, url, kind=kind, **kwargs)

    async def delete(self, url: RequestUrl, *, kind: ContentKind = ContentKind.RESPONSE, **kwargs: Any) -> Any:
        """DELETE url and read the response as kind."""
        return await self.send(HttpMethod.DELETE, url, kind=kind, **kwargs)

    async def head(self, url: RequestUrl, **kwargs: Any) -> HttpResponse:
        """HEAD url; the response content is empty."""
        return await self.request(HttpMethod.HEAD, url, **kwargs)
