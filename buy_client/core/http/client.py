"""
HTTP transport for the storefront API.

This module provides the request layer every service is built on, built on top
of httpx. Each verb method returns a ``RequestTask`` immediately; the request
runs on the caller's event loop and its outcome is classified into a
``TransportResult(json, response, error)``.
"""

import base64
import json as jsonlib
from typing import Any, Callable, Dict, Optional

import httpx

from buy_client.core import config
from buy_client.core.http.exceptions import (
    BuyClientError,
    HTTPConnectionError,
    HTTPTimeoutError,
    MalformedResponseError,
)
from buy_client.core.http.serialization import to_payload
from buy_client.core.http.status import error_from_json
from buy_client.core.http.task import RequestTask
from buy_client.core.logging import get_logger
from buy_client.pydantic_models.results import TransportResult

logger = get_logger(__name__)

CUSTOMER_ACCESS_TOKEN_HEADER = "X-Shopify-Customer-Access-Token"

TransportCallback = Callable[[Any, Optional[httpx.Response], Optional[BuyClientError]], Any]


def _transport_failure(error: BuyClientError) -> TransportResult:
    return TransportResult(None, None, error)


class HTTPClient:
    """
    Async HTTP client for one shop's API.

    This client provides:
    - Consistent headers (JSON content type, API key, customer access token)
    - One shared connection pool for every in-flight request
    - Classification of every outcome into a domain error
    - Support for GET, DELETE, POST, PUT and PATCH

    The client never stores anything it receives. ``customer_token`` is set by
    the caller and attached to every request until the caller changes it.

    Example:
        ```python
        async with HTTPClient(shop_domain="shop.example.com") as client:
            json, response, error = await client.get(customer_url(client.shop_domain, 42))
        ```
    """

    def __init__(
        self,
        shop_domain: Optional[str] = None,
        api_key: Optional[str] = None,
        app_id: Optional[str] = None,
        customer_token: Optional[str] = None,
        default_timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        scheme: str = "https"
    ):
        """
        Initialize HTTP client.

        Args:
            shop_domain: Shop host (defaults to SHOP_DOMAIN)
            api_key: Storefront API key (defaults to SHOPIFY_API_KEY)
            app_id: Storefront application ID (defaults to SHOPIFY_APP_ID)
            customer_token: Customer access token attached to every request (optional)
            default_timeout: Timeout in seconds for all requests (defaults to HTTP_TIMEOUT)
            http_client: Shared httpx.AsyncClient to use instead of an owned one (optional)
            scheme: URL scheme used by services building API URLs (default: https)
        """
        self.shop_domain = shop_domain or config.SHOP_DOMAIN
        self.api_key = api_key or config.SHOPIFY_API_KEY
        self.app_id = app_id or config.SHOPIFY_APP_ID
        self.customer_token = customer_token
        self.default_timeout = default_timeout if default_timeout is not None else config.HTTP_TIMEOUT
        self.scheme = scheme

        self._session = http_client
        self._owns_session = http_client is None

    @property
    def session(self) -> httpx.AsyncClient:
        """The shared httpx session, created on first use."""
        if self._session is None:
            self._session = httpx.AsyncClient(
                timeout=httpx.Timeout(self.default_timeout),
                follow_redirects=True
            )
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.aclose()
            self._session = None

    async def __aenter__(self) -> "HTTPClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def default_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": config.USER_AGENT,
        }
        if self.api_key:
            encoded = base64.b64encode(self.api_key.encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {encoded}"
        if self.app_id:
            headers["X-Shopify-App-Id"] = str(self.app_id)
        if self.customer_token:
            headers[CUSTOMER_ACCESS_TOKEN_HEADER] = self.customer_token
        return headers

    def get(
        self,
        url: str,
        *,
        callback: Optional[TransportCallback] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> RequestTask[TransportResult]:
        """
        Issue a GET request.

        Args:
            url: The URL to request
            callback: Called once as callback(json, response, error) (optional)
            headers: Headers overriding the defaults (optional)

        Returns:
            RequestTask resolving to TransportResult
        """
        return self._start("GET", url, None, callback, headers)

    def delete(
        self,
        url: str,
        *,
        callback: Optional[TransportCallback] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> RequestTask[TransportResult]:
        """
        Issue a DELETE request.

        Args:
            url: The URL to request
            callback: Called once as callback(json, response, error) (optional)
            headers: Headers overriding the defaults (optional)

        Returns:
            RequestTask resolving to TransportResult
        """
        return self._start("DELETE", url, None, callback, headers)

    def post(
        self,
        url: str,
        obj: Any = None,
        *,
        callback: Optional[TransportCallback] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> RequestTask[TransportResult]:
        """
        Issue a POST request.

        Args:
            url: The URL to request
            obj: Body object implementing to_json(), a pydantic model, or plain JSON (optional)
            callback: Called once as callback(json, response, error) (optional)
            headers: Headers overriding the defaults (optional)

        Returns:
            RequestTask resolving to TransportResult

        Raises:
            TypeError: If obj cannot be serialized
        """
        return self._start("POST", url, obj, callback, headers)

    def put(
        self,
        url: str,
        obj: Any = None,
        *,
        callback: Optional[TransportCallback] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> RequestTask[TransportResult]:
        """
        Issue a PUT request. Same arguments as post().
        """
        return self._start("PUT", url, obj, callback, headers)

    def patch(
        self,
        url: str,
        obj: Any = None,
        *,
        callback: Optional[TransportCallback] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> RequestTask[TransportResult]:
        """
        Issue a PATCH request. Same arguments as post().
        """
        return self._start("PATCH", url, obj, callback, headers)

    def _start(
        self,
        method: str,
        url: str,
        obj: Any,
        callback: Optional[TransportCallback],
        headers: Optional[Dict[str, str]]
    ) -> RequestTask[TransportResult]:
        # serialize eagerly so an unserializable body fails in the caller
        payload = to_payload(obj)
        request_headers = self.default_headers()
        if headers:
            request_headers.update(headers)

        return RequestTask(
            self._request(method, url, payload, request_headers),
            failure=_transport_failure,
            callback=callback,
            description=f"{method} {url}"
        )

    async def _request(
        self,
        method: str,
        url: str,
        payload: Any,
        headers: Dict[str, str]
    ) -> TransportResult:
        """
        Perform one request and classify its outcome.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH)
            url: The URL to request
            payload: JSON-compatible body, or None
            headers: Complete request headers

        Returns:
            TransportResult with either json or error populated
        """
        content = jsonlib.dumps(payload).encode("utf-8") if payload is not None else None
        logger.debug(f"{method} {url}")

        try:
            response = await self.session.request(
                method,
                url,
                content=content,
                headers=headers,
                timeout=self.default_timeout
            )

        except httpx.TimeoutException as e:
            logger.error(f"{method} {url} timed out after {self.default_timeout}s")
            return TransportResult(None, None, HTTPTimeoutError(
                message=f"Request to {url} timed out after {self.default_timeout}s",
                url=url,
                original_error=e
            ))

        except httpx.RequestError as e:
            logger.error(f"Connection failed for {method} {url}: {e}")
            return TransportResult(None, None, HTTPConnectionError(
                message=f"Connection failed for {method} {url}: {str(e)}",
                url=url,
                original_error=e
            ))

        json, parse_error = self._parse_json(response)
        status_code = response.status_code

        if status_code >= 300 or status_code < 200:
            error = error_from_json(json, status_code, url=url)
            logger.warning(f"HTTP {status_code} for {method} {url}: {error.message}")
            return TransportResult(json, response, error)

        if parse_error is not None:
            logger.warning(f"Malformed JSON from {method} {url}: {parse_error}")
            return TransportResult(None, response, MalformedResponseError(
                message=f"Response from {method} {url} is not valid JSON",
                url=url,
                status_code=status_code,
                original_error=parse_error
            ))

        logger.info(f"HTTP {status_code} for {method} {url}")
        return TransportResult(json, response, None)

    @staticmethod
    def _parse_json(response: httpx.Response):
        """Return (json, parse_error); an empty body parses to None."""
        if not response.content or not response.content.strip():
            return None, None
        try:
            return jsonlib.loads(response.content), None
        except ValueError as e:
            return None, e
