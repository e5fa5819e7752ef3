"""HelixDB HTTP client."""

import dataclasses
import logging
from typing import Any

import httpx

from .encoding import marshal_input
from .exceptions import (
    BodyReadError,
    EncodeError,
    HTTPStatusError,
    RequestBuildError,
    TransportError,
)
from .response import HelixResponse
from .types import QueryOptions

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:6969"
JSON_HEADERS = {"Content-Type": "application/json"}


def _resolve_options(options: QueryOptions | None, overrides: dict[str, Any]) -> QueryOptions:
    options = options or QueryOptions()
    if overrides:
        options = dataclasses.replace(options, **overrides)
    return options


def _failed(error: Exception, cause: Exception) -> HelixResponse:
    error.__cause__ = cause
    return HelixResponse(content=None, error=error)


def _complete(url: str, status_code: int, content: bytes) -> HelixResponse:
    if not 200 <= status_code < 300:
        body = content.decode("utf-8", errors="replace")
        logger.warning("POST %s → %d: %s", url, status_code, body[:200])
        return HelixResponse(content=None, error=HTTPStatusError(status_code, body))

    logger.debug("POST %s → %d (%d bytes)", url, status_code, len(content))
    return HelixResponse(content=content, error=None)


class _BaseClient:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def _prepare(
        self, http: httpx.Client | httpx.AsyncClient, endpoint: str, options: QueryOptions
    ) -> httpx.Request | HelixResponse:
        """Encode the payload and build the request, or return the failed response."""
        try:
            payload = marshal_input(options.data)
        except EncodeError as e:
            return _failed(EncodeError(f"failed to marshal input data: {e}"), e)

        try:
            if not endpoint:
                raise ValueError("endpoint must be a non-empty string")
            request = http.build_request(
                "POST",
                f"{self.base_url}/{endpoint.lstrip('/')}",
                content=payload,
                headers=JSON_HEADERS,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            return _failed(RequestBuildError(f"failed to create request: {e}"), e)

        logger.debug("POST %s (%d bytes)", request.url, len(payload))
        return request


class HelixClient(_BaseClient):
    """HTTP client for a HelixDB gateway.

    Args:
        base_url: Base URL of the gateway (e.g., "http://localhost:6969").
        timeout: Request timeout in seconds.
        http_client: Pre-configured ``httpx.Client`` to send requests with.
            ``timeout`` is ignored when given.

    Example:
        >>> client = HelixClient("http://localhost:6969")
        >>> user = Ref(User)
        >>> client.query("create_user", data={"name": "Alice"}).scan(Dest("user", user))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        *,
        http_client: httpx.Client | None = None,
    ):
        super().__init__(base_url)
        self._client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HelixClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def query(
        self,
        endpoint: str,
        options: QueryOptions | None = None,
        **overrides: Any,
    ) -> HelixResponse:
        """Run a stored query.

        Request failures never raise; they are stored on the returned
        response and raised by its decoding methods.

        Args:
            endpoint: Query name, appended to ``base_url``.
            options: Query options.
            **overrides: ``data`` and/or ``target``, replacing the matching
                fields of ``options``.

        Returns:
            HelixResponse for this call.

        Example:
            >>> result = client.query("get_user", data={"id": user_id}).as_map()
        """
        options = _resolve_options(options, overrides)

        request = self._prepare(self._client, endpoint, options)
        if isinstance(request, HelixResponse):
            return request

        try:
            response = self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error("POST %s connection failed: %s", request.url, e)
            return _failed(TransportError(f"failed to send request: {e}"), e)

        try:
            content = response.read()
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error("POST %s body read failed: %s", request.url, e)
            return _failed(BodyReadError(f"failed to read response body: {e}"), e)
        finally:
            response.close()

        return _complete(str(request.url), response.status_code, content)


class AsyncHelixClient(_BaseClient):
    """Async HTTP client for a HelixDB gateway.

    Same interface as HelixClient but uses async/await.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        *,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(base_url)
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHelixClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def query(
        self,
        endpoint: str,
        options: QueryOptions | None = None,
        **overrides: Any,
    ) -> HelixResponse:
        """Run a stored query asynchronously."""
        options = _resolve_options(options, overrides)

        request = self._prepare(self._client, endpoint, options)
        if isinstance(request, HelixResponse):
            return request

        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error("POST %s connection failed: %s", request.url, e)
            return _failed(TransportError(f"failed to send request: {e}"), e)

        try:
            content = await response.aread()
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error("POST %s body read failed: %s", request.url, e)
            return _failed(BodyReadError(f"failed to read response body: {e}"), e)
        finally:
            await response.aclose()

        return _complete(str(request.url), response.status_code, content)
