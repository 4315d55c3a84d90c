"""
HTTP transport for larkit.

One HttpTransport wraps one lazily created `httpx.AsyncClient`. Every call to
`request()` is a single attempt: there is no retry and no backoff here, so a
failure reaches the caller exactly once and the caller decides what to do
with it (single-shot endpoints re-raise, page iterators stop).

Error mapping:
    - timeouts and network errors -> TransportError
    - 401/403 -> AuthenticationError
    - 429 -> RateLimitError (Retry-After recorded, never slept on)
    - 404 -> NotFoundError
    - 400/422 -> ValidationError
    - any other non-2xx -> RequestError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from larkit.config import DEFAULT_USER_AGENT
from larkit.errors import (
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    RequestError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Undecoded response, returned for file downloads."""

    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    status_code: int = 200


class HttpTransport:
    """
    Single-shot async HTTP transport.

    Usage:
        async with HttpTransport(timeout=10) as transport:
            body = await transport.request(
                "GET",
                "https://open.feishu.cn/open-apis/event/v1/outbound_ip",
                params={"page_size": 10},
            )
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        log_requests: bool = False,
        log_responses: bool = False,
        client: httpx.AsyncClient | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.log_requests = log_requests
        self.log_responses = log_responses
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: Any = None,
        files: dict[str, Any] | None = None,
        raw: bool = False,
    ) -> Any:
        """
        Execute one HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            url: Absolute URL
            headers: Request headers
            params: Query parameters; list values are sent as repeated keys
            data: JSON body, omitted when empty
            files: Multipart files; `data` is then sent as form fields
            raw: Return a RawResponse instead of the decoded JSON body

        Returns:
            Decoded JSON body, or RawResponse when `raw` is set

        Raises:
            TransportError: On timeouts and network failures
            RequestError: On non-success status codes
        """
        client = await self._get_client()
        request_info = {"method": method, "url": url, "params": params, "data": data}

        send_headers = {"User-Agent": self.user_agent}
        send_headers.update({k: str(v) for k, v in (headers or {}).items()})

        if self.log_requests:
            logger.debug(f"[http] {method} {url} params={params} body={data}")

        body_kwargs: dict[str, Any] = {}
        if files:
            body_kwargs["files"] = files
            if data:
                body_kwargs["data"] = data
        elif data:
            body_kwargs["json"] = data

        try:
            response = await client.request(
                method=method,
                url=url,
                params=params or None,
                headers=send_headers,
                **body_kwargs,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout: {e}", request=request_info) from e
        except httpx.TransportError as e:
            raise TransportError(f"Network error: {e}", request=request_info) from e

        if self.log_responses:
            logger.debug(
                f"[http] Response: status={response.status_code} "
                f"body={response.text[:500] if not raw and response.text else 'omitted'}"
            )

        self._check_response(response, request_info)

        if raw:
            return RawResponse(
                content=response.content,
                headers=dict(response.headers),
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RequestError(
                f"Malformed response body: {e}",
                status_code=response.status_code,
                response_body=response.text,
                request=request_info,
            ) from e

    def _check_response(self, response: httpx.Response, request_info: dict[str, Any]) -> None:
        """
        Check response for errors and raise appropriate exceptions.

        Raises:
            AuthenticationError: For 401/403
            RateLimitError: For 429
            NotFoundError: For 404
            ValidationError: For 400/422
            RequestError: For other errors
        """
        if response.is_success:
            return

        status = response.status_code
        body = _error_body(response)
        common = {
            "status_code": status,
            "status_text": response.reason_phrase,
            "response_body": body,
            "request": request_info,
        }

        if status == 401 or status == 403:
            raise AuthenticationError(f"Authentication failed: {response.text}", **common)

        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "Rate limit exceeded",
                retry_after=float(retry_after) if retry_after else None,
                **common,
            )

        if status == 404:
            raise NotFoundError(f"Resource not found: {response.text}", **common)

        if status == 400 or status == 422:
            raise ValidationError(f"Validation error: {response.text}", **common)

        raise RequestError(f"Request failed: {response.text}", **common)

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _error_body(response: httpx.Response) -> Any:
    """Decoded JSON error body if there is one, else the text."""
    try:
        return response.json()
    except ValueError:
        return response.text
