"""
Base class for endpoint groups.

A Resource knows nothing about HTTP beyond "method + URL template". It hands
formatted requests to the owning Client, which fills path arguments, prefixes
the domain and talks to the transport.

Each list endpoint is exposed twice:
- `list(...)`: one page, failures raised to the caller
- `list_with_iterator(...)`: a PageIterator that walks every page and ends
  with None on failure
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from larkit.http.utils import compact
from larkit.pagination import PageIterator

if TYPE_CHECKING:
    from larkit.client import Client
    from larkit.config import RequestOptions

Payload = dict[str, Any]


class Resource:
    """A group of endpoints sharing one client."""

    def __init__(self, client: "Client"):
        self._client = client

    async def _call(
        self,
        method: str,
        url: str,
        payload: Payload | None = None,
        options: "RequestOptions | None" = None,
        *,
        raw: bool = False,
    ) -> Any:
        return await self._client.request(method, url, payload, options, raw=raw)

    async def _upload(
        self,
        url: str,
        payload: Payload | None,
        options: "RequestOptions | None",
        files: dict[str, Any],
    ) -> Any:
        formatted = self._client.format_payload(payload, options)
        return await self._client.send(
            "POST",
            url,
            path=formatted["path"],
            headers=formatted["headers"],
            params=formatted["params"],
            data=formatted["data"],
            files=files,
        )

    def _iterate(
        self,
        method: str,
        url: str,
        payload: Payload | None = None,
        options: "RequestOptions | None" = None,
    ) -> PageIterator:
        formatted = self._client.format_payload(payload, options)
        headers = compact(formatted["headers"])

        async def fetch_page(params: dict[str, Any]) -> Any:
            return await self._client.send(
                method,
                url,
                path=formatted["path"],
                headers=headers,
                params=compact(params),
                data=formatted["data"],
            )

        return PageIterator(fetch_page, formatted["params"], name=f"{method} {url}")


class Group:
    """Namespace holding several resources of one product line."""

    def __init__(self, client: "Client"):
        self._client = client
