"""
Event subscription endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from larkit.api.base import Group, Payload, Resource
from larkit.pagination import PageIterator

if TYPE_CHECKING:
    from larkit.client import Client
    from larkit.config import RequestOptions


class OutboundIp(Resource):
    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """IP addresses the platform pushes events from (params: page_size, page_token)."""
        return await self._call("GET", "/open-apis/event/v1/outbound_ip", payload, options)

    def list_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        return self._iterate("GET", "/open-apis/event/v1/outbound_ip", payload, options)


class Event(Group):
    def __init__(self, client: "Client"):
        super().__init__(client)
        self.outbound_ip = OutboundIp(client)
