"""
Document block endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from larkit.api.base import Group, Payload, Resource

if TYPE_CHECKING:
    from larkit.client import Client
    from larkit.config import RequestOptions


class BlockEntity(Resource):
    async def create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Create a block entity (data: title, block_type_id, source_data, ...)."""
        return await self._call("POST", "/open-apis/block/v2/entities", payload, options)

    async def update(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("PUT", "/open-apis/block/v2/entities/:block_id", payload, options)


class BlockMessage(Resource):
    async def create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Push an update message to the clients rendering a block."""
        return await self._call("POST", "/open-apis/block/v2/message", payload, options)


class Block(Group):
    def __init__(self, client: "Client"):
        super().__init__(client)
        self.entity = BlockEntity(client)
        self.message = BlockMessage(client)
