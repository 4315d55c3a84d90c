"""
Master data management endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from larkit.api.base import Group, Payload, Resource
from larkit.pagination import PageIterator

if TYPE_CHECKING:
    from larkit.client import Client
    from larkit.config import RequestOptions


class UserAuthDataRelation(Resource):
    """Bind users to master-data dimensions (data: root_dimension_type, sub_dimension_types, ...)."""

    async def bind(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("POST", "/open-apis/mdm/v1/user_auth_data_relations/bind", payload, options)

    async def unbind(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("POST", "/open-apis/mdm/v1/user_auth_data_relations/unbind", payload, options)


class CountryRegion(Resource):
    async def get(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Fetch several country/region records by id (params: fields, ids, languages)."""
        return await self._call("GET", "/open-apis/mdm/v3/batch_country_region", payload, options)

    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("GET", "/open-apis/mdm/v3/country_regions", payload, options)

    def list_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        return self._iterate("GET", "/open-apis/mdm/v3/country_regions", payload, options)


class Mdm(Group):
    def __init__(self, client: "Client"):
        super().__init__(client)
        self.user_auth_data_relation = UserAuthDataRelation(client)
        self.country_region = CountryRegion(client)
