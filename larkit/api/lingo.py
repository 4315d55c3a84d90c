"""
Lingo (enterprise glossary) endpoints.

Payload shapes follow the open platform documentation; every method takes
`payload` ({"params", "data", "path", "headers"}) and `options`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from larkit.api.base import Group, Payload, Resource
from larkit.pagination import PageIterator

if TYPE_CHECKING:
    from larkit.client import Client
    from larkit.config import RequestOptions

BASE = "/open-apis/lingo/v1"


class Classification(Resource):
    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """List glossary classifications (params: page_size, page_token, repo_id)."""
        return await self._call("GET", f"{BASE}/classifications", payload, options)

    def list_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        return self._iterate("GET", f"{BASE}/classifications", payload, options)


class Draft(Resource):
    async def create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Create a draft entity awaiting review."""
        return await self._call("POST", f"{BASE}/drafts", payload, options)

    async def update(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Update a draft (path: draft_id)."""
        return await self._call("PUT", f"{BASE}/drafts/:draft_id", payload, options)


class Entity(Resource):
    async def create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("POST", f"{BASE}/entities", payload, options)

    async def delete(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("DELETE", f"{BASE}/entities/:entity_id", payload, options)

    async def get(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("GET", f"{BASE}/entities/:entity_id", payload, options)

    async def highlight(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Find glossary terms occurring in a block of text (data: text)."""
        return await self._call("POST", f"{BASE}/entities/highlight", payload, options)

    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("GET", f"{BASE}/entities", payload, options)

    def list_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        return self._iterate("GET", f"{BASE}/entities", payload, options)

    async def match(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Exact-match a word against entity keys and aliases (data: word)."""
        return await self._call("POST", f"{BASE}/entities/match", payload, options)

    async def search(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("POST", f"{BASE}/entities/search", payload, options)

    def search_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        """Page through search results; the query body is resent with every page."""
        return self._iterate("POST", f"{BASE}/entities/search", payload, options)

    async def update(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("PUT", f"{BASE}/entities/:entity_id", payload, options)


class File(Resource):
    async def download(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> bytes:
        """Download an image attached to an entity (path: file_token)."""
        response = await self._call(
            "GET", f"{BASE}/files/:file_token/download", payload, options, raw=True
        )
        return response.content

    async def upload(
        self,
        payload: Payload | None = None,
        options: "RequestOptions | None" = None,
        *,
        file: bytes,
        filename: str = "file",
    ) -> Any:
        """Upload an image (data: name)."""
        return await self._upload(
            f"{BASE}/files/upload", payload, options, files={"file": (filename, file)}
        )


class Repo(Resource):
    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """List glossary repositories visible to the caller."""
        return await self._call("GET", f"{BASE}/repos", payload, options)


class Lingo(Group):
    def __init__(self, client: "Client"):
        super().__init__(client)
        self.classification = Classification(client)
        self.draft = Draft(client)
        self.entity = Entity(client)
        self.file = File(client)
        self.repo = Repo(client)
