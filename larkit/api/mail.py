"""
Mail endpoints: mail groups, public mailboxes, user mailboxes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from larkit.api.base import Group, Payload, Resource
from larkit.pagination import PageIterator

if TYPE_CHECKING:
    from larkit.client import Client
    from larkit.config import RequestOptions

BASE = "/open-apis/mail/v1"


class Mailgroup(Resource):
    async def create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("POST", f"{BASE}/mailgroups", payload, options)

    async def delete(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("DELETE", f"{BASE}/mailgroups/:mailgroup_id", payload, options)

    async def get(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("GET", f"{BASE}/mailgroups/:mailgroup_id", payload, options)

    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """List mail groups (params: manager_user_id, user_id_type, page_token, page_size)."""
        return await self._call("GET", f"{BASE}/mailgroups", payload, options)

    def list_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        return self._iterate("GET", f"{BASE}/mailgroups", payload, options)

    async def patch(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Update only the fields present in data."""
        return await self._call("PATCH", f"{BASE}/mailgroups/:mailgroup_id", payload, options)

    async def update(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Replace the mail group's settings."""
        return await self._call("PUT", f"{BASE}/mailgroups/:mailgroup_id", payload, options)


class MailgroupMember(Resource):
    async def batch_create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call(
            "POST", f"{BASE}/mailgroups/:mailgroup_id/members/batch_create", payload, options
        )

    async def batch_delete(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call(
            "DELETE", f"{BASE}/mailgroups/:mailgroup_id/members/batch_delete", payload, options
        )

    async def create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("POST", f"{BASE}/mailgroups/:mailgroup_id/members", payload, options)

    async def delete(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call(
            "DELETE", f"{BASE}/mailgroups/:mailgroup_id/members/:member_id", payload, options
        )

    async def get(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call(
            "GET", f"{BASE}/mailgroups/:mailgroup_id/members/:member_id", payload, options
        )

    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("GET", f"{BASE}/mailgroups/:mailgroup_id/members", payload, options)

    def list_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        return self._iterate("GET", f"{BASE}/mailgroups/:mailgroup_id/members", payload, options)


class PublicMailbox(Resource):
    async def create(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("POST", f"{BASE}/public_mailboxes", payload, options)

    async def delete(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("DELETE", f"{BASE}/public_mailboxes/:public_mailbox_id", payload, options)

    async def get(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("GET", f"{BASE}/public_mailboxes/:public_mailbox_id", payload, options)

    async def list(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        return await self._call("GET", f"{BASE}/public_mailboxes", payload, options)

    def list_with_iterator(
        self, payload: Payload | None = None, options: "RequestOptions | None" = None
    ) -> PageIterator:
        return self._iterate("GET", f"{BASE}/public_mailboxes", payload, options)


class UserMailboxMessage(Resource):
    async def send(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Send a message from a user mailbox (path: user_mailbox_id)."""
        return await self._call(
            "POST", f"{BASE}/user_mailboxes/:user_mailbox_id/messages/send", payload, options
        )


class User(Resource):
    async def query(self, payload: Payload | None = None, options: "RequestOptions | None" = None) -> Any:
        """Look up mailbox status for a list of addresses (data: email_list)."""
        return await self._call("POST", f"{BASE}/users/query", payload, options)


class Mail(Group):
    def __init__(self, client: "Client"):
        super().__init__(client)
        self.mailgroup = Mailgroup(client)
        self.mailgroup_member = MailgroupMember(client)
        self.public_mailbox = PublicMailbox(client)
        self.user_mailbox_message = UserMailboxMessage(client)
        self.user = User(client)
