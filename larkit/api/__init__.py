"""
Endpoint groups.

Each product line is a Group of Resources attached to the Client:

    client.lingo.entity.list(...)
    client.mail.mailgroup.list_with_iterator(...)
"""

from larkit.api.base import Group, Resource
from larkit.api.block import Block
from larkit.api.event import Event
from larkit.api.lingo import Lingo
from larkit.api.mail import Mail
from larkit.api.mdm import Mdm

__all__ = [
    "Block",
    "Event",
    "Group",
    "Lingo",
    "Mail",
    "Mdm",
    "Resource",
]
