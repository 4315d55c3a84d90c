"""
larkit - async Python SDK for the Feishu / Lark open platform.

Provides:

- **Client**: typed endpoint groups over one shared HTTP transport
- **Pagination**: cursor-driven async iteration over list endpoints
- **Event dispatch**: signature checks, decryption and routing of pushed events
- **Long-lived connection**: pbbp2 frame codec and socket-free session logic

Quick Start:
    >>> from larkit import Client, RequestOptions
    >>>
    >>> async with Client(app_id="cli_xxx", app_secret="...") as client:
    ...     options = RequestOptions(tenant_access_token="t-xxx")
    ...     async for page in client.mail.mailgroup.list_with_iterator(None, options):
    ...         ...
"""

__version__ = "0.1.0"

from larkit.client import Client
from larkit.config import ClientConfig, Domain, RequestOptions
from larkit.dispatcher import CardActionHandler, EventDispatcher
from larkit.errors import LarkError, ProtocolError
from larkit.logger import LoggerLevel
from larkit.pagination import PageIterator, PageResult, PageResultKind

__all__ = [
    "__version__",
    # Client
    "Client",
    "ClientConfig",
    "Domain",
    "RequestOptions",
    "LoggerLevel",
    # Pagination
    "PageIterator",
    "PageResult",
    "PageResultKind",
    # Events
    "CardActionHandler",
    "EventDispatcher",
    # Errors
    "LarkError",
    "ProtocolError",
]
