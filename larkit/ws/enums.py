"""
Constants of the long-lived event connection.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class ErrorCode(IntEnum):
    """Business codes returned by the connect-config endpoint."""

    OK = 0
    SYSTEM_BUSY = 1
    FORBIDDEN = 403
    AUTH_FAILED = 514
    INTERNAL_ERROR = 1000040343
    EXCEED_CONN_LIMIT = 1000040350


class FrameType(IntEnum):
    """Value of Frame.method."""

    CONTROL = 0
    DATA = 1


class HeaderKey(str, Enum):
    TYPE = "type"
    MESSAGE_ID = "message_id"
    SUM = "sum"
    SEQ = "seq"
    TRACE_ID = "trace_id"
    BIZ_RT = "biz_rt"
    HANDSHAKE_STATUS = "handshake-status"
    HANDSHAKE_MSG = "handshake-msg"
    HANDSHAKE_AUTHERRCODE = "handshake-autherrcode"


class MessageType(str, Enum):
    EVENT = "event"
    CARD = "card"
    PING = "ping"
    PONG = "pong"


class HttpStatusCode(IntEnum):
    OK = 200
    INTERNAL_SERVER_ERROR = 500
