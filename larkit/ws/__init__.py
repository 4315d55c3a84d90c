"""
Long-lived event connection: frame codec and socket-free session logic.
"""

from larkit.ws.config import WSConfig
from larkit.ws.data_cache import DataCache
from larkit.ws.enums import ErrorCode, FrameType, HeaderKey, HttpStatusCode, MessageType
from larkit.ws.pbbp2 import Frame, Header
from larkit.ws.session import WSSession

__all__ = [
    "DataCache",
    "ErrorCode",
    "Frame",
    "FrameType",
    "Header",
    "HeaderKey",
    "HttpStatusCode",
    "MessageType",
    "WSConfig",
    "WSSession",
]
