"""
Dispatch of pushed events and card callbacks.
"""

from larkit.dispatcher.aes import AESCipher
from larkit.dispatcher.card import CardActionHandler
from larkit.dispatcher.event import EventDispatcher
from larkit.dispatcher.request_handle import EVENT_TYPE_KEY, RequestHandle

__all__ = [
    "AESCipher",
    "CardActionHandler",
    "EVENT_TYPE_KEY",
    "EventDispatcher",
    "RequestHandle",
]
