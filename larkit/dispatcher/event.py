"""
Event dispatcher.

Usage:
    dispatcher = EventDispatcher(encrypt_key="...").register({
        "im.message.receive_v1": on_message,
    })

    # from a webhook
    await dispatcher.invoke(body, headers=request.headers, raw_body=raw)

    # from the long-lived connection (already authenticated)
    await dispatcher.invoke(body, need_check=False)

Handlers receive the flattened event dict (see RequestHandle.parse) and may
be plain functions or coroutine functions.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from larkit.dispatcher.request_handle import EVENT_TYPE_KEY, RequestHandle
from larkit.logger import LoggerLevel, LoggerProxy

Handler = Callable[[dict[str, Any]], Any | Awaitable[Any]]


async def call_handler(handler: Handler, data: dict[str, Any]) -> Any:
    result = handler(data)
    if inspect.isawaitable(result):
        result = await result
    return result


class EventDispatcher:
    """Routes parsed events to handlers registered by event type."""

    def __init__(
        self,
        *,
        verification_token: str = "",
        encrypt_key: str = "",
        logger_level: LoggerLevel = LoggerLevel.INFO,
        logger: logging.Logger | None = None,
    ):
        self.verification_token = verification_token
        self.encrypt_key = encrypt_key
        self.logger = LoggerProxy(logger_level, logger)
        self.request_handle = RequestHandle(
            encrypt_key=encrypt_key,
            verification_token=verification_token,
            logger=self.logger,
        )
        self.handles: dict[str, Handler] = {}
        self.logger.info("event-dispatch is ready")

    def register(self, handles: Mapping[str, Handler]) -> "EventDispatcher":
        """
        Register handlers by event type.

        Registering a type twice replaces the earlier handler and logs an error.
        """
        for event_type, handler in handles.items():
            if event_type in self.handles:
                self.logger.error(f"this {event_type} handle is registered")
            self.handles[event_type] = handler
            self.logger.debug(f"register {event_type} handle")
        return self

    async def invoke(
        self,
        data: Mapping[str, Any] | None,
        *,
        headers: Mapping[str, Any] | None = None,
        raw_body: str | bytes | None = None,
        need_check: bool = True,
    ) -> Any:
        """
        Verify, parse and dispatch one event.

        Returns:
            The handler's return value; None when verification fails; a
            "no <type> event handle" string when nothing is registered
        """
        if need_check and not self.request_handle.check_is_event_validated(data, headers, raw_body):
            self.logger.warn("verification failed event")
            return None

        target = self.request_handle.parse(data)
        event_type = target.get(EVENT_TYPE_KEY)
        handler = self.handles.get(event_type)
        if handler is not None:
            result = await call_handler(handler, target)
            self.logger.debug(f"execute {event_type} handle")
            return result

        self.logger.warn(f"no {event_type} handle")
        return f"no {event_type} event handle"
