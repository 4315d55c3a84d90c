"""
Card action callbacks.

A card callback is answered synchronously: whatever the card handler returns
is sent back as the HTTP response body (typically a new card). Handler
failures are logged and answered with an empty body so that the user's
client keeps its current card.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from larkit.dispatcher.event import Handler, call_handler
from larkit.dispatcher.request_handle import EVENT_TYPE_KEY, RequestHandle
from larkit.logger import LoggerLevel, LoggerProxy


class CardActionHandler:
    def __init__(
        self,
        card_handler: Handler,
        *,
        verification_token: str = "",
        encrypt_key: str = "",
        logger_level: LoggerLevel = LoggerLevel.INFO,
        logger: logging.Logger | None = None,
    ):
        self.card_handler = card_handler
        self.verification_token = verification_token
        self.encrypt_key = encrypt_key
        self.logger = LoggerProxy(logger_level, logger)
        self.request_handle = RequestHandle(
            encrypt_key=encrypt_key,
            verification_token=verification_token,
            logger=self.logger,
        )
        self.handles: dict[str, Handler] = {}
        self.logger.info("card-action-handle is ready")

    def register(self, handles: Mapping[str, Handler]) -> "CardActionHandler":
        """Route specific event types away from the card handler."""
        for event_type, handler in handles.items():
            self.handles[event_type] = handler
            self.logger.debug(f"register {event_type} handle")
        return self

    async def invoke(
        self,
        data: Mapping[str, Any] | None,
        *,
        headers: Mapping[str, Any] | None = None,
        raw_body: str | bytes | None = None,
    ) -> Any:
        if not self.request_handle.check_is_card_event_validated(data, headers, raw_body):
            self.logger.warn("verification failed event")
            return None

        target = self.request_handle.parse(data)
        handler = self.handles.get(target.get(EVENT_TYPE_KEY)) or self.card_handler
        try:
            result = await call_handler(handler, target)
        except Exception as e:
            self.logger.error(f"card handle failed: {e}", exc_info=True)
            return None
        self.logger.debug("execute card handle")
        return result
