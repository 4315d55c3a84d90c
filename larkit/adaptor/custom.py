"""
Framework-neutral adaptor: feed it headers and an already parsed body.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from larkit.adaptor.challenge import generate_challenge
from larkit.dispatcher.card import CardActionHandler
from larkit.dispatcher.event import EventDispatcher

Dispatcher = EventDispatcher | CardActionHandler


def adapt_custom(
    dispatcher: Dispatcher,
    *,
    auto_challenge: bool = False,
) -> Callable[[Mapping[str, Any], Mapping[str, Any], str | bytes | None], Awaitable[str | None]]:
    """
    Build `handle(headers, body, raw_body=None) -> str | None`.

    The returned string is the HTTP response body: the challenge answer,
    the card handler's JSON result, or "" for events. None means the
    request carried no headers or body and was ignored.
    """

    async def handle(
        headers: Mapping[str, Any],
        body: Mapping[str, Any],
        raw_body: str | bytes | None = None,
    ) -> str | None:
        if not body or not headers:
            return None

        if auto_challenge:
            is_challenge, challenge = generate_challenge(body, dispatcher.encrypt_key)
            if is_challenge:
                return json.dumps(challenge)

        value = await dispatcher.invoke(body, headers=headers, raw_body=raw_body)

        # events need no response body
        if isinstance(dispatcher, CardActionHandler):
            return json.dumps(value)
        return ""

    return handle
