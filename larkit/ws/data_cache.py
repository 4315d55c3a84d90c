"""
Reassembly of events split across several data frames.

A large event arrives as `total` frames (the `sum` header) sharing one
`message_id`, each frame carrying part `seq` of the UTF-8 JSON body. Parts
may arrive in any order. Incomplete messages are dropped after EXPIRE_SECONDS.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from larkit.logger import LoggerProxy

EXPIRE_SECONDS = 10.0


@dataclass(slots=True)
class _Entry:
    parts: list[bytes | None]
    trace_id: str
    message_id: str
    created_at: float = field(default=0.0)


class DataCache:
    """Collects message parts until every part has arrived."""

    def __init__(
        self,
        *,
        logger: LoggerProxy | None = None,
        expire_seconds: float = EXPIRE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cache: dict[str, _Entry] = {}
        self.logger = logger or LoggerProxy()
        self.expire_seconds = expire_seconds
        self._clock = clock

    def merge_data(
        self,
        *,
        message_id: str,
        total: int,
        seq: int,
        trace_id: str,
        data: bytes,
    ) -> Any | None:
        """
        Add one part.

        Returns:
            The decoded JSON message once all parts are present, else None

        Raises:
            ValueError: If `seq` is outside 0..total-1 or the joined body is not JSON
        """
        self.clear_expired()

        entry = self.cache.get(message_id)
        if entry is None:
            entry = _Entry(
                parts=[None] * total,
                trace_id=trace_id,
                message_id=message_id,
                created_at=self._clock(),
            )
            self.cache[message_id] = entry

        if not 0 <= seq < len(entry.parts):
            raise ValueError(f"part {seq} out of range for message {message_id} with {len(entry.parts)} parts")
        entry.parts[seq] = data

        if any(part is None for part in entry.parts):
            return None

        del self.cache[message_id]
        body = b"".join(entry.parts)
        return json.loads(body.decode("utf-8"))

    def clear_expired(self) -> int:
        """Drop incomplete messages older than the expiry; return how many."""
        now = self._clock()
        expired = [
            key
            for key, entry in self.cache.items()
            if now - entry.created_at > self.expire_seconds
        ]
        for key in expired:
            entry = self.cache.pop(key)
            self.logger.debug(
                f"{entry.message_id} event data is deleted as expired, trace_id: {entry.trace_id}"
            )
        return len(expired)
