"""
Exceptions for larkit.

Failure taxonomy:
- TransportError: the request never produced an HTTP response (timeout,
  connection reset, DNS failure)
- RequestError and subclasses: the server answered with a non-success status
- PathParameterError: a `:name` placeholder had no matching path argument
- ProtocolError: a WebSocket frame could not be decoded
- EventDecryptError: an encrypted event body could not be decrypted

Single-shot calls log and re-raise these. Page iterators log them and end
the sequence instead (see larkit.pagination).
"""

from __future__ import annotations

from typing import Any


class LarkError(Exception):
    """Base exception for all larkit errors."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: Any = None,
        request: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.request = request or {}

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status={self.status_code})")
        return " ".join(parts)


class TransportError(LarkError):
    """Raised when the HTTP exchange fails before a response arrives."""


class RequestError(LarkError):
    """Raised when the server answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        status_text: str = "",
        **kwargs: Any,
    ):
        super().__init__(message, status_code=status_code, **kwargs)
        self.status_text = status_text


class AuthenticationError(RequestError):
    """Raised when authentication fails (401/403)."""


class RateLimitError(RequestError):
    """Raised when rate limit is exceeded (429)."""

    def __init__(self, message: str, *, retry_after: float | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class NotFoundError(RequestError):
    """Raised when a resource is not found (404)."""


class ValidationError(RequestError):
    """Raised when request validation fails (400/422)."""


class PathParameterError(LarkError):
    """Raised when a URL template references a path argument that was not supplied."""

    def __init__(self, name: str):
        super().__init__(f"request miss {name} path argument")
        self.name = name


class ProtocolError(LarkError):
    """
    Raised when a binary frame cannot be decoded.

    `instance` holds whatever fields were read before the failure, so the
    caller can log the partial message before dropping the frame.
    """

    def __init__(self, message: str, *, instance: Any = None):
        super().__init__(message)
        self.instance = instance


class EventDecryptError(LarkError):
    """Raised when an encrypted event body cannot be decrypted."""
