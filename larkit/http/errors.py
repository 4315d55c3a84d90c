"""
Turn request failures into loggable structures.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from larkit.errors import LarkError, RequestError
from larkit.http.utils import pick


def _request_summary(request: dict[str, Any]) -> dict[str, Any]:
    url = request.get("url")
    if not url:
        return {}
    parts = urlsplit(str(url))
    return {
        "protocol": parts.scheme,
        "host": parts.netloc,
        "path": parts.path,
        "method": request.get("method"),
    }


def format_errors(error: Any) -> list[Any]:
    """
    Summarize a failure for the error log.

    For larkit errors raised by the transport the summary holds the message,
    the request config, where the request went and (when there was one) the
    response; the server's error body is appended as a second entry so that
    its `code` and `msg` are visible at a glance. Anything else is returned
    as `[error]`.
    """
    if not isinstance(error, LarkError):
        return [error]

    summary: dict[str, Any] = {
        "message": error.message,
        "config": pick(error.request, ["data", "url", "params", "method"]),
        "request": _request_summary(error.request),
    }
    if isinstance(error, RequestError):
        summary["response"] = {
            "data": error.response_body,
            "status": error.status_code,
            "status_text": error.status_text,
        }

    errors: list[Any] = [summary]
    if error.response_body:
        errors.append(error.response_body)
    return errors
