"""
HTTP plumbing: the single-shot transport and request-shaping helpers.
"""

from larkit.http.errors import format_errors
from larkit.http.transport import HttpTransport, RawResponse
from larkit.http.utils import compact, fill_api_path, format_url, merge_object, pick

__all__ = [
    "HttpTransport",
    "RawResponse",
    "compact",
    "fill_api_path",
    "format_errors",
    "format_url",
    "merge_object",
    "pick",
]
