"""
Request-shaping helpers shared by the client and the endpoint groups.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from larkit.errors import PathParameterError

_PATH_PARAM = re.compile(r":([^/]+)")


def fill_api_path(api_path: str, path_supplement: Mapping[str, Any] | None = None) -> str:
    """
    Substitute `:name` placeholders in a URL template.

    Example:
        fill_api_path("/open-apis/lingo/v1/entities/:entity_id", {"entity_id": "e1"})
        -> "/open-apis/lingo/v1/entities/e1"

    Raises:
        PathParameterError: If a placeholder has no matching argument
    """
    supplement = path_supplement or {}

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if supplement.get(name) is not None:
            return str(supplement[name])
        raise PathParameterError(name)

    return _PATH_PARAM.sub(_replace, api_path)


def format_url(url: str | None) -> str:
    """Strip a leading slash so the URL can be joined onto the domain."""
    if not url:
        return ""
    return url[1:] if url.startswith("/") else url


def merge_object(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two mappings; values from `override` win unless they are None."""
    merged = dict(base)
    for key, value in override.items():
        if value is not None:
            merged[key] = value
    return merged


def pick(obj: Any, keys: Iterable[str]) -> dict[str, Any]:
    """Select the given keys (or attributes) from a mapping or object."""
    result: dict[str, Any] = {}
    if obj is None:
        return result
    for key in keys:
        if isinstance(obj, Mapping):
            if key in obj:
                result[key] = obj[key]
        elif hasattr(obj, key):
            result[key] = getattr(obj, key)
    return result


def compact(mapping: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop falsy values (None, "", 0, empty containers)."""
    return {key: value for key, value in (mapping or {}).items() if value}
