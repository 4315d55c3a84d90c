"""
Cursor pagination for list endpoints.

Every paginated endpoint answers with an envelope whose `data` field looks like:

    {"items": [...], "has_more": true, "page_token": "abc", ...}

Depending on the server version the cursor is called `page_token` or
`next_page_token`; both mean the same thing and `page_token` wins when both
are present.

PageIterator turns a single-page fetch into a lazy async sequence:

    async for page in client.lingo.entity.list_with_iterator({"params": {"page_size": 20}}):
        if page is None:
            break  # fetch failed, see the error log
        for entity in page.get("items", []):
            ...

Each yielded value is the page's `data` with the pagination fields removed.
If a fetch fails the sequence yields a single `None` and ends; it never
raises into the `async for`. Callers that need to tell "no more data" apart
from "fetch failed" should use `results()`, which yields tagged PageResult
values instead.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

PAGINATION_FIELDS = frozenset({"has_more", "page_token", "next_page_token"})

FetchPage = Callable[[dict[str, Any]], Awaitable[Any]]


# =============================================================================
# Page Model
# =============================================================================


class ListPage(BaseModel):
    """
    One page of a list response.

    Fields other than the three pagination controls are endpoint-specific and
    kept as extras so that `remainder()` can hand them back untouched.
    """

    model_config = ConfigDict(extra="allow")

    has_more: bool | None = None
    page_token: str | None = None
    next_page_token: str | None = None

    @property
    def cursor(self) -> str | None:
        """Continuation cursor, whichever alias the server used."""
        return self.page_token or self.next_page_token

    def remainder(self) -> dict[str, Any]:
        """Every field the server sent except the pagination controls."""
        return {
            key: value
            for key, value in self.model_dump().items()
            if key not in PAGINATION_FIELDS
        }

    @classmethod
    def from_response(cls, response: Any) -> "ListPage":
        """
        Build a page from a raw response envelope (`{"code", "msg", "data"}`).

        A missing or empty `data` gives an empty, final page.
        """
        if response is None:
            return cls()
        if not isinstance(response, Mapping):
            raise ValueError(f"response envelope must be an object, got {type(response).__name__}")
        data = response.get("data") or {}
        return cls.model_validate(data)


# =============================================================================
# Iteration State
# =============================================================================


@dataclass(slots=True)
class IterationCursor:
    """Cursor state owned by one walk over a paginated endpoint."""

    page_token: str | None = None
    has_more: bool = True

    def advance(self, page: ListPage) -> None:
        self.has_more = bool(page.has_more)
        self.page_token = page.cursor


class PageResultKind(str, Enum):
    """Kinds of value produced by PageIterator.results()."""

    ITEM = "item"
    END = "end"
    FAULT = "fault"


@dataclass(frozen=True, slots=True)
class PageResult:
    """Tagged pagination outcome: a page, the end of the sequence, or a failure."""

    kind: PageResultKind
    value: dict[str, Any] | None = None
    error: BaseException | None = None

    @classmethod
    def item(cls, value: dict[str, Any]) -> "PageResult":
        return cls(kind=PageResultKind.ITEM, value=value)

    @classmethod
    def end(cls) -> "PageResult":
        return cls(kind=PageResultKind.END)

    @classmethod
    def fault(cls, error: BaseException) -> "PageResult":
        return cls(kind=PageResultKind.FAULT, error=error)

    @property
    def ok(self) -> bool:
        return self.kind is PageResultKind.ITEM


# =============================================================================
# Iterator
# =============================================================================


class PageIterator:
    """
    Lazy async sequence over a paginated endpoint.

    Only one fetch is in flight at a time. Each `async for` (and each call to
    `results()` or `items()`) starts a fresh walk from the first page with its
    own cursor; nothing is shared between walks. Stopping iteration early is
    the only form of cancellation.
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        params: Mapping[str, Any] | None = None,
        *,
        name: str = "",
    ):
        """
        Args:
            fetch_page: Coroutine function taking the query parameters for one
                page and returning the raw response envelope
            params: Query parameters sent with every page; `page_token` is
                overwritten on each request
            name: Label used in log messages
        """
        self._fetch_page = fetch_page
        self._params = dict(params or {})
        self.name = name

    def __aiter__(self) -> AsyncIterator[dict[str, Any] | None]:
        return self._legacy()

    async def _legacy(self) -> AsyncIterator[dict[str, Any] | None]:
        async for result in self.results():
            if result.kind is PageResultKind.ITEM:
                yield result.value
            elif result.kind is PageResultKind.FAULT:
                yield None

    async def results(self) -> AsyncIterator[PageResult]:
        """
        Walk the pages, yielding tagged results.

        Yields PageResult.item for every page, then exactly one terminal
        PageResult: end() when the server reports no more pages, or fault()
        when a fetch or a page parse fails.
        """
        cursor = IterationCursor()

        while cursor.has_more:
            params = {**self._params, "page_token": cursor.page_token}
            try:
                response = await self._fetch_page(params)
                page = ListPage.from_response(response)
            except Exception as e:
                logger.warning(f"[pagination] {self.name or 'list'} stopped after fetch failure: {e}")
                yield PageResult.fault(e)
                return

            yield PageResult.item(page.remainder())
            cursor.advance(page)

        yield PageResult.end()

    async def items(self) -> AsyncIterator[Any]:
        """Flatten the `items` array of every successfully fetched page."""
        async for result in self.results():
            if result.ok:
                for item in result.value.get("items") or []:
                    yield item


def paginate(
    fetch_page: FetchPage,
    params: Mapping[str, Any] | None = None,
    *,
    name: str = "",
) -> PageIterator:
    """Create a PageIterator for a single-page fetch function."""
    return PageIterator(fetch_page, params, name=name)
