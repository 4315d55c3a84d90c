"""
Tests for cursor pagination.

Tests cover:
- Cursor passing (page_token and next_page_token)
- Termination on has_more
- Fault handling (single None, no further fetches)
- Tagged results and item flattening
- Restart semantics
"""

import pytest
from unittest.mock import AsyncMock

from conftest import page_envelope
from larkit.errors import RequestError, TransportError
from larkit.pagination import (
    IterationCursor,
    ListPage,
    PageIterator,
    PageResult,
    PageResultKind,
    paginate,
)


async def collect(iterable):
    return [value async for value in iterable]


def sent_tokens(fetch):
    return [call.args[0].get("page_token") for call in fetch.await_args_list]


# =============================================================================
# ListPage Tests
# =============================================================================


class TestListPage:
    """Tests for the page model."""

    def test_cursor_prefers_page_token(self):
        page = ListPage.model_validate({"page_token": "a", "next_page_token": "b"})
        assert page.cursor == "a"

    def test_cursor_falls_back_to_next_page_token(self):
        page = ListPage.model_validate({"next_page_token": "b"})
        assert page.cursor == "b"

    def test_remainder_drops_only_pagination_fields(self):
        page = ListPage.model_validate(
            {"items": [1, 2], "total": 2, "has_more": True, "page_token": "a", "next_page_token": "b"}
        )
        assert page.remainder() == {"items": [1, 2], "total": 2}

    def test_from_response_missing_data(self):
        page = ListPage.from_response({"code": 0, "msg": "success"})
        assert page.has_more is None
        assert page.remainder() == {}

    def test_from_response_none(self):
        assert ListPage.from_response(None).remainder() == {}

    def test_from_response_rejects_non_object(self):
        with pytest.raises(ValueError, match="must be an object"):
            ListPage.from_response("oops")


class TestIterationCursor:
    def test_initial_state(self):
        cursor = IterationCursor()
        assert cursor.page_token is None
        assert cursor.has_more is True

    def test_advance(self):
        cursor = IterationCursor()
        cursor.advance(ListPage.model_validate({"has_more": True, "next_page_token": "n"}))
        assert cursor.page_token == "n"
        assert cursor.has_more is True

        cursor.advance(ListPage.model_validate({}))
        assert cursor.page_token is None
        assert cursor.has_more is False


# =============================================================================
# PageIterator Tests
# =============================================================================


class TestPageIterator:
    """Tests for the legacy `async for` sequence."""

    @pytest.mark.asyncio
    async def test_walks_every_page(self):
        fetch = AsyncMock(
            side_effect=[
                page_envelope([1], True, page_token="p2"),
                page_envelope([2], True, next_page_token="p3"),
                page_envelope([3], False),
            ]
        )

        pages = await collect(PageIterator(fetch, {"page_size": 1}))

        assert pages == [{"items": [1]}, {"items": [2]}, {"items": [3]}]
        assert fetch.await_count == 3
        assert sent_tokens(fetch) == [None, "p2", "p3"]
        assert all(call.args[0]["page_size"] == 1 for call in fetch.await_args_list)

    @pytest.mark.asyncio
    async def test_single_page(self):
        fetch = AsyncMock(return_value=page_envelope(["a"], False))

        pages = await collect(PageIterator(fetch))

        assert pages == [{"items": ["a"]}]
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_page_token_wins_over_next_page_token(self):
        fetch = AsyncMock(
            side_effect=[
                page_envelope([1], True, page_token="a", next_page_token="b"),
                page_envelope([2], False),
            ]
        )

        await collect(PageIterator(fetch))

        assert sent_tokens(fetch) == [None, "a"]

    @pytest.mark.asyncio
    async def test_missing_data_yields_empty_page_and_stops(self):
        fetch = AsyncMock(return_value={"code": 0, "msg": "success"})

        pages = await collect(PageIterator(fetch))

        assert pages == [{}]
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_fault_on_second_fetch(self):
        fetch = AsyncMock(
            side_effect=[
                page_envelope([1], True, page_token="a"),
                RequestError("boom", status_code=500),
            ]
        )

        pages = await collect(PageIterator(fetch))

        assert pages == [{"items": [1]}, None]
        assert fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_fault_on_first_fetch(self):
        fetch = AsyncMock(side_effect=TransportError("Network error: reset"))

        pages = await collect(PageIterator(fetch))

        assert pages == [None]
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_malformed_envelope_is_a_fault(self):
        fetch = AsyncMock(return_value="not an envelope")

        pages = await collect(PageIterator(fetch))

        assert pages == [None]

    @pytest.mark.asyncio
    async def test_fault_is_logged(self, caplog):
        fetch = AsyncMock(side_effect=RequestError("boom"))

        with caplog.at_level("WARNING", logger="larkit.pagination"):
            await collect(PageIterator(fetch, name="GET /open-apis/x"))

        assert "GET /open-apis/x stopped after fetch failure: boom" in caplog.text

    @pytest.mark.asyncio
    async def test_early_break_stops_fetching(self):
        fetch = AsyncMock(return_value=page_envelope([1], True, page_token="again"))

        async for page in PageIterator(fetch):
            assert page == {"items": [1]}
            break

        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_each_iteration_restarts_from_first_page(self):
        responses = {
            None: page_envelope([1], True, page_token="p2"),
            "p2": page_envelope([2], False),
        }

        async def fetch(params):
            return responses[params["page_token"]]

        iterator = PageIterator(fetch)

        first = await collect(iterator)
        second = await collect(iterator)

        assert first == second == [{"items": [1]}, {"items": [2]}]

    @pytest.mark.asyncio
    async def test_base_params_are_not_mutated(self):
        params = {"page_size": 10}
        fetch = AsyncMock(
            side_effect=[page_envelope([1], True, page_token="a"), page_envelope([2], False)]
        )

        await collect(PageIterator(fetch, params))

        assert params == {"page_size": 10}


# =============================================================================
# Tagged Results Tests
# =============================================================================


class TestPageResults:
    """Tests for results() and items()."""

    @pytest.mark.asyncio
    async def test_results_end_with_end_marker(self):
        fetch = AsyncMock(
            side_effect=[page_envelope([1], True, page_token="a"), page_envelope([2], False)]
        )

        results = await collect(PageIterator(fetch).results())

        assert [r.kind for r in results] == [
            PageResultKind.ITEM,
            PageResultKind.ITEM,
            PageResultKind.END,
        ]
        assert results[0].value == {"items": [1]}
        assert results[-1].value is None

    @pytest.mark.asyncio
    async def test_results_carry_the_error(self):
        error = RequestError("boom", status_code=500)
        fetch = AsyncMock(side_effect=[page_envelope([1], True, page_token="a"), error])

        results = await collect(PageIterator(fetch).results())

        assert [r.kind for r in results] == [PageResultKind.ITEM, PageResultKind.FAULT]
        assert results[-1].error is error
        assert not results[-1].ok

    @pytest.mark.asyncio
    async def test_items_flattens_pages(self):
        fetch = AsyncMock(
            side_effect=[
                page_envelope([1, 2], True, page_token="a"),
                page_envelope([], True, page_token="b"),
                page_envelope([3], False),
            ]
        )

        assert await collect(paginate(fetch).items()) == [1, 2, 3]

    def test_constructors(self):
        assert PageResult.item({"a": 1}).ok
        assert PageResult.end().kind is PageResultKind.END
        assert PageResult.fault(ValueError("x")).kind is PageResultKind.FAULT
